"""Core models, errors and runtime helpers for crosup-setup."""
