from crosup_setup.cli import main

raise SystemExit(main())
