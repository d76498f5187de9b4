from dropkeys.cli import main

raise SystemExit(main())
