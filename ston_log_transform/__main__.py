from ston_log_transform.cli import main

raise SystemExit(main())
