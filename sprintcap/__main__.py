from sprintcap.cli import main

raise SystemExit(main())
