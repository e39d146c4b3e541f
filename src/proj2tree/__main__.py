from proj2tree.cli import main

raise SystemExit(main())
