from pairsh.cli import main

raise SystemExit(main())
