from shorthand.shorthand_cli import main

raise SystemExit(main())
