from mechmania.cli import main

raise SystemExit(main())
