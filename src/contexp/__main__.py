from contexp.cli import main

raise SystemExit(main())
