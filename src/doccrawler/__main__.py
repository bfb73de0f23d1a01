from doccrawler.cli import main

raise SystemExit(main())
