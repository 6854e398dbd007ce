from familyvault.cli import main

raise SystemExit(main())
