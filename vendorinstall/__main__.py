from vendorinstall.cli import main

raise SystemExit(main())
