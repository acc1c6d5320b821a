from .login import main

raise SystemExit(main())
