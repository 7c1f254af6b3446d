from matheval.repl import main

raise SystemExit(main())
