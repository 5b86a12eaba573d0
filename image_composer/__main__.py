from image_composer.cli import main

raise SystemExit(main())
