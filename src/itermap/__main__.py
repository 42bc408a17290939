# src/itermap/__main__.py
from itermap.cli import main

raise SystemExit(main())
