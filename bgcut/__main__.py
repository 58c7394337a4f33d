import sys

from bgcut.cli import main

sys.exit(main())
