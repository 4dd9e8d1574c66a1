import sys

from repixel.cli import main

sys.exit(main())
