import sys

from mathsheet.cli import main

sys.exit(main())
