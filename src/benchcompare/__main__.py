"""Allow ``python -m benchcompare``."""

import sys

from benchcompare.cli import main

sys.exit(main())
