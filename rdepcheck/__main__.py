"""Allow ``python -m rdepcheck``."""

import sys

from rdepcheck.cli import main

sys.exit(main())
