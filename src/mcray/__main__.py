"""Allow ``python -m mcray``."""

import sys

from mcray.cli import main

sys.exit(main())
