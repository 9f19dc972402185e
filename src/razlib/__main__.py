"""Allow running as ``python -m razlib``."""

import sys

from razlib.cli import main

sys.exit(main())
