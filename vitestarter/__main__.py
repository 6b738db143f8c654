"""Allow ``python -m vitestarter``."""

import sys

from vitestarter.cli import main

sys.exit(main())
