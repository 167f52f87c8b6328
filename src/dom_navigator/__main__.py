"""Allow ``python -m dom_navigator``."""

import sys

from dom_navigator.cli import main

sys.exit(main())
