"""Allow ``python -m scrim_manager``."""

import sys

from .cli import main

sys.exit(main())
