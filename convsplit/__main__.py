"""Allow `python -m convsplit`."""

import sys

from .main import main

sys.exit(main())
