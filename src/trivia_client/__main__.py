"""Allow ``python -m trivia_client``."""

import sys

from .cli import main

sys.exit(main())
