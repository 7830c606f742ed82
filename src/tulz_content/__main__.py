"""Entry point for ``python -m tulz_content``."""

import sys

from tulz_content.cli import main

sys.exit(main())
