"""Entry point for running xpanel as a module.

Usage:
    python -m xpanel [command] [options]
"""

import sys

from xpanel.entrypoints.cli import main

if __name__ == "__main__":
    sys.exit(main())
