"""
Module execution entry point.

Allows running with: python -m whitelist_cli
"""

import sys
from whitelist_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
