"""
Module execution entry point.

Allows running with: python -m wormhole_cli
"""

import sys
from wormhole_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
