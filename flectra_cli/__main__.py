"""
Module execution entry point.

Allows running with: python -m flectra_cli
"""

import sys
from flectra_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
