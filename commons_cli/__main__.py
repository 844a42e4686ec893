"""
Module execution entry point.

Allows running with: python -m commons_cli
"""

import sys
from commons_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
