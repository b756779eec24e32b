"""
Allow running the CLI as a module.

Usage:
    python -m filterql validate 'Age > 30 && Name @= "jo"'
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
