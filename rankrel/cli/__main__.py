"""
rankrel CLI entry point.

Usage:
    python -m rankrel.cli run --out OUT_DIR a.txt b.txt
    python -m rankrel.cli consensus a.txt b.txt
    python -m rankrel.cli summary a.txt b.txt
    python -m rankrel.cli positions a.txt a.txt b.txt
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
