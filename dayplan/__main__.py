"""
dayplan - Main entry point.
"""

import sys

from dayplan.cli import main

if __name__ == "__main__":
    sys.exit(main())
