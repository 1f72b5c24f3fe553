"""
Main entry point for the Order Timeline application.
"""

import sys

from src.utils.order_timeline_cli import main

if __name__ == "__main__":
    sys.exit(main())
