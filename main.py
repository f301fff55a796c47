"""
LocalTable: schema-validated tables over a key-value store
=========================================================
Entry point for running the command line from a source checkout.

Usage:
    python main.py [options] TABLE COMMAND [ARGS]
    python main.py --help
"""

import sys

from localtable.cli.main import main


if __name__ == "__main__":
    sys.exit(main())
