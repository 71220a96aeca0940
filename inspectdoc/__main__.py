"""
Entry point for running inspectdoc as a module.

Usage:
    python -m inspectdoc render record.json --output report.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main() or 0)
