"""
Entry point for module execution (``python -m fetcher_wrap``).

This module delegates execution to the CLI handler in ``fetcher_wrap.cli.__main__``.
"""

import sys
from fetcher_wrap.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
