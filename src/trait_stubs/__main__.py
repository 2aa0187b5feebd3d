"""
Entry point for module execution (``python -m trait_stubs``).
"""

import sys
from trait_stubs.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
