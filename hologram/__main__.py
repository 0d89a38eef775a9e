"""Entry point for python -m hologram."""

import sys

from hologram.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
