"""Allow running the dispatcher with ``python -m gitlfs``."""

import sys

from gitlfs.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
