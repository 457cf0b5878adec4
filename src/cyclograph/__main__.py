"""Allow ``python -m cyclograph``."""

import sys

from cyclograph.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
