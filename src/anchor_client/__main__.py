"""Allow ``python -m anchor_client``."""

import sys

from anchor_client.cli import main

if __name__ == "__main__":
    sys.exit(main())
