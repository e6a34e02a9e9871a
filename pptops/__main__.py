"""Entry point for ``python -m pptops``."""

import sys

from pptops.ranking.engine import main

if __name__ == "__main__":
    sys.exit(main())
