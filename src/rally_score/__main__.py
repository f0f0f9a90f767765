"""Allow running as: python -m rally_score"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
