"""Entry point: python -m waitfor"""

import sys

from waitfor.cli import main

if __name__ == "__main__":
    sys.exit(main())
