"""
Allow running SKOLL as a module: python -m skoll snapshot.json
"""

import sys

from skoll.app import main

if __name__ == "__main__":
    sys.exit(main())
