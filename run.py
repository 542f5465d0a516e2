"""Command-line entry point for the retro file conversion utility.

Equivalent to the ``retrofile`` console script installed with the package.
"""

from __future__ import annotations

import sys

from retrofile.cli import main

if __name__ == "__main__":
    sys.exit(main())
