"""Module entry point so ``python -m classitag`` runs the CLI."""

import sys

from classitag.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
