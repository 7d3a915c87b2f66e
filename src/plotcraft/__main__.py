"""
Entry point for running PlotCraft as a module.

Usage:
    python -m plotcraft render workspace.json -o drawing.svg
"""

import sys

from plotcraft.main import main

if __name__ == "__main__":
    sys.exit(main())
