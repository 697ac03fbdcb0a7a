"""Main entry point for running linecalc_pkg as a module.

This allows running linecalc with:
    python -m linecalc_pkg
    python -m linecalc_pkg --health-check
    python -m linecalc_pkg -e "1 + 2"

This is equivalent to running:
    python -m linecalc_pkg.cli
    python linecalc.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
