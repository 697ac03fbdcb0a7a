#!/usr/bin/env python3
"""
linecalc - line-oriented calculator

Main entry point for the linecalc calculator application.
This file serves as a thin wrapper that delegates all functionality
to the linecalc_pkg package.

Usage:
    python linecalc.py                           # Interactive REPL
    python linecalc.py -e "a := 2" -e "a ^ 10"   # Execute statements in one session
    python linecalc.py --help                    # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for linecalc.

    Delegates all functionality to the linecalc_pkg.cli module,
    which handles argument parsing, statement execution, and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from linecalc_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import linecalc_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
