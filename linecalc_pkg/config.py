"""Centralized configuration for linecalc.

This module defines:
- Input validation limits (length, nesting depth)
- Output formatting precision
- Built-in constants and unary functions seeded into every environment
- Regex patterns used by the tokenizer
- Plot defaults for the shell

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with LINECALC_)
"""

import math
import os
import re

import numpy as np

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("linecalc")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("LINECALC_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("LINECALC_MAX_EXPRESSION_DEPTH", "100")
)  # nesting depth (left-associative chains do not count)

# Output
OUTPUT_PRECISION = int(os.getenv("LINECALC_OUTPUT_PRECISION", "12"))

# Plot defaults (screen size in characters, plotted area in user coordinates)
PLOT_WIDTH = int(os.getenv("LINECALC_PLOT_WIDTH", "60"))
PLOT_HEIGHT = int(os.getenv("LINECALC_PLOT_HEIGHT", "20"))
PLOT_X_MIN = float(os.getenv("LINECALC_PLOT_X_MIN", "-10"))
PLOT_X_MAX = float(os.getenv("LINECALC_PLOT_X_MAX", "10"))
PLOT_Y_MIN = float(os.getenv("LINECALC_PLOT_Y_MIN", "-10"))
PLOT_Y_MAX = float(os.getenv("LINECALC_PLOT_Y_MAX", "10"))
PLOT_SAMPLES = int(os.getenv("LINECALC_PLOT_SAMPLES", "400"))  # image plots only

# REPL history
HISTORY_FILE = os.getenv(
    "LINECALC_HISTORY_FILE", os.path.join(os.path.expanduser("~"), ".linecalc_history")
)

# Read-only constants seeded into every top-level environment
BUILTIN_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
}

# Unary built-ins. numpy ufuncs keep IEEE semantics (nan/inf instead of
# ValueError) for arguments outside the function's domain.
BUILTIN_FUNCTIONS = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "asin": np.arcsin,
    "acos": np.arccos,
    "atan": np.arctan,
    "sinh": np.sinh,
    "cosh": np.cosh,
    "tanh": np.tanh,
    "asinh": np.arcsinh,
    "acosh": np.arccosh,
    "atanh": np.arctanh,
    "exp": np.exp,
    "ln": np.log,
    "log": np.log10,
    "log2": np.log2,
    "sqrt": np.sqrt,
    "abs": np.abs,
}

BUILTIN_PARAMETER = "x"

# Words with a fixed meaning in the statement grammar
KEYWORDS = frozenset({"solve", "for", "plot"})

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

TOKEN_REGEX = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<number>\d[\d.]*(?:[eE][+-]?\d+)?)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<assign>:=)
  | (?P<op>[-+*/%^])
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<comma>,)
  | (?P<equals>=)
    """,
    re.VERBOSE,
)
