"""linecalc package: modularized components for parsing, evaluation, solving, plotting and CLI."""

__all__ = [
    "config",
    "nodes",
    "parser",
    "environment",
    "evaluator",
    "solver",
    "calculator",
    "graph",
    "plotting",
    "symbolic",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "Calculator",
    "run_line",
    "validate_statement",
    "parse",
    "evaluate",
    "solve_for",
]
