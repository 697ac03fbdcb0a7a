from __future__ import annotations

import argparse
import json
import math
from typing import Any

from .api import recursion_limit_result, run_line
from .calculator import Calculator
from .config import (
    HISTORY_FILE,
    PLOT_HEIGHT,
    PLOT_WIDTH,
    PLOT_X_MAX,
    PLOT_X_MIN,
    PLOT_Y_MAX,
    PLOT_Y_MIN,
    VERSION,
)
from .graph import Area, Graph
from .logging_config import get_logger, setup_logging
from .nodes import CustomFunction
from .parser import format_number
from .symbolic import describe_function
from .types import ExecResult, GraphError

logger = get_logger("cli")


def _plot_area() -> Area:
    return Area.from_bounds(PLOT_X_MIN, PLOT_Y_MIN, PLOT_X_MAX, PLOT_Y_MAX)


def _render_plot(
    res: dict[str, Any], calculator: Calculator, plot_file: str | None
) -> dict[str, Any]:
    """Attach the rendered plot (ASCII text or saved file) to a plot result."""
    from .plotting import render_ascii, save_plot

    try:
        graph = Graph.from_environment(res["function"], calculator.environment)
    except GraphError as e:
        return {"ok": False, "error": e.message, "error_code": e.code}
    area = _plot_area()
    try:
        if plot_file:
            res["file"] = save_plot(graph, area, plot_file)
        else:
            screen = Area.from_bounds(0, 0, PLOT_WIDTH, PLOT_HEIGHT)
            res["ascii"] = render_ascii(graph.plot(area, screen))
    except OSError as e:
        logger.error("could not write plot file %s: %s", plot_file, e)
        return {
            "ok": False,
            "error": f"Could not write plot file: {e}",
            "error_code": "PLOT_FILE_ERROR",
        }
    except RecursionError:
        logger.warning("recursion limit reached while plotting %s", res["function"])
        return recursion_limit_result().to_dict()
    return res


def _json_safe(res: dict[str, Any]) -> dict[str, Any]:
    """Replace inf and nan, which JSON cannot represent, with their printed form."""
    return {
        key: format_number(value)
        if isinstance(value, float) and not math.isfinite(value)
        else value
        for key, value in res.items()
    }


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary (see ExecResult.to_dict)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(_json_safe(res), indent=2, ensure_ascii=False, allow_nan=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    typ = res.get("type")
    if typ == "number":
        print(format_number(res["value"]))
    elif typ == "solved":
        print(f"{res['variable']} = {format_number(res['value'])}")
    elif typ == "plot":
        if "file" in res:
            print(f"Plot of {res['function']} saved to: {res['file']}")
        else:
            print(res.get("ascii", ""))
    # "void" prints nothing


def execute_and_print(
    calculator: Calculator,
    line: str,
    output_format: str = "human",
    plot_file: str | None = None,
) -> bool:
    """Execute one line in ``calculator`` and print the outcome.

    Returns:
        True if the statement succeeded
    """
    result: ExecResult = run_line(line, calculator)
    res = result.to_dict()
    if result.ok and result.result_type == "plot":
        res = _render_plot(res, calculator, plot_file)
    print_result_pretty(res, output_format=output_format)
    return bool(res.get("ok"))


def print_variables(calculator: Calculator) -> None:
    env = calculator.environment
    for name, value in sorted(env.variables().items()):
        suffix = " (constant)" if env.is_constant(name) else ""
        print(f"{name} = {format_number(value)}{suffix}")


def print_functions(calculator: Calculator, include_builtins: bool = False) -> None:
    functions = calculator.environment.functions()
    shown = 0
    for name in sorted(functions):
        function = functions[name]
        if include_builtins or isinstance(function, CustomFunction):
            print(describe_function(name, function))
            shown += 1
    if not shown:
        print("No functions defined. Define one with: f(x) := x ^ 2")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running linecalc health check...")
    print("-" * 50)

    for module_name in ("numpy", "sympy", "matplotlib"):
        try:
            module = __import__(module_name)
            print(f"[OK] {module_name} {module.__version__} imported successfully")
            checks_passed += 1
        except ImportError as e:
            print(f"[FAIL] {module_name} import failed: {e}")
            checks_failed += 1

    checks = [
        ("Basic evaluation", ["1 + 2 * 3"], "number", 7.0),
        (
            "Function definition",
            ["fun(x, y) := y - x", "fun(1 + 2, 3 * 9) - 4"],
            "number",
            20.0,
        ),
        ("Basic solving", ["solve 3 * x - 2 = x + 6 for x"], "solved", 4.0),
    ]
    for label, lines, expected_type, expected_value in checks:
        calculator = Calculator()
        result = None
        for line in lines:
            result = run_line(line, calculator)
        if (
            result is not None
            and result.ok
            and result.result_type == expected_type
            and result.value == expected_value
        ):
            print(f"[OK] {label} works")
            checks_passed += 1
        else:
            print(f"[FAIL] {label} failed: {result!r}")
            checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def print_help_text() -> None:
    """Print help text for REPL commands."""
    help_text = f"""linecalc version {VERSION}

STATEMENTS (one per line):
  1 + 2 * 3 ^ 2               expression (^ binds tightest, right-associative)
  a := 6                       assign a variable
  f(x, y) := y - x             define a function
  f(1, a) % 4                  call it
  solve 3 * x - 2 = x + a for x
                               solve a linear equation for one variable
  plot f                       plot a one-parameter function

OPERATORS: + - * / % ^        (% is the floating-point remainder)
CONSTANTS: pi, e, tau          (cannot be reassigned)
FUNCTIONS: sin cos tan asin acos atan sinh cosh tanh asinh acosh atanh
           exp ln log log2 sqrt abs

REPL COMMANDS:
  help                         show this help message
  vars                         list variables
  funcs [all]                  list user-defined functions (all: with built-ins)
  health                       run health check
  quit, exit                   leave the calculator
"""
    print(help_text)


def _load_history() -> None:
    try:
        import readline
    except ImportError:
        return
    try:
        readline.read_history_file(HISTORY_FILE)
    except FileNotFoundError:
        logger.info("History file %s doesn't exist, not loading history.", HISTORY_FILE)
    except OSError as e:
        logger.warning("Could not load history file %s: %s", HISTORY_FILE, e)


def _save_history() -> None:
    try:
        import readline
    except ImportError:
        return
    try:
        readline.write_history_file(HISTORY_FILE)
    except OSError as e:
        logger.warning("Could not save history file %s: %s", HISTORY_FILE, e)


def repl_loop(output_format: str = "human", plot_file: str | None = None) -> None:
    """Interactive read-eval-print loop over one calculator session."""
    _load_history()
    calculator = Calculator()

    print("linecalc - type 'help' for commands, 'quit' to exit.")
    try:
        while True:
            try:
                raw = input("% > ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye.")
                break
            if not raw:
                continue
            command = raw.lower()
            if command in ("quit", "exit"):
                print("Goodbye.")
                break
            if command == "help":
                print_help_text()
            elif command == "vars":
                print_variables(calculator)
            elif command in ("funcs", "funcs all"):
                print_functions(calculator, include_builtins=command.endswith("all"))
            elif command == "health":
                _health_check()
            else:
                execute_and_print(calculator, raw, output_format, plot_file)
    finally:
        _save_history()


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for linecalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="linecalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        action="append",
        help="Execute a statement and exit (repeat to run several in one session)",
        dest="eval_lines",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "--plot-file", type=str, help="Save plots to this image file instead of drawing ASCII"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    # Apply CLI configuration overrides
    import linecalc_pkg.config as _config

    if args.precision and args.precision > 0:
        _config.OUTPUT_PRECISION = int(args.precision)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.eval_lines:
        calculator = Calculator()
        ok = True
        for line in args.eval_lines:
            ok = execute_and_print(calculator, line, args.format, args.plot_file) and ok
        return 0 if ok else 1

    repl_loop(output_format=args.format, plot_file=args.plot_file)
    return 0


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m linecalc_pkg.cli"""
    import sys

    sys.exit(main_entry())
