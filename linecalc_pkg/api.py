"""Public API for linecalc - returns structured objects instead of raising."""

from __future__ import annotations

from .calculator import Calculator
from .logging_config import get_logger
from .parser import parse
from .types import (
    CalculatorError,
    ExecResult,
    NumberValue,
    ParseError,
    PlotValue,
    Solved,
    Value,
)

logger = get_logger("api")


def to_result(value: Value) -> ExecResult:
    """Convert a session value into an ExecResult."""
    if isinstance(value, NumberValue):
        return ExecResult(ok=True, result_type="number", value=value.value)
    if isinstance(value, Solved):
        return ExecResult(
            ok=True, result_type="solved", value=value.value, variable=value.variable
        )
    if isinstance(value, PlotValue):
        return ExecResult(ok=True, result_type="plot", function=value.name)
    return ExecResult(ok=True, result_type="void")


def recursion_limit_result() -> ExecResult:
    """Failure reported when evaluation runs out of Python stack."""
    return ExecResult(
        ok=False,
        error="Evaluation exceeded the maximum recursion depth",
        error_code="RECURSION_LIMIT",
    )


def run_line(line: str, calculator: Calculator | None = None) -> ExecResult:
    """Execute a line and report the outcome as an ExecResult.

    Args:
        line: Statement text (e.g., "a := 2", "solve 2*x = a for x")
        calculator: Session to execute in (a fresh one if omitted)

    Returns:
        ExecResult with ok=True and the value, or ok=False with error and error_code

    Example:
        >>> from linecalc_pkg.api import run_line
        >>> run_line("solve x = 10 for x").to_dict()
        {'ok': True, 'type': 'solved', 'value': 10.0, 'variable': 'x'}
        >>> run_line("y + 1").error_code
        'UNKNOWN_SYMBOL'
    """
    if calculator is None:
        calculator = Calculator()
    try:
        return to_result(calculator.execute(line))
    except CalculatorError as e:
        logger.debug("statement %r failed: %s (%s)", line, e.message, e.code)
        return ExecResult(ok=False, error=e.message, error_code=e.code)
    except RecursionError:
        logger.warning("recursion limit reached while executing %r", line)
        return recursion_limit_result()


def validate_statement(line: str) -> tuple[bool, str | None]:
    """Check a line against the grammar without executing it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from linecalc_pkg.api import validate_statement
        >>> validate_statement("f(x) := x ^ 2")
        (True, None)
        >>> validate_statement("a :=")
        (False, 'Expected an expression, but got ``')
    """
    try:
        parse(line)
        return True, None
    except ParseError as e:
        return False, e.message
