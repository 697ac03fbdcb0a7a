"""Linear equation solving module.

Both sides of an equation are normalized into ``a1 * variable + a0`` and the
variable is isolated algebraically. Only linear equations are handled:

- the variable multiplied by itself fails with UNSUPPORTED_X_SQUARE
- the variable in a denominator fails with UNSUPPORTED_X_DENOMINATOR
- the variable inside ``%`` or ``^`` fails with UNSUPPORTED_REMAINDER / UNSUPPORTED_POWER
- an equation in which the variable cancels fails with NO_VARIABLE

Function calls are evaluated numerically and never looked into, so a use of
the variable inside a call argument is resolved like any other symbol.
"""

from __future__ import annotations

from dataclasses import dataclass

from .environment import Environment
from .evaluator import apply_operation, evaluate, left_spine
from .logging_config import get_logger
from .nodes import FunctionCall, Number, Operand, Operation, Symbol, Term
from .types import SolverError

logger = get_logger("solver")


@dataclass(frozen=True)
class NormalForm:
    """``a1 * variable + a0``"""

    a1: float
    a0: float


def _combine(operation: Operation, lhs: NormalForm, rhs: NormalForm) -> NormalForm:
    if operation is Operation.ADD:
        return NormalForm(lhs.a1 + rhs.a1, lhs.a0 + rhs.a0)
    if operation is Operation.SUB:
        return NormalForm(lhs.a1 - rhs.a1, lhs.a0 - rhs.a0)
    if operation is Operation.MUL:
        if lhs.a1 * rhs.a1 != 0.0:
            raise SolverError.from_code("UNSUPPORTED_X_SQUARE")
        return NormalForm(lhs.a1 * rhs.a0 + rhs.a1 * lhs.a0, lhs.a0 * rhs.a0)
    if operation is Operation.DIV:
        if rhs.a1 != 0.0:
            raise SolverError.from_code("UNSUPPORTED_X_DENOMINATOR")
        return NormalForm(
            apply_operation(Operation.DIV, lhs.a1, rhs.a0),
            apply_operation(Operation.DIV, lhs.a0, rhs.a0),
        )
    if operation is Operation.REM:
        if lhs.a1 != 0.0 or rhs.a1 != 0.0:
            raise SolverError.from_code("UNSUPPORTED_REMAINDER")
        return NormalForm(0.0, apply_operation(Operation.REM, lhs.a0, rhs.a0))
    if lhs.a1 != 0.0 or rhs.a1 != 0.0:
        raise SolverError.from_code("UNSUPPORTED_POWER")
    return NormalForm(0.0, apply_operation(Operation.POW, lhs.a0, rhs.a0))


def normalize(operand: Operand, variable: str, env: Environment) -> NormalForm:
    """Rewrite an operand into slope/intercept form relative to ``variable``.

    Args:
        operand: Operand tree of one side of the equation
        variable: Name of the variable to isolate
        env: Environment resolving all other symbols and function calls

    Returns:
        NormalForm with slope ``a1`` and intercept ``a0``

    Raises:
        SolverError: UNKNOWN_VARIABLE or one of the UNSUPPORTED_* codes
        CalcError: From evaluating a function call
    """
    if isinstance(operand, Number):
        return NormalForm(0.0, operand.value)
    if isinstance(operand, Symbol):
        if operand.name == variable:
            return NormalForm(1.0, 0.0)
        value = env.get(operand.name)
        if value is None:
            raise SolverError.unknown_variable(operand.name)
        return NormalForm(0.0, value)
    if isinstance(operand, FunctionCall):
        return NormalForm(0.0, evaluate(operand, env))
    if isinstance(operand, Term):
        spine, leftmost = left_spine(operand)
        form = normalize(leftmost, variable, env)
        for term in spine:
            form = _combine(term.operation, form, normalize(term.rhs, variable, env))
        return form
    raise TypeError(f"Not an operand: {operand!r}")


def solve_for(lhs: Operand, rhs: Operand, variable: str, env: Environment) -> float:
    """Solve ``lhs = rhs`` for ``variable``.

    Example:
        ``solve 3*x - 2 = x + 6 for x`` normalizes to ``3x - 2`` and ``1x + 6``
        and yields ``(6 - -2) / (3 - 1) = 4``.

    Raises:
        SolverError: When the equation is not linear in ``variable``
        CalcError: From evaluating a function call inside the equation
    """
    left = normalize(lhs, variable, env)
    right = normalize(rhs, variable, env)
    logger.debug("normalized for %s: lhs=%s rhs=%s", variable, left, right)
    denominator = left.a1 - right.a1
    if denominator == 0.0:
        raise SolverError.from_code("NO_VARIABLE")
    return apply_operation(Operation.DIV, right.a0 - left.a0, denominator)
