"""Conversion of syntax trees to SymPy expressions for display.

Used by the shell to list stored definitions. Numbers that are integral are
shown as integers, ``%`` becomes ``Mod`` and calls of built-ins map onto the
matching SymPy functions; any other call stays an undefined function.
"""

from __future__ import annotations

import re

import sympy as sp

from .evaluator import left_spine
from .nodes import CustomFunction, Function, FunctionCall, Number, Operand, Operation, Symbol, Term

SYMPY_FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "asinh": sp.asinh,
    "acosh": sp.acosh,
    "atanh": sp.atanh,
    "exp": sp.exp,
    "ln": sp.log,
    "log": lambda arg: sp.log(arg, 10),
    "log2": lambda arg: sp.log(arg, 2),
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
}


def _number(value: float) -> sp.Expr:
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def _combine(operation: Operation, lhs: sp.Expr, rhs: sp.Expr) -> sp.Expr:
    if operation is Operation.ADD:
        return lhs + rhs
    if operation is Operation.SUB:
        return lhs - rhs
    if operation is Operation.MUL:
        return lhs * rhs
    if operation is Operation.DIV:
        return lhs / rhs
    if operation is Operation.REM:
        return sp.Mod(lhs, rhs)
    return lhs**rhs


def to_sympy(operand: Operand) -> sp.Expr:
    """Convert an operand tree to a SymPy expression.

    Args:
        operand: Operand tree

    Returns:
        Equivalent SymPy expression (automatically simplified by SymPy's constructors)
    """
    if isinstance(operand, Number):
        return _number(operand.value)
    if isinstance(operand, Symbol):
        return sp.Symbol(operand.name)
    if isinstance(operand, FunctionCall):
        args = [to_sympy(arg) for arg in operand.args]
        known = SYMPY_FUNCTIONS.get(operand.name)
        if known is not None and len(args) == 1:
            return known(args[0])
        return sp.Function(operand.name)(*args)
    if isinstance(operand, Term):
        spine, leftmost = left_spine(operand)
        expr = to_sympy(leftmost)
        for term in spine:
            expr = _combine(term.operation, expr, to_sympy(term.rhs))
        return expr
    raise TypeError(f"Not an operand: {operand!r}")


def describe_operand(operand: Operand) -> str:
    """Readable one-line form of an operand, using ``^`` for powers."""
    return re.sub(r"\*\*", "^", sp.sstr(to_sympy(operand)))


def describe_function(name: str, function: Function) -> str:
    """Readable definition, e.g. ``fun(x, y) := -x + y``."""
    if isinstance(function, CustomFunction):
        params = ", ".join(function.params)
        return f"{name}({params}) := {describe_operand(function.body)}"
    return f"{name}({function.param}) (built-in)"
