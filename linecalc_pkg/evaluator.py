"""Numeric evaluation of operand trees.

Arithmetic follows IEEE-754: division by zero, overflow and domain errors
produce ``inf``/``nan`` rather than exceptions. Only unresolved names and
arity mismatches raise ``CalcError``.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .environment import Environment, ScopedEnvironment
from .nodes import (
    BuiltinFunction,
    CustomFunction,
    Function,
    FunctionCall,
    Number,
    Operand,
    Operation,
    Symbol,
    Term,
)
from .types import CalcError

AnyEnvironment = Union[Environment, ScopedEnvironment]

_UFUNCS = {
    Operation.ADD: np.add,
    Operation.SUB: np.subtract,
    Operation.MUL: np.multiply,
    Operation.DIV: np.divide,
    Operation.REM: np.fmod,
    Operation.POW: np.power,
}


def apply_operation(operation: Operation, lhs: float, rhs: float) -> float:
    """Apply a binary operation with floating-point semantics (``%`` is fmod)."""
    with np.errstate(all="ignore"):
        return float(_UFUNCS[operation](np.float64(lhs), np.float64(rhs)))


def apply_transform(function: BuiltinFunction, value: float) -> float:
    with np.errstate(all="ignore"):
        return float(function.transform(np.float64(value)))


def left_spine(term: Term) -> tuple[list[Term], Operand]:
    """Terms along the left edge of ``term``, innermost first, and the operand below them.

    Left-associative chains grow along this edge, so walking it in a loop
    keeps recursion bounded by the nesting depth rather than the chain length.
    """
    spine: list[Term] = []
    node: Operand = term
    while isinstance(node, Term):
        spine.append(node)
        node = node.lhs
    spine.reverse()
    return spine, node


def evaluate(operand: Operand, env: AnyEnvironment) -> float:
    """Reduce an operand to a number.

    Args:
        operand: Operand tree
        env: Environment providing variables and functions

    Returns:
        The value as float (may be inf or nan)

    Raises:
        CalcError: UNKNOWN_SYMBOL, UNKNOWN_FUNCTION or UNEXPECTED_NUMBER_OF_PARAMETERS
    """
    if isinstance(operand, Number):
        return operand.value
    if isinstance(operand, Symbol):
        value = env.get(operand.name)
        if value is None:
            raise CalcError.unknown_symbol(operand.name)
        return value
    if isinstance(operand, Term):
        spine, leftmost = left_spine(operand)
        value = evaluate(leftmost, env)
        for term in spine:
            value = apply_operation(term.operation, value, evaluate(term.rhs, env))
        return value
    if isinstance(operand, FunctionCall):
        return _evaluate_call(operand, env)
    raise TypeError(f"Not an operand: {operand!r}")


def _evaluate_call(call: FunctionCall, env: AnyEnvironment) -> float:
    function = env.get_function(call.name)
    if function is None:
        raise CalcError.unknown_function(call.name)
    _check_arity(call.name, function, len(call.args))
    values = [evaluate(arg, env) for arg in call.args]
    return call_function(call.name, function, values, env)


def _check_arity(name: str, function: Function, actual: int) -> None:
    expected = 1 if isinstance(function, BuiltinFunction) else len(function.params)
    if actual != expected:
        raise CalcError.unexpected_number_of_parameters(name, expected, actual)


def call_function(
    name: str, function: Function, values: Sequence[float], env: AnyEnvironment
) -> float:
    """Apply a resolved function to evaluated arguments.

    A custom function body sees its parameters first, then the variables of
    the environment captured when it was defined. Functions defined without a
    captured environment fall back to the top level of ``env``.

    Raises:
        CalcError: UNEXPECTED_NUMBER_OF_PARAMETERS, or any error of the body
    """
    _check_arity(name, function, len(values))
    if isinstance(function, BuiltinFunction):
        return apply_transform(function, values[0])
    if isinstance(function, CustomFunction):
        parent = function.closure if function.closure is not None else env.top_level()
        scope = ScopedEnvironment(parent, dict(zip(function.params, values)))
        return evaluate(function.body, scope)
    raise TypeError(f"Not a function: {function!r}")
