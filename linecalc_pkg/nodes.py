"""Syntax tree for statements of the expression language.

Nodes are immutable plain data produced by the parser. Evaluation lives in
evaluator.py, symbolic normalization in solver.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from .environment import Environment


class Operation(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    POW = "^"


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Symbol:
    name: str


@dataclass(frozen=True)
class Term:
    operation: Operation
    lhs: Operand
    rhs: Operand


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: tuple[Operand, ...] = ()


Operand = Union[Number, Symbol, Term, FunctionCall]


@dataclass(frozen=True)
class CustomFunction:
    """User-defined function.

    ``closure`` is the environment snapshot taken when the definition was
    executed; the body resolves non-parameter symbols against it.
    """

    params: tuple[str, ...]
    body: Operand
    closure: Environment | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    param: str
    transform: Callable[[float], float] = field(compare=False, repr=False)


Function = Union[CustomFunction, BuiltinFunction]


@dataclass(frozen=True)
class Expression:
    operand: Operand


@dataclass(frozen=True)
class Assignment:
    symbol: str
    operand: Operand


@dataclass(frozen=True)
class SolveFor:
    lhs: Operand
    rhs: Operand
    symbol: str


@dataclass(frozen=True)
class FunctionDefinition:
    name: str
    function: CustomFunction


@dataclass(frozen=True)
class PlotRequest:
    name: str


Statement = Union[Expression, Assignment, SolveFor, FunctionDefinition, PlotRequest]
