"""Variable and function bindings.

The top-level ``Environment`` belongs to one calculator session. A
``ScopedEnvironment`` exists only while a custom function body is evaluated:
it binds the parameters and falls through to its parent for everything else.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .config import BUILTIN_CONSTANTS, BUILTIN_FUNCTIONS, BUILTIN_PARAMETER
from .nodes import BuiltinFunction, Function
from .types import CalcError


def _builtin_functions() -> dict[str, Function]:
    return {
        name: BuiltinFunction(name, BUILTIN_PARAMETER, transform)
        for name, transform in BUILTIN_FUNCTIONS.items()
    }


class Environment:
    """Top-level bindings: variables (some of them read-only constants) and functions."""

    def __init__(self) -> None:
        # name -> (value, is_constant)
        self._variables: dict[str, tuple[float, bool]] = {
            name: (value, True) for name, value in BUILTIN_CONSTANTS.items()
        }
        self._functions: dict[str, Function] = _builtin_functions()

    def get(self, name: str) -> float | None:
        binding = self._variables.get(name)
        return binding[0] if binding is not None else None

    def get_function(self, name: str) -> Function | None:
        return self._functions.get(name)

    def is_constant(self, name: str) -> bool:
        binding = self._variables.get(name)
        return binding is not None and binding[1]

    def put(self, name: str, value: float) -> None:
        """Bind ``name`` to ``value``.

        Raises:
            CalcError: CANNOT_CHANGE_CONSTANT if ``name`` is a built-in constant
        """
        if self.is_constant(name):
            raise CalcError.cannot_change_constant(name)
        self._variables[name] = (value, False)

    def put_function(self, name: str, function: Function) -> None:
        self._functions[name] = function

    def variables(self, include_constants: bool = True) -> dict[str, float]:
        return {
            name: value
            for name, (value, constant) in self._variables.items()
            if include_constants or not constant
        }

    def functions(self) -> Mapping[str, Function]:
        return MappingProxyType(self._functions)

    def snapshot(self) -> Environment:
        """Copy of the current variables sharing this environment's function table."""
        copy = Environment.__new__(Environment)
        copy._variables = dict(self._variables)
        copy._functions = self._functions
        return copy

    def top_level(self) -> Environment:
        return self

    def __repr__(self) -> str:
        return (
            f"Environment(variables={len(self._variables)}, "
            f"functions={len(self._functions)})"
        )


class ScopedEnvironment:
    """Parameter bindings of one function call, chained to an enclosing environment."""

    def __init__(
        self, parent: Environment | ScopedEnvironment, bindings: Mapping[str, float]
    ) -> None:
        self.parent = parent
        self.bindings = dict(bindings)

    def get(self, name: str) -> float | None:
        if name in self.bindings:
            return self.bindings[name]
        return self.parent.get(name)

    def get_function(self, name: str) -> Function | None:
        return self.parent.get_function(name)

    def top_level(self) -> Environment:
        return self.parent.top_level()

    def __repr__(self) -> str:
        return f"ScopedEnvironment(bindings={self.bindings!r})"
