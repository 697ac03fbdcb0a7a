"""Error types, session values and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class CalculatorError(Exception):
    """Base class for every error raised while executing a statement."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(CalculatorError):
    """Raised when a line does not match the statement grammar.

    Attributes:
        text: The offending source fragment (may be empty)
        position: Character offset of the fragment, if known
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_EXPRESSION",
        text: str = "",
        position: int | None = None,
    ):
        self.text = text
        self.position = position
        super().__init__(message, code)


class CalcError(CalculatorError):
    """Raised when an operand cannot be evaluated or a binding is rejected.

    Attributes:
        name: Symbol or function name the error is about
        expected: Expected argument count (arity errors only)
        actual: Actual argument count (arity errors only)
    """

    def __init__(
        self,
        message: str,
        code: str,
        name: str | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(message, code)

    @classmethod
    def unknown_symbol(cls, name: str) -> CalcError:
        return cls(f"Unknown symbol `{name}`", "UNKNOWN_SYMBOL", name=name)

    @classmethod
    def unknown_function(cls, name: str) -> CalcError:
        return cls(f"Unknown function `{name}`", "UNKNOWN_FUNCTION", name=name)

    @classmethod
    def unexpected_number_of_parameters(
        cls, name: str, expected: int, actual: int
    ) -> CalcError:
        return cls(
            f"Function `{name}` expects {expected} parameter(s), but got {actual}",
            "UNEXPECTED_NUMBER_OF_PARAMETERS",
            name=name,
            expected=expected,
            actual=actual,
        )

    @classmethod
    def cannot_change_constant(cls, name: str) -> CalcError:
        return cls(
            f"Cannot change constant `{name}`", "CANNOT_CHANGE_CONSTANT", name=name
        )


class SolverError(CalculatorError):
    """Raised when an equation is outside the linear class the solver handles."""

    MESSAGES = {
        "UNSUPPORTED_X_SQUARE": "Equation contains the variable squared, only linear equations are supported",
        "UNSUPPORTED_X_DENOMINATOR": "Equation divides by the variable, only linear equations are supported",
        "UNSUPPORTED_REMAINDER": "Remainder of the variable is not supported",
        "UNSUPPORTED_POWER": "Power with the variable is not supported",
        "NO_VARIABLE": "The variable cancels out, the equation is either always true or never true",
    }

    def __init__(
        self, message: str, code: str = "SOLVER_ERROR", name: str | None = None
    ):
        self.name = name
        super().__init__(message, code)

    @classmethod
    def from_code(cls, code: str) -> SolverError:
        return cls(cls.MESSAGES[code], code)

    @classmethod
    def unknown_variable(cls, name: str) -> SolverError:
        return cls(f"Unknown variable `{name}`", "UNKNOWN_VARIABLE", name=name)


class GraphError(CalculatorError):
    """Raised when a function cannot be turned into a graph."""

    def __init__(self, message: str, code: str, name: str | None = None):
        self.name = name
        super().__init__(message, code)


@dataclass(frozen=True)
class Void:
    """Statement executed without a displayable result (assignment, definition)."""


@dataclass(frozen=True)
class NumberValue:
    """Value of an expression statement."""

    value: float


@dataclass(frozen=True)
class Solved:
    """Result of a ``solve ... for ...`` statement."""

    variable: str
    value: float


@dataclass(frozen=True)
class PlotValue:
    """Request to plot the named function, handed to the plotting collaborator."""

    name: str


Value = Union[Void, NumberValue, Solved, PlotValue]


@dataclass
class ExecResult:
    """Result of executing one line, never raising."""

    ok: bool
    result_type: str | None = None  # "void", "number", "solved", "plot"
    value: float | None = None
    variable: str | None = None
    function: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result_type is not None:
            result_dict["type"] = self.result_type
        if self.value is not None:
            result_dict["value"] = self.value
        if self.variable is not None:
            result_dict["variable"] = self.variable
        if self.function is not None:
            result_dict["function"] = self.function
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"ExecResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        parts = [f"ok={self.ok}", f"result_type={self.result_type!r}"]
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        if self.variable is not None:
            parts.append(f"variable={self.variable!r}")
        if self.function is not None:
            parts.append(f"function={self.function!r}")
        return f"ExecResult({', '.join(parts)})"
