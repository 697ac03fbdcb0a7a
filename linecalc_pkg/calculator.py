"""Calculator session: parses a line and dispatches it to the evaluator or the solver."""

from __future__ import annotations

from dataclasses import replace

from .environment import Environment
from .evaluator import evaluate
from .logging_config import get_logger
from .nodes import Assignment, Expression, FunctionDefinition, PlotRequest, SolveFor
from .parser import parse
from .solver import solve_for
from .types import NumberValue, PlotValue, Solved, Value, Void

logger = get_logger("calculator")


class Calculator:
    """One session with its own environment.

    Examples:
        >>> calc = Calculator()
        >>> calc.execute("1 + 2")
        NumberValue(value=3.0)
        >>> calc.execute("a := 6")
        Void()
        >>> calc.execute("solve 3 * x - 2 = x + a for x")
        Solved(variable='x', value=4.0)
        >>> calc.execute("fun(x, y) := y - x")
        Void()
        >>> calc.execute("fun(1.5 * 2, 3 + a) - 4")
        NumberValue(value=2.0)
    """

    def __init__(self, environment: Environment | None = None):
        self.environment = environment if environment is not None else Environment()

    def execute(self, line: str) -> Value:
        """Execute one statement line.

        Args:
            line: Statement text

        Returns:
            Void for assignments and definitions, NumberValue for expressions,
            Solved for solve statements, PlotValue for plot statements

        Raises:
            ParseError: The line does not match the grammar
            CalcError: Evaluation failed or a constant was reassigned
            SolverError: The equation is not linear in the requested variable
        """
        statement = parse(line)
        env = self.environment
        if isinstance(statement, Expression):
            return NumberValue(evaluate(statement.operand, env))
        if isinstance(statement, Assignment):
            value = evaluate(statement.operand, env)
            env.put(statement.symbol, value)
            logger.debug("assigned %s = %r", statement.symbol, value)
            return Void()
        if isinstance(statement, SolveFor):
            value = solve_for(statement.lhs, statement.rhs, statement.symbol, env)
            return Solved(statement.symbol, value)
        if isinstance(statement, FunctionDefinition):
            function = replace(statement.function, closure=env.snapshot())
            env.put_function(statement.name, function)
            logger.debug("defined %s(%s)", statement.name, ", ".join(function.params))
            return Void()
        if isinstance(statement, PlotRequest):
            return PlotValue(statement.name)
        raise TypeError(f"Unknown statement: {statement!r}")
