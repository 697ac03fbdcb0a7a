"""Session-level tests: statements executed one after another in a Calculator."""

import math
import unittest

import pytest

from linecalc_pkg.calculator import Calculator
from linecalc_pkg.types import (
    CalcError,
    CalculatorError,
    NumberValue,
    ParseError,
    PlotValue,
    Solved,
    SolverError,
    Void,
)


class TestCalculator(unittest.TestCase):
    def setUp(self):
        self.calc = Calculator()

    def run_lines(self, *lines):
        result = None
        for line in lines:
            result = self.calc.execute(line)
        return result

    def test_expression(self):
        self.assertEqual(self.calc.execute("1 + 2"), NumberValue(3.0))

    def test_assignment_round_trip(self):
        self.assertEqual(self.calc.execute("a := 2.75"), Void())
        self.assertEqual(self.calc.execute("a"), NumberValue(2.75))

    def test_reassignment(self):
        self.run_lines("a := 1", "a := a + 1", "a := a * 10")
        self.assertEqual(self.calc.execute("a"), NumberValue(20.0))

    def test_function_definition_and_call(self):
        self.assertEqual(self.calc.execute("fun(x, y) := y - x"), Void())
        self.assertEqual(self.calc.execute("fun(1 + 2, 3 * 9) - 4"), NumberValue(20.0))

    def test_solve(self):
        self.calc.execute("a := 6")
        self.assertEqual(
            self.calc.execute("solve 3 * x - 2 = x + a for x"), Solved("x", 4.0)
        )

    def test_solve_does_not_bind_variable(self):
        self.calc.execute("solve x = 10 for x")
        with self.assertRaises(CalcError):
            self.calc.execute("x")

    def test_plot_statement(self):
        self.calc.execute("f(x) := x ^ 2")
        self.assertEqual(self.calc.execute("plot f"), PlotValue("f"))

    def test_constant_unchanged_after_failed_assignment(self):
        with self.assertRaises(CalcError) as cm:
            self.calc.execute("e := 3")
        self.assertEqual(cm.exception.code, "CANNOT_CHANGE_CONSTANT")
        self.assertEqual(self.calc.execute("e"), NumberValue(math.e))

    def test_failed_assignment_leaves_environment_unchanged(self):
        self.calc.execute("a := 1")
        with self.assertRaises(CalcError):
            self.calc.execute("a := b + 1")
        self.assertEqual(self.calc.execute("a"), NumberValue(1.0))

    def test_parse_error_leaves_environment_unchanged(self):
        self.calc.execute("a := 1")
        with self.assertRaises(ParseError):
            self.calc.execute("a := 2 +")
        self.assertEqual(self.calc.execute("a"), NumberValue(1.0))

    def test_definition_captures_variables(self):
        self.run_lines("k := 2", "scale(x) := x * k", "k := 10")
        self.assertEqual(self.calc.execute("scale(3)"), NumberValue(6.0))

    def test_arguments_evaluated_at_call_time(self):
        self.run_lines("k := 2", "scale(x) := x * k", "k := 10")
        self.assertEqual(self.calc.execute("scale(k)"), NumberValue(20.0))

    def test_body_sees_functions_defined_later(self):
        self.run_lines("f(x) := g(x) + 1", "g(x) := x * 3")
        self.assertEqual(self.calc.execute("f(2)"), NumberValue(7.0))

    def test_redefinition_replaces_function(self):
        self.run_lines("f(x) := x", "f(x) := x + 1")
        self.assertEqual(self.calc.execute("f(1)"), NumberValue(2.0))

    def test_user_function_may_shadow_builtin(self):
        self.run_lines("sin(x) := 0")
        self.assertEqual(self.calc.execute("sin(pi / 2)"), NumberValue(0.0))

    def test_infinite_results_are_values(self):
        self.calc.execute("inf_value := 1 / 0")
        self.assertEqual(self.calc.execute("inf_value"), NumberValue(math.inf))

    def test_errors_share_base_class(self):
        for line in ("1 +", "nope", "solve x * x = 1 for x"):
            with self.assertRaises(CalculatorError):
                self.calc.execute(line)

    def test_solver_error_type(self):
        with self.assertRaises(SolverError):
            self.calc.execute("solve 1 / x = 2 for x")


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("2 + 3 * 4", 14.0),
        ("(2 + 3) * 4", 20.0),
        ("2 ^ 2 ^ 3", 256.0),
        ("20 / 5 * 2", 8.0),
        ("20 - 5 - 2", 13.0),
        ("9 % 4 * 3", 3.0),
        ("1 + 2 ^ 3 % 5", 4.0),
        ("3 * -4 + 1", -11.0),
    ],
)
def test_literal_expressions(expression, expected):
    assert Calculator().execute(expression) == NumberValue(expected)


@pytest.mark.parametrize("value", [0.0, -3.5, 1e-9, 123456.789, 2.0**52])
def test_assignment_round_trip_values(value):
    calc = Calculator()
    calc.execute(f"v := {value!r}" if value >= 0 else f"v := 0 - {-value!r}")
    assert calc.execute("v") == NumberValue(value)


def test_sessions_do_not_share_state():
    first = Calculator()
    second = Calculator()
    first.execute("a := 1")
    with pytest.raises(CalcError):
        second.execute("a")


if __name__ == "__main__":
    unittest.main()


def test_long_left_associative_chains():
    calc = Calculator()
    assert calc.execute(" + ".join(["1"] * 101)) == NumberValue(101.0)
    assert calc.execute(" - ".join(["1"] * 2000)) == NumberValue(-1998.0)
    calc.execute("f(x) := " + " + ".join(["x"] * 1000))
    assert calc.execute("f(2)") == NumberValue(2000.0)
