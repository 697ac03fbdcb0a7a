"""Tests for graph sampling and screen projection."""

import unittest

import pytest

from linecalc_pkg.calculator import Calculator
from linecalc_pkg.environment import Environment
from linecalc_pkg.graph import Area, Axis, Graph, Plot, Range, create_tics
from linecalc_pkg.nodes import CustomFunction, Symbol
from linecalc_pkg.parser import parse_operand
from linecalc_pkg.types import GraphError


class TestRange(unittest.TestCase):
    def test_construct_failure(self):
        with self.assertRaises(ValueError) as cm:
            Range(4.0, 3.0)
        self.assertIn("min 4.0 must be smaller than max 3.0", str(cm.exception))
        with self.assertRaises(ValueError):
            Range(1.0, 1.0)

    def test_distance(self):
        self.assertEqual(Range(10.0, 14.0).distance, 4.0)

    def test_is_in_range_is_closed(self):
        r = Range(-1.0, 1.0)
        self.assertTrue(r.is_in_range(-1.0))
        self.assertTrue(r.is_in_range(1.0))
        self.assertFalse(r.is_in_range(1.5))

    def test_project_plot_to_screen(self):
        plot = Range(-100.0, 100.0)
        screen = Range(0.0, 400.0)
        self.assertEqual(plot.project(0.0, screen), 200.0)
        self.assertEqual(plot.project(50.0, screen), 300.0)
        self.assertEqual(plot.project(-50.0, screen), 100.0)

    def test_project_plot_to_screen_out_of_range(self):
        plot = Range(-100.0, 100.0)
        screen = Range(0.0, 400.0)
        self.assertIsNone(plot.project(-101.0, screen))
        self.assertIsNone(plot.project(100.0, screen))

    def test_project_screen_to_plot(self):
        screen = Range(0.0, 400.0)
        plot = Range(-100.0, 100.0)
        self.assertEqual(screen.project(0.0, plot), -100.0)
        self.assertEqual(screen.project(100.0, plot), -50.0)
        self.assertEqual(screen.project(200.0, plot), 0.0)
        self.assertEqual(screen.project(300.0, plot), 50.0)
        self.assertEqual(screen.project(399.0, plot), 99.5)

    def test_project_screen_to_plot_out_of_range(self):
        screen = Range(0.0, 400.0)
        plot = Range(-100.0, 100.0)
        self.assertIsNone(screen.project(-1.0, plot))
        self.assertIsNone(screen.project(400.0, plot))

    def test_move_by(self):
        r = Range(0.0, 10.0)
        r.move_by(-5.0)
        self.assertEqual((r.min, r.max), (-5.0, 5.0))


class TestArea(unittest.TestCase):
    def test_from_bounds(self):
        area = Area.from_bounds(-1.0, -2.0, 3.0, 4.0)
        self.assertEqual(area.x, Range(-1.0, 3.0))
        self.assertEqual(area.y, Range(-2.0, 4.0))

    def test_move_by(self):
        area = Area.from_bounds(0.0, 0.0, 10.0, 10.0)
        area.move_by(1.0, -1.0)
        self.assertEqual(area, Area.from_bounds(1.0, -1.0, 11.0, 9.0))


class TestTics(unittest.TestCase):
    def test_tics_anchored_at_zero(self):
        tics = create_tics(Range(0.0, 40.0), Range(-100.0, 100.0))
        labels = [tic.label for tic in tics]
        self.assertEqual(labels.count(0.0), 1)
        self.assertEqual(labels[0], -90.0)
        self.assertEqual(labels[-1], 90.0)
        self.assertEqual(len(labels), 19)
        zero = tics[labels.index(0.0)]
        self.assertEqual(zero.pos, 20.0)

    def test_tics_without_zero(self):
        tics = create_tics(Range(0.0, 10.0), Range(1.0, 5.0))
        self.assertEqual([tic.label for tic in tics], [1.0, 2.0, 3.0, 4.0])
        self.assertEqual(tics[0].pos, 0.0)

    def test_tics_stay_inside_area(self):
        screen = Range(0.0, 10.0)
        for i in range(1, 400):
            start = i * 0.07
            area = Range(start, start + 0.5)
            for tic in create_tics(screen, area):
                self.assertIsNotNone(tic.pos, area)
                self.assertTrue(area.min <= tic.label < area.max, (area, tic))
                self.assertTrue(screen.min <= tic.pos <= screen.max, (area, tic))

    def test_axis_absent_when_zero_not_visible(self):
        self.assertIsNone(Axis.create(None, Range(0.0, 1.0), Range(0.0, 1.0)))


def _env_with(name, params, body):
    env = Environment()
    env.put_function(name, CustomFunction(params, parse_operand(body)))
    return env


class TestGraph(unittest.TestCase):
    def test_calc_identity(self):
        graph = Graph.from_environment("f", _env_with("f", ("x",), "x"))
        self.assertEqual(graph.calc(1.0), 1.0)

    def test_calc_failure_is_none(self):
        graph = Graph.from_environment("f", _env_with("f", ("x",), "x + undefined"))
        self.assertIsNone(graph.calc(1.0))

    def test_builtin(self):
        graph = Graph.from_environment("cos", Environment())
        self.assertEqual(graph.calc(0.0), 1.0)
        self.assertEqual(graph.parameter, "x")

    def test_parameter_name(self):
        graph = Graph.from_environment("g", _env_with("g", ("t",), "t * 2"))
        self.assertEqual(graph.parameter, "t")

    def test_unknown_function(self):
        with self.assertRaises(GraphError) as cm:
            Graph.from_environment("nope", Environment())
        self.assertEqual(cm.exception.code, "UNKNOWN_FUNCTION")

    def test_unsupported_arity(self):
        env = _env_with("h", ("x", "y"), "x + y")
        with self.assertRaises(GraphError) as cm:
            Graph.from_environment("h", env)
        self.assertEqual(cm.exception.code, "UNSUPPORTED_ARITY")

    def test_graph_uses_snapshot(self):
        calc = Calculator()
        calc.execute("f(x) := x")
        graph = Graph.from_environment("f", calc.environment)
        calc.execute("a := 1")
        self.assertIsNone(graph.env.get("a"))


class TestPlot:
    def test_construct_plot(self):
        env = Environment()
        env.put_function("f", CustomFunction(("x",), parse_operand("x * 2")))
        graph = Graph.from_environment("f", env)
        area = Area.from_bounds(-100.0, -100.0, 100.0, 100.0)
        screen = Area.from_bounds(0.0, 0.0, 40.0, 40.0)
        plot = graph.plot(area, screen)

        assert isinstance(plot, Plot)
        assert plot.x_axis.pos == 20.0
        assert plot.y_axis.pos == 20.0
        assert len(plot.points) == 40
        assert plot.points[0] is None
        assert plot.points[19] == 18.0
        assert plot.points[39] is None

    def test_parabola(self):
        env = Environment()
        env.put_function("sq", CustomFunction(("x",), parse_operand("x ^ 2")))
        graph = Graph.from_environment("sq", env)
        area = Area.from_bounds(-10.0, -10.0, 10.0, 10.0)
        screen = Area.from_bounds(0.0, 0.0, 60.0, 40.0)
        plot = graph.plot(area, screen)
        assert len(plot.points) == 60
        # x == 0 at the middle column
        assert plot.points[30] == 20.0
        assert plot.points[0] is None

    def test_axes_missing_when_area_excludes_zero(self):
        env = Environment()
        env.put_function("f", CustomFunction(("x",), Symbol("x")))
        graph = Graph.from_environment("f", env)
        plot = graph.plot(
            Area.from_bounds(1.0, 1.0, 5.0, 5.0), Area.from_bounds(0.0, 0.0, 10.0, 10.0)
        )
        assert plot.x_axis is None
        assert plot.y_axis is None

    @pytest.mark.parametrize("name", ["sqrt", "ln"])
    def test_nan_samples_are_gaps(self, name):
        graph = Graph.from_environment(name, Environment())
        plot = graph.plot(
            Area.from_bounds(-10.0, -10.0, 10.0, 10.0),
            Area.from_bounds(0.0, 0.0, 20.0, 20.0),
        )
        assert plot.points[0] is None


if __name__ == "__main__":
    unittest.main()
