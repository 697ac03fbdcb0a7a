"""Tests for ASCII and image plot rendering."""

import os

import pytest

from linecalc_pkg.environment import Environment
from linecalc_pkg.graph import Area, Graph
from linecalc_pkg.nodes import CustomFunction
from linecalc_pkg.parser import parse_operand
from linecalc_pkg.plotting import render_ascii, save_plot


def make_graph(body, name="f"):
    env = Environment()
    env.put_function(name, CustomFunction(("x",), parse_operand(body)))
    return Graph.from_environment(name, env)


AREA = (-100.0, -100.0, 100.0, 100.0)
SCREEN = (0.0, 0.0, 40.0, 40.0)


def render(body):
    graph = make_graph(body)
    return render_ascii(graph.plot(Area.from_bounds(*AREA), Area.from_bounds(*SCREEN)))


class TestRenderAscii:
    def test_dimensions(self):
        lines = render("x * 2").split("\n")
        assert len(lines) == 40
        assert all(len(line) == 40 for line in lines)

    def test_samples_drawn_top_row_first(self):
        lines = render("x * 2").split("\n")
        # column 19 is projected to screen row 18, printed 21 lines from the top
        assert lines[21][19] == "*"

    def test_axes_and_crossing(self):
        lines = render("100").split("\n")
        assert "*" not in "".join(lines)
        assert lines[19][20] == "+"
        assert set(lines[19]) <= {"-", "+"}
        assert all(line[20] in "|+" for line in lines)

    def test_tic_marks_on_x_axis(self):
        lines = render("100").split("\n")
        # tics every 10 units, i.e. every 2 columns
        assert lines[19][0] == "-"
        assert lines[19][2] == "+"

    def test_no_axes_outside_area(self):
        graph = make_graph("x")
        text = render_ascii(
            graph.plot(
                Area.from_bounds(1.0, 1.0, 5.0, 5.0), Area.from_bounds(0.0, 0.0, 10.0, 10.0)
            )
        )
        assert "|" not in text
        assert "-" not in text
        assert "*" in text


class TestSavePlot:
    def test_writes_png(self, tmp_path):
        path = str(tmp_path / "f.png")
        graph = make_graph("x ^ 2 / 10")
        result = save_plot(graph, Area.from_bounds(-10.0, -10.0, 10.0, 10.0), path, samples=50)
        assert result == path
        assert os.path.getsize(path) > 0

    def test_gaps_for_undefined_values(self, tmp_path):
        path = str(tmp_path / "sqrt.svg")
        graph = Graph.from_environment("sqrt", Environment())
        save_plot(graph, Area.from_bounds(-10.0, -10.0, 10.0, 10.0), path)
        assert os.path.exists(path)

    def test_bad_path_raises(self, tmp_path):
        path = str(tmp_path / "missing_dir" / "f.png")
        with pytest.raises(OSError):
            save_plot(make_graph("x"), Area.from_bounds(-1.0, -1.0, 1.0, 1.0), path)
