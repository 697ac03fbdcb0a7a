"""Sampling a one-parameter function and projecting it into screen space.

A ``Graph`` pairs a function with a snapshot of the environment it was
requested in. ``Plot`` samples it once per screen column and maps every value
from the plotted ``Area`` into screen coordinates; samples outside the area
are ``None``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from itertools import count

from .environment import Environment
from .evaluator import call_function
from .nodes import BuiltinFunction, Function
from .types import CalculatorError, GraphError


@dataclass
class Range:
    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min >= self.max:
            raise ValueError(f"min {self.min!r} must be smaller than max {self.max!r}")

    def is_in_range(self, pos: float) -> bool:
        return self.min <= pos <= self.max

    @property
    def distance(self) -> float:
        return self.max - self.min

    def project(self, pos: float, to: Range) -> float | None:
        """Map ``pos`` from this range onto ``to``; ``None`` outside ``[min, max)``."""
        if self.min <= pos < self.max:
            return to.min + ((pos - self.min) / self.distance) * to.distance
        return None

    def move_by(self, delta: float) -> None:
        self.min += delta
        self.max += delta


@dataclass
class Area:
    x: Range
    y: Range

    @classmethod
    def from_bounds(cls, x_min: float, y_min: float, x_max: float, y_max: float) -> Area:
        return cls(Range(x_min, x_max), Range(y_min, y_max))

    def move_by(self, x_delta: float, y_delta: float) -> None:
        self.x.move_by(x_delta)
        self.y.move_by(y_delta)


@dataclass(frozen=True)
class Tic:
    pos: float
    label: float


def create_tics(screen: Range, area: Range) -> list[Tic]:
    """Tic marks one decade below the area width, anchored at 0 when it is visible."""
    width = 10.0 ** round(math.log10(area.distance) - 1.0)
    if area.is_in_range(0.0):
        left = []
        for step in count(1):
            label = -step * width
            if label <= area.min:
                break
            left.append(label)
        right = []
        for step in count(0):
            label = step * width
            if label >= area.max:
                break
            right.append(label)
        labels = left[::-1] + right
    else:
        start = math.ceil(area.min / width)
        labels = []
        for step in count(start):
            label = step * width
            if label >= area.max:
                break
            labels.append(label)
    tics = []
    for label in labels:
        # ceil(min / width) * width can round to just below min
        pos = area.project(label, screen)
        if pos is not None:
            tics.append(Tic(pos, label))
    return tics


@dataclass
class Axis:
    pos: float
    tics: list[Tic] = field(default_factory=list)

    @classmethod
    def create(cls, pos: float | None, screen: Range, area: Range) -> Axis | None:
        if pos is None:
            return None
        return cls(pos, create_tics(screen, area))


class Graph:
    """A one-parameter function ready to be sampled."""

    def __init__(self, name: str, function: Function, env: Environment):
        self.name = name
        self.function = function
        self.env = env

    @classmethod
    def from_environment(cls, name: str, env: Environment) -> Graph:
        """Look up ``name`` and snapshot ``env`` for sampling.

        Raises:
            GraphError: UNKNOWN_FUNCTION if there is no such function,
                UNSUPPORTED_ARITY if it does not take exactly one parameter
        """
        function = env.get_function(name)
        if function is None:
            raise GraphError(f"Unknown function `{name}` to plot", "UNKNOWN_FUNCTION", name)
        arity = 1 if isinstance(function, BuiltinFunction) else len(function.params)
        if arity != 1:
            raise GraphError(
                f"Only functions of one parameter can be plotted, `{name}` takes {arity}",
                "UNSUPPORTED_ARITY",
                name,
            )
        return cls(name, function, env.snapshot())

    @property
    def parameter(self) -> str:
        if isinstance(self.function, BuiltinFunction):
            return self.function.param
        return self.function.params[0]

    def calc(self, x: float) -> float | None:
        """Value at ``x``, or ``None`` where the function cannot be evaluated."""
        try:
            return call_function(self.name, self.function, [x], self.env)
        except CalculatorError:
            return None

    def plot(self, area: Area, screen: Area) -> Plot:
        return Plot.create(self, area, screen)


@dataclass
class Plot:
    points: list[float | None]
    screen: Area
    x_axis: Axis | None
    y_axis: Axis | None

    @classmethod
    def create(cls, graph: Graph, area: Area, screen: Area) -> Plot:
        points: list[float | None] = []
        for column in range(int(screen.x.min), int(screen.x.max)):
            x = screen.x.project(float(column), area.x)
            y = graph.calc(x) if x is not None else None
            points.append(area.y.project(y, screen.y) if y is not None else None)
        x_axis = Axis.create(area.y.project(0.0, screen.y), screen.y, area.y)
        y_axis = Axis.create(area.x.project(0.0, screen.x), screen.x, area.x)
        return cls(points, screen, x_axis, y_axis)
