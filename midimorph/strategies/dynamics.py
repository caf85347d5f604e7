"""
Velocity curves for dynamics editing.

A curve maps (note index, onset time, current velocity) to a new velocity.
The note index counts sounding NoteOns in stream order, starting at 0.
Curves return raw numbers; rounding and range handling happen in the
dynamics operation so every curve gets the same clamp policy.
"""

from abc import ABC, abstractmethod
from typing import Callable, Sequence, Tuple, Union

import numpy as np

from ..core.errors import InvalidArgumentError
from ..core.fixed import FixedPoint
from ..core.models import Performance, is_note_start

VelocityFunction = Callable[[int, FixedPoint, int], float]


class DynamicsCurve(ABC):
    """Abstract base class for velocity curves."""

    @abstractmethod
    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        """
        Compute the new velocity for one NoteOn.

        Args:
            index: Ordinal of the NoteOn among sounding NoteOns
            time: Onset time of the NoteOn
            velocity: Current velocity

        Returns:
            New velocity (unrounded, unclamped)
        """
        pass

    def bind(self, performance: Performance) -> VelocityFunction:
        """
        Prepare the curve for one performance.

        Curves that need whole-performance context (note count, span)
        override this; the default ignores the performance.
        """
        return self.velocity


class ConstantCurve(DynamicsCurve):
    """Every NoteOn gets the same velocity."""

    def __init__(self, value: int):
        self.value = value

    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        return self.value


class ScaleCurve(DynamicsCurve):
    """Multiply every velocity by a factor."""

    def __init__(self, factor: float):
        if factor < 0:
            raise InvalidArgumentError(f"Velocity scale must be >= 0, got {factor}")
        self.factor = factor

    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        return velocity * self.factor


class LinearRampCurve(DynamicsCurve):
    """
    Crescendo or decrescendo across the NoteOns of a performance.

    The first sounding NoteOn gets `start`, the last gets `end`, and the ones
    in between are spaced evenly by index. `count` is the number of notes the
    ramp spans; bind() replaces it with the performance's note count.
    """

    def __init__(self, start: int, end: int, count: int = 2):
        self.start = start
        self.end = end
        self.count = count

    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        span = max(self.count - 1, 1)
        return self.start + (self.end - self.start) * index / span

    def bind(self, performance: Performance) -> VelocityFunction:
        count = sum(1 for e in performance if is_note_start(e))
        return LinearRampCurve(self.start, self.end, count).velocity


class EnvelopeCurve(DynamicsCurve):
    """
    Piecewise-linear velocity envelope over time.

    Before the first breakpoint and after the last one the envelope holds the
    edge value.
    """

    def __init__(self, points: Sequence[Tuple[Union[int, float, FixedPoint], float]]):
        if not points:
            raise InvalidArgumentError("EnvelopeCurve needs at least one breakpoint")
        ordered = sorted(
            ((FixedPoint.coerce(t).to_float(), float(v)) for t, v in points),
            key=lambda p: p[0],
        )
        self.times = np.array([t for t, _ in ordered])
        self.values = np.array([v for _, v in ordered])

    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        return float(np.interp(time.to_float(), self.times, self.values))


class FunctionCurve(DynamicsCurve):
    """
    Curve that calls a function.

    Useful for simple callbacks without creating a full DynamicsCurve class.
    """

    def __init__(self, callback: VelocityFunction):
        self.callback = callback

    def velocity(self, index: int, time: FixedPoint, velocity: int) -> float:
        return self.callback(index, time, velocity)


def as_curve(curve: Union[DynamicsCurve, VelocityFunction]) -> DynamicsCurve:
    """Wrap a plain callable in FunctionCurve; pass curves through."""
    if isinstance(curve, DynamicsCurve):
        return curve
    if callable(curve):
        return FunctionCurve(curve)
    raise InvalidArgumentError(f"Not a velocity curve: {curve!r}")
