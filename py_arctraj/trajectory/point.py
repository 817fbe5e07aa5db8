"""Arc-length parameterized trajectory of points.

`PointTrajectory` is the bottom layer of the trajectory stack. It interpolates the
x, y and z coordinates over a shared basis set of cumulative arc lengths and keeps
an active window `[start, end]` inside the underlying domain.

All arc lengths accepted or returned by the public methods are relative to the
window: 0 is the window start and `length()` its end.

Examples:
    ```python
    from py_arctraj import PointTrajectory, Vector

    points = [Vector(0, 0), Vector(1, 0), Vector(2, 0), Vector(3, 0), Vector(4, 0)]
    trajectory = PointTrajectory.Builder().build(points).unwrap()

    trajectory.length()            # 4.0
    trajectory.compute(1.5)        # Vector(x=1.5, y=0.0, z=0.0)
    trajectory.crop(1.0, 2.0)      # window is now [1, 3] of the original
    trajectory.restore()           # points from x=1 to x=3
    ```
"""
from __future__ import annotations

import math

from deprecated import deprecated
from typing_extensions import List, Optional, Sequence, Tuple, Union

from py_arctraj.bases import BasisSet, crop_bases
from py_arctraj.config import get_config
from py_arctraj.exceptions import (
    FailureKind,
    InterpolationFailure,
    InterpolationResult,
    InterpolationSuccess,
    TrajectoryNotBuiltError,
)
from py_arctraj.interpolation import (
    CubicSpline,
    InterpolatorSpec,
    Linear,
    ScalarInterpolator,
    create_interpolator,
)
from py_arctraj.logger import logger
from py_arctraj.points import position_of
from py_arctraj.trajectory.base import TrajectoryBuilder, is_scalar, restore_samples
from py_arctraj.vector import Vector

__all__ = ('PointTrajectory', 'scalar_interpolator')

ArcLength = Union[float, Sequence[float]]

# base_arange stops this close to the end instead of emitting a near-duplicate
_ARANGE_END_TOLERANCE = 1e-9


def scalar_interpolator(method: InterpolatorSpec) -> ScalarInterpolator:
    """Resolve an interpolator selection for a real-valued channel.

    Raises:
        TypeError: If the selection is not a scalar interpolator.
    """
    interpolator = create_interpolator(method)
    if not isinstance(interpolator, ScalarInterpolator):
        raise TypeError(f"{type(interpolator).__name__} can't interpolate a scalar channel")
    return interpolator


class PointTrajectory:
    """Trajectory of `Vector` samples parameterized by arc length."""

    class Builder(TrajectoryBuilder['PointTrajectory']):
        """Builder of PointTrajectory. Defaults: natural cubic spline for x and y, linear z."""

        def __init__(self) -> None:
            super().__init__(PointTrajectory())

        def set_xy_interpolator(self, method: InterpolatorSpec) -> PointTrajectory.Builder:
            """Select the interpolator of both x and y. An instance is cloned for y."""
            x = scalar_interpolator(method)
            self._target._x = x
            self._target._y = x.clone() if x is method else scalar_interpolator(method)
            return self

        def set_z_interpolator(self, method: InterpolatorSpec) -> PointTrajectory.Builder:
            self._target._z = scalar_interpolator(method)
            return self

    def __init__(self) -> None:
        self._x: ScalarInterpolator = CubicSpline()
        self._y: ScalarInterpolator = CubicSpline()
        self._z: ScalarInterpolator = Linear()
        self._basis_set: BasisSet = BasisSet()
        self._start: float = 0.0
        self._end: float = 0.0
        self._built: bool = False

    @property
    def basis_set(self) -> BasisSet:
        """Bases shared by every channel of this trajectory and of the layers above it."""
        return self._basis_set

    @property
    def built(self) -> bool:
        return self._built

    @property
    def window(self) -> Tuple[float, float]:
        """Active window (start, end) in underlying arc length."""
        return self._start, self._end

    def build(self, points: Sequence[Union[Vector, Sequence[float]]]) -> InterpolationResult:
        """Build the x, y and z channels over the cumulative distance of `points`.

        Returns:
            InterpolationSuccess, or the failure naming the axis that failed to build.
        """
        self._built = False
        if len(points) == 0:
            return InterpolationFailure("no points given", FailureKind.EMPTY_INPUT)
        if len(points) < 2:
            return InterpolationFailure(
                f"at least 2 points are required, got {len(points)}", FailureKind.INSUFFICIENT_SAMPLES
            )

        positions = [position_of(p) for p in points]
        bases = [0.0]
        for prev, curr in zip(positions, positions[1:]):
            bases.append(bases[-1] + prev.distance_to(curr))

        for axis, interpolator in (('x', self._x), ('y', self._y), ('z', self._z)):
            result = interpolator.build(bases, [getattr(p, axis) for p in positions])
            if not result:
                return result.wrap(f"failed to interpolate Point::{axis}")

        self._basis_set.reset(bases)
        self._start = bases[0]
        self._end = bases[-1]
        self._built = True
        return InterpolationSuccess()

    def _check_built(self) -> None:
        if not self._built:
            raise TrajectoryNotBuiltError(f"{type(self).__name__} is queried before a successful build")

    def length(self) -> float:
        self._check_built()
        return self._end - self._start

    def to_underlying(self, s: float) -> float:
        """Clamp a window-relative arc length into the window and map it to underlying arc length."""
        self._check_built()
        length = self._end - self._start
        clamped = min(max(s, 0.0), length)
        config = get_config()
        if config.warn_on_clamp and abs(clamped - s) > config.clamp_warning_tolerance:
            logger.warning(f"Arc length {s} is outside of [0, {length}], clamped to {clamped}")
        return self._start + clamped

    def _position(self, u: float) -> Vector:
        return Vector(self._x.compute(u), self._y.compute(u), self._z.compute(u))

    def _direction(self, u: float) -> Vector:
        return Vector(
            self._x.compute_first_derivative(u),
            self._y.compute_first_derivative(u),
            self._z.compute_first_derivative(u),
        ).normalize()

    def azimuth_at_underlying(self, u: float) -> float:
        d = self._direction(u)
        return math.atan2(d.y, d.x)

    def elevation_at_underlying(self, u: float) -> float:
        d = self._direction(u)
        return math.atan2(d.z, math.hypot(d.x, d.y))

    def _curvature(self, u: float) -> float:
        dx = self._x.compute_first_derivative(u)
        dy = self._y.compute_first_derivative(u)
        ddx = self._x.compute_second_derivative(u)
        ddy = self._y.compute_second_derivative(u)
        denominator = math.pow(dx * dx + dy * dy, 1.5)
        if denominator < get_config().curvature_epsilon:
            return 0.0
        return (dx * ddy - dy * ddx) / denominator

    def compute(self, s: ArcLength) -> Union[Vector, List[Vector]]:
        """Position at arc length `s`, or at each arc length of a sequence."""
        if is_scalar(s):
            return self._position(self.to_underlying(s))
        return [self._position(self.to_underlying(si)) for si in s]

    def azimuth(self, s: ArcLength) -> Union[float, List[float]]:
        """Heading of the direction of travel in the xy-plane [rad]."""
        if is_scalar(s):
            return self.azimuth_at_underlying(self.to_underlying(s))
        return [self.azimuth_at_underlying(self.to_underlying(si)) for si in s]

    def elevation(self, s: ArcLength) -> Union[float, List[float]]:
        """Inclination of the direction of travel above the xy-plane [rad]."""
        if is_scalar(s):
            return self.elevation_at_underlying(self.to_underlying(s))
        return [self.elevation_at_underlying(self.to_underlying(si)) for si in s]

    def curvature(self, s: ArcLength) -> Union[float, List[float]]:
        """Signed planar curvature [1/m], 0 where the path is stationary."""
        if is_scalar(s):
            return self._curvature(self.to_underlying(s))
        return [self._curvature(self.to_underlying(si)) for si in s]

    def crop(self, start: float, length: float) -> PointTrajectory:
        """Narrow the window to [start, start + length], intersected with the current window.

        Channel data is untouched, so bases outside the window stay available.
        """
        self._check_built()
        new_start = min(max(self._start + start, self._start), self._end)
        new_end = min(max(new_start + length, new_start), self._end)
        self._start, self._end = new_start, new_end
        return self

    def get_underlying_bases(self) -> List[float]:
        """Shared bases inside the window, framed by its ends, shifted so the window starts at 0."""
        self._check_built()
        return [b - self._start for b in crop_bases(self._basis_set.to_list(), self._start, self._end)]

    @deprecated(reason="Use get_underlying_bases()")
    def get_internal_bases(self) -> List[float]:
        return self.get_underlying_bases()

    def restore(self, min_points: int = 4) -> List[Vector]:
        """Discretize the window back into points, see `restore_samples`."""
        return restore_samples(self.compute, self.get_underlying_bases(), min_points)

    def base_arange(self,
                    interval_or_tick: Union[float, Tuple[float, float]],
                    tick: Optional[float] = None,
                    end_inclusive: bool = True) -> List[float]:
        """Ascending arc lengths from the interval start in steps of `tick`.

        Call as `base_arange(tick)` for the whole window or
        `base_arange((start, end), tick, end_inclusive=True)` for a sub-interval.
        The interval is intersected with the window. With `end_inclusive` the interval
        end is the last value exactly once, even off a tick boundary. Without it the
        end is listed only when it falls on a tick.

        Raises:
            ValueError: If tick <= 0.
        """
        self._check_built()
        if tick is None:
            tick = interval_or_tick
            start, end = 0.0, self.length()
        else:
            start, end = interval_or_tick
        if tick <= 0:
            raise ValueError(f"tick must be positive, got {tick}")

        start = max(start, 0.0)
        end = min(end, self.length())
        if start > end:
            return []

        values = []
        i = 0
        while True:
            s = start + i * tick
            if s >= end - _ARANGE_END_TOLERANCE:
                break
            values.append(s)
            i += 1
        # the end is listed once, as padding or because it falls on a tick
        if end_inclusive or abs(s - end) <= _ARANGE_END_TOLERANCE:
            values.append(end)
        return values

    def copy(self) -> PointTrajectory:
        """Independent deep copy with its own basis set."""
        clone = PointTrajectory()
        clone._x = self._x.clone()
        clone._y = self._y.clone()
        clone._z = self._z.clone()
        clone._basis_set = self._basis_set.clone()
        clone._start, clone._end = self._start, self._end
        clone._built = self._built
        return clone

    def __copy__(self) -> PointTrajectory:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> PointTrajectory:
        return self.copy()

    def __repr__(self) -> str:
        if not self._built:
            return f"{type(self).__name__}(unbuilt)"
        return f"{type(self).__name__}(window=[{self._start}, {self._end}], bases={len(self._basis_set)})"
