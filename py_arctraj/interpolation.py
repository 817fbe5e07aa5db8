"""Interpolators over arc-length bases.

An interpolator is built from strictly increasing bases and matching values and then
evaluated anywhere in `[bases[0], bases[-1]]`. Queries outside that domain are clamped.
Building never raises on bad data: it returns `InterpolationSuccess` or an
`InterpolationFailure` tagged with a `FailureKind`.

Variants:
    - Linear: Piecewise linear, 2 points minimum.
    - CubicSpline: Natural C2 cubic spline, 4 points minimum.
    - AkimaSpline: Akima spline, robust against outliers, 5 points minimum.
    - Pchip: Monotone piecewise cubic Hermite (Fritsch–Carlson), 2 points minimum.
    - Stairstep: Piecewise constant, 2 points minimum. Announces a breakpoint basis
      before every value change through the base-addition callback.
    - SphericalLinear: Slerp between quaternions, 2 points minimum.

The cubic variants share one representation: per-segment polynomial coefficients
evaluated with Horner's rule, see `CubicSegments`.
"""
from __future__ import annotations

import bisect
import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from typing_extensions import Callable, List, Literal, Optional, Sequence, Type, Union

from py_arctraj.config import get_config
from py_arctraj.exceptions import (
    FailureKind,
    InterpolationFailure,
    InterpolationResult,
    InterpolationSuccess,
    TrajectoryNotBuiltError,
)
from py_arctraj.points import Quaternion

__all__ = (
    "InterpolationMethod",
    "InterpolationMethodEnum",
    "BaseAdditionCallback",
    "Interpolator",
    "ScalarInterpolator",
    "Linear",
    "CubicSpline",
    "AkimaSpline",
    "Pchip",
    "Stairstep",
    "SphericalLinear",
    "CubicSegments",
    "cubic_segments_from_slopes",
    "InterpolatorSpec",
    "create_interpolator",
    "interpolate_2_pt",
)

T = TypeVar("T")

BaseAdditionCallback = Callable[[float], None]

InterpolationMethod = Literal["linear", "cubic_spline", "akima", "pchip", "stairstep", "spherical_linear"]


class InterpolationMethodEnum(str, Enum):
    """Interpolation method options.

    Values map to accepted string identifiers so callers may pass either the
    enum variant or the string directly.
    """

    LINEAR = "linear"
    CUBIC_SPLINE = "cubic_spline"
    AKIMA = "akima"
    PCHIP = "pchip"
    STAIRSTEP = "stairstep"
    SPHERICAL_LINEAR = "spherical_linear"


def _sign(a: float) -> int:
    return 1 if a > 0 else (-1 if a < 0 else 0)


def interpolate_2_pt(x: float, x0: float, y0: float, x1: float, y1: float) -> float:
    """Linear interpolation between two points.

    Raises:
        ZeroDivisionError: If x0 == x1.
    """
    if x1 == x0:
        raise ZeroDivisionError("Duplicate x-values in linear interpolation")
    t = (x - x0) / (x1 - x0)
    return y0 + t * (y1 - y0)


class Interpolator(ABC, Generic[T]):
    """Interpolator capability shared by every variant.

    Subclasses implement `_prepare()` (called once validated samples are stored) and
    `_evaluate(s)` (called with `s` already clamped into the domain).
    """

    #: Fewest samples the variant can be built from
    min_points: int = 2
    #: A sample's value holds on [b_i, b_i+1) instead of being reached at b_i only
    piecewise_constant: bool = False

    def __init__(self) -> None:
        self._bases: List[float] = []
        self._values: List[T] = []
        self._built: bool = False
        self._base_addition_callback: Optional[BaseAdditionCallback] = None

    @property
    def minimum_required_points(self) -> int:
        return self.min_points

    @property
    def built(self) -> bool:
        return self._built

    @property
    def bases(self) -> List[float]:
        return list(self._bases)

    @property
    def values(self) -> List[T]:
        return list(self._values)

    def connect_base_addition_callback(self, callback: Optional[BaseAdditionCallback]) -> None:
        """Register the single observer of bases this interpolator introduces."""
        self._base_addition_callback = callback

    def _validate(self, bases: Sequence[float], values: Sequence[T]) -> Optional[InterpolationFailure]:
        if len(bases) == 0 and len(values) == 0:
            return InterpolationFailure("no samples given", FailureKind.EMPTY_INPUT)
        if len(bases) != len(values):
            return InterpolationFailure(
                f"bases and values differ in length ({len(bases)} != {len(values)})",
                FailureKind.LENGTH_MISMATCH,
            )
        if len(bases) < self.minimum_required_points:
            return InterpolationFailure(
                f"{type(self).__name__} requires at least {self.minimum_required_points} points, "
                f"got {len(bases)}",
                FailureKind.INSUFFICIENT_SAMPLES,
            )
        for i in range(1, len(bases)):
            if bases[i] <= bases[i - 1]:
                return InterpolationFailure(
                    f"bases must be strictly increasing, got {bases[i - 1]} then {bases[i]} at index {i}",
                    FailureKind.NON_MONOTONIC_BASES,
                )
        return None

    def build(self, bases: Sequence[float], values: Sequence[T]) -> InterpolationResult:
        """Fit the interpolator to the samples.

        Returns:
            InterpolationSuccess, or the InterpolationFailure of the first failed check.
            A failed build leaves the interpolator unbuilt.
        """
        failure = self._validate(bases, values)
        if failure is not None:
            self._built = False
            return failure
        self._bases = [float(b) for b in bases]
        self._values = list(values)
        self._prepare()
        self._built = True
        self._after_build()
        return InterpolationSuccess()

    def _prepare(self) -> None:
        pass

    def _after_build(self) -> None:
        pass

    def _emit_base(self, s: float) -> None:
        if self._base_addition_callback is not None:
            self._base_addition_callback(s)

    def _check_built(self) -> None:
        if not self._built:
            raise TrajectoryNotBuiltError(f"{type(self).__name__} is queried before a successful build")

    def clamp(self, s: float) -> float:
        self._check_built()
        return min(max(s, self._bases[0]), self._bases[-1])

    def _segment(self, s: float) -> int:
        """Index i of the segment [b_i, b_i+1] containing s."""
        i = bisect.bisect_right(self._bases, s) - 1
        return min(max(i, 0), len(self._bases) - 2)

    def compute(self, s: float) -> T:
        """Evaluate at `s`, clamped into the built domain."""
        return self._evaluate(self.clamp(s))

    @abstractmethod
    def _evaluate(self, s: float) -> T:
        raise NotImplementedError

    def clone(self) -> Interpolator[T]:
        """Deep copy without the base-addition callback.

        The callback references the owner of this interpolator and must be rewired
        by the owner of the clone.
        """
        callback = self._base_addition_callback
        self._base_addition_callback = None
        try:
            return copy.deepcopy(self)
        finally:
            self._base_addition_callback = callback

    def __repr__(self) -> str:
        state = f"{len(self._bases)} points" if self._built else "unbuilt"
        return f"{type(self).__name__}({state})"


class ScalarInterpolator(Interpolator[float]):
    """Interpolator of a real-valued channel, with analytic derivatives."""

    def compute_first_derivative(self, s: float) -> float:
        return self._first_derivative(self.clamp(s))

    def compute_second_derivative(self, s: float) -> float:
        return self._second_derivative(self.clamp(s))

    @abstractmethod
    def _first_derivative(self, s: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def _second_derivative(self, s: float) -> float:
        raise NotImplementedError


class Linear(ScalarInterpolator):
    """Piecewise linear interpolation. The first derivative is the segment slope."""

    min_points = 2

    def _evaluate(self, s: float) -> float:
        i = self._segment(s)
        return interpolate_2_pt(s, self._bases[i], self._values[i], self._bases[i + 1], self._values[i + 1])

    def _first_derivative(self, s: float) -> float:
        i = self._segment(s)
        return (self._values[i + 1] - self._values[i]) / (self._bases[i + 1] - self._bases[i])

    def _second_derivative(self, s: float) -> float:
        return 0.0


# ===== Cubic segments: shared by CubicSpline, AkimaSpline and Pchip =====


@dataclass
class CubicSegments:
    """Per-segment polynomial coefficients of a piecewise cubic.

    For each interval i in [0..n-2], the segment on [x[i], x[i+1]] is expressed as:

        y(x) = a[i] + dx*(b[i] + dx*(c[i] + dx*d[i]))

    where dx = x - x[i].
    """

    x: List[float]
    a: List[float]
    b: List[float]
    c: List[float]
    d: List[float]

    def value(self, i: int, s: float) -> float:
        dx = s - self.x[i]
        return self.a[i] + dx * (self.b[i] + dx * (self.c[i] + dx * self.d[i]))

    def first_derivative(self, i: int, s: float) -> float:
        dx = s - self.x[i]
        return self.b[i] + dx * (2.0 * self.c[i] + dx * 3.0 * self.d[i])

    def second_derivative(self, i: int, s: float) -> float:
        dx = s - self.x[i]
        return 2.0 * self.c[i] + 6.0 * self.d[i] * dx


def cubic_segments_from_slopes(xs: Sequence[float], ys: Sequence[float], m: Sequence[float]) -> CubicSegments:
    """Convert Hermite data (values and slopes at knots) to polynomial coefficients."""
    n = len(xs)
    a = [0.0] * (n - 1)
    b = [0.0] * (n - 1)
    c = [0.0] * (n - 1)
    d = [0.0] * (n - 1)
    for i in range(n - 1):
        y0 = ys[i]
        y1 = ys[i + 1]
        h_i = xs[i + 1] - xs[i]
        m0 = m[i]
        m1 = m[i + 1]
        a[i] = y0
        b[i] = m0
        c[i] = (3 * (y1 - y0) - (2 * m0 + m1) * h_i) / (h_i * h_i)
        d[i] = (2 * (y0 - y1) + (m0 + m1) * h_i) / (h_i * h_i * h_i)
    return CubicSegments(x=list(xs), a=a, b=b, c=c, d=d)


class _PiecewiseCubic(ScalarInterpolator):
    """Common evaluation of the cubic variants."""

    def __init__(self) -> None:
        super().__init__()
        self._segments: Optional[CubicSegments] = None

    def _prepare(self) -> None:
        self._segments = self._fit(self._bases, self._values)

    @abstractmethod
    def _fit(self, xs: List[float], ys: List[float]) -> CubicSegments:
        raise NotImplementedError

    def _evaluate(self, s: float) -> float:
        assert self._segments is not None
        return self._segments.value(self._segment(s), s)

    def _first_derivative(self, s: float) -> float:
        assert self._segments is not None
        return self._segments.first_derivative(self._segment(s), s)

    def _second_derivative(self, s: float) -> float:
        assert self._segments is not None
        return self._segments.second_derivative(self._segment(s), s)


class CubicSpline(_PiecewiseCubic):
    """Natural cubic spline (zero second derivative at both ends), C2 continuous."""

    min_points = 4

    def _fit(self, xs: List[float], ys: List[float]) -> CubicSegments:
        n = len(xs)
        h = [xs[i + 1] - xs[i] for i in range(n - 1)]

        # Tridiagonal system for the interior second derivatives, Thomas algorithm
        moments = [0.0] * n
        diag = [0.0] * n
        rhs = [0.0] * n
        for i in range(1, n - 1):
            diag[i] = 2.0 * (h[i - 1] + h[i])
            rhs[i] = 6.0 * ((ys[i + 1] - ys[i]) / h[i] - (ys[i] - ys[i - 1]) / h[i - 1])
        for i in range(2, n - 1):
            w = h[i - 1] / diag[i - 1]
            diag[i] -= w * h[i - 1]
            rhs[i] -= w * rhs[i - 1]
        for i in range(n - 2, 0, -1):
            moments[i] = (rhs[i] - h[i] * moments[i + 1]) / diag[i]

        a = [0.0] * (n - 1)
        b = [0.0] * (n - 1)
        c = [0.0] * (n - 1)
        d = [0.0] * (n - 1)
        for i in range(n - 1):
            a[i] = ys[i]
            b[i] = (ys[i + 1] - ys[i]) / h[i] - h[i] * (2.0 * moments[i] + moments[i + 1]) / 6.0
            c[i] = moments[i] / 2.0
            d[i] = (moments[i + 1] - moments[i]) / (6.0 * h[i])
        return CubicSegments(x=list(xs), a=a, b=b, c=c, d=d)


class AkimaSpline(_PiecewiseCubic):
    """Akima spline. Knot slopes are weighted by the neighbouring slope changes."""

    min_points = 5

    def _fit(self, xs: List[float], ys: List[float]) -> CubicSegments:
        n = len(xs)
        delta = [(ys[i + 1] - ys[i]) / (xs[i + 1] - xs[i]) for i in range(n - 1)]
        # two extrapolated secant slopes on each side
        left1 = 2.0 * delta[0] - delta[1]
        left2 = 2.0 * left1 - delta[0]
        right1 = 2.0 * delta[-1] - delta[-2]
        right2 = 2.0 * right1 - delta[-1]
        ext = [left2, left1] + delta + [right1, right2]

        m = [0.0] * n
        for i in range(n):
            m1, m2, m3, m4 = ext[i], ext[i + 1], ext[i + 2], ext[i + 3]
            w1 = abs(m4 - m3)
            w2 = abs(m2 - m1)
            if w1 + w2 == 0.0:
                m[i] = 0.5 * (m2 + m3)
            else:
                m[i] = (w1 * m2 + w2 * m3) / (w1 + w2)
        return cubic_segments_from_slopes(xs, ys, m)


class Pchip(_PiecewiseCubic):
    """Monotone piecewise cubic Hermite interpolation (Fritsch–Carlson).

    Preserves monotonicity of the data and never overshoots, which suits channels
    such as velocity profiles where a spline would ring.
    """

    min_points = 2

    def _fit(self, xs: List[float], ys: List[float]) -> CubicSegments:
        n = len(xs)
        h = [xs[i + 1] - xs[i] for i in range(n - 1)]
        delta = [(ys[i + 1] - ys[i]) / h[i] for i in range(n - 1)]

        m = [0.0] * n
        if n == 2:
            # Linear segment: both slopes equal to delta
            m[0] = delta[0]
            m[1] = delta[0]
        else:
            for i in range(1, n - 1):
                d0 = delta[i - 1]
                d1 = delta[i]
                if d0 == 0.0 or d1 == 0.0 or _sign(d0) != _sign(d1):
                    m[i] = 0.0
                else:
                    w1 = 2 * h[i] + h[i - 1]
                    w2 = h[i] + 2 * h[i - 1]
                    m[i] = (w1 + w2) / (w1 / d0 + w2 / d1)

            # Endpoints (three-point formula + limiting)
            d0 = delta[0]
            d1 = delta[1]
            m0 = ((2 * h[0] + h[1]) * d0 - h[0] * d1) / (h[0] + h[1])
            if _sign(m0) != _sign(d0):
                m0 = 0.0
            elif abs(m0) > 3 * abs(d0):
                m0 = 3 * d0
            m[0] = m0

            dn_2 = delta[-1]
            dn_3 = delta[-2]
            mn = ((2 * h[-1] + h[-2]) * dn_2 - h[-1] * dn_3) / (h[-1] + h[-2])
            if _sign(mn) != _sign(dn_2):
                mn = 0.0
            elif abs(mn) > 3 * abs(dn_2):
                mn = 3 * dn_2
            m[-1] = mn

        return cubic_segments_from_slopes(xs, ys, m)


class Stairstep(ScalarInterpolator):
    """Piecewise constant interpolation.

    The value of sample i holds on [b_i, b_i+1). After every build, a breakpoint basis
    `b_i - stairstep_breakpoint_offset` is announced through the base-addition callback
    for each sample whose value differs from its predecessor, as long as the breakpoint
    lies after b_i-1. Once the owner adds that basis, discretizing the channel yields
    both the old and the new value around the step.

    Samples that repeat the previous value get no breakpoint. A breakpoint before every
    sample would add new bases on each rebuild and double the basis count, while it
    changes nothing in the resampled values.
    """

    min_points = 2
    piecewise_constant = True

    def __init__(self, breakpoint_offset: Optional[float] = None) -> None:
        super().__init__()
        self._breakpoint_offset = breakpoint_offset

    @property
    def breakpoint_offset(self) -> float:
        if self._breakpoint_offset is not None:
            return self._breakpoint_offset
        return get_config().stairstep_breakpoint_offset

    def _evaluate(self, s: float) -> float:
        i = bisect.bisect_right(self._bases, s) - 1
        return self._values[min(max(i, 0), len(self._values) - 1)]

    def _first_derivative(self, s: float) -> float:
        return 0.0

    def _second_derivative(self, s: float) -> float:
        return 0.0

    def breakpoints(self) -> List[float]:
        """Breakpoint bases of the current samples."""
        offset = self.breakpoint_offset
        points = []
        for i in range(1, len(self._bases)):
            if self._values[i] != self._values[i - 1]:
                s = self._bases[i] - offset
                if s > self._bases[i - 1]:
                    points.append(s)
        return points

    def _after_build(self) -> None:
        for s in self.breakpoints():
            self._emit_base(s)


class SphericalLinear(Interpolator[Quaternion]):
    """Spherical linear interpolation of orientations."""

    min_points = 2

    def _evaluate(self, s: float) -> Quaternion:
        i = self._segment(s)
        b0, b1 = self._bases[i], self._bases[i + 1]
        ratio = (s - b0) / (b1 - b0)
        return self._values[i].slerp(self._values[i + 1], ratio)


_METHODS = {
    InterpolationMethodEnum.LINEAR: Linear,
    InterpolationMethodEnum.CUBIC_SPLINE: CubicSpline,
    InterpolationMethodEnum.AKIMA: AkimaSpline,
    InterpolationMethodEnum.PCHIP: Pchip,
    InterpolationMethodEnum.STAIRSTEP: Stairstep,
    InterpolationMethodEnum.SPHERICAL_LINEAR: SphericalLinear,
}

InterpolatorSpec = Union[Interpolator, Type[Interpolator], InterpolationMethodEnum, InterpolationMethod, str]


def create_interpolator(method: InterpolatorSpec) -> Interpolator:
    """Resolve an interpolator selection to an interpolator instance.

    Args:
        method: An interpolator instance (returned as is), an Interpolator subclass,
            an InterpolationMethodEnum or its string value.

    Raises:
        ValueError: If the string does not name a known method.
        TypeError: If `method` is none of the accepted forms.
    """
    if isinstance(method, Interpolator):
        return method
    if isinstance(method, type) and issubclass(method, Interpolator):
        return method()
    if isinstance(method, str):
        try:
            key = InterpolationMethodEnum(method)
        except ValueError:
            choices = ", ".join(repr(m.value) for m in InterpolationMethodEnum)
            raise ValueError(f"Unknown interpolation method {method!r}, expected one of {choices}") from None
        return _METHODS[key]()
    raise TypeError(f"Can't create an interpolator from {method!r}")
