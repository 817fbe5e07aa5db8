"""Editable scalar channel over a set of bases.

`InterpolatedArray` keeps its own copy of the samples it was built from, so that
ranges of the channel can be overwritten and the interpolator rebuilt over the same
bases. Bases introduced by the wrapped interpolator (stairstep breakpoints) or by a
range edit are reported to the owner through a single base-addition callback.

Examples:
    ```python
    from py_arctraj.interpolated_array import InterpolatedArray
    from py_arctraj.interpolation import Stairstep

    velocity = InterpolatedArray(Stairstep())
    velocity.build([0.0, 1.0, 2.0, 3.0], [5.0, 5.0, 5.0, 5.0])
    velocity.range(1.5, 3.0).set(0.0)
    velocity.compute(1.0)   # 5.0
    velocity.compute(2.0)   # 0.0
    ```
"""
from __future__ import annotations

import bisect

from typing_extensions import List, Optional, Sequence

from py_arctraj.exceptions import InterpolationResult, TrajectoryNotBuiltError
from py_arctraj.interpolation import BaseAdditionCallback, ScalarInterpolator

__all__ = (
    'InterpolatedArray',
    'ArrayRange',
    'ChannelWindow',
)


def _find(bases: List[float], s: float) -> int:
    """Index of `s` in sorted `bases`, or -1."""
    i = bisect.bisect_left(bases, s)
    if i < len(bases) and bases[i] == s:
        return i
    return -1


class ArrayRange:
    """Sub-range [start, end] of an InterpolatedArray, returned by `InterpolatedArray.range()`."""

    def __init__(self, array: InterpolatedArray, start: float, end: float) -> None:
        self._array = array
        self.start = start
        self.end = end

    def set(self, value: float) -> InterpolationResult:
        """Assign `value` to every sample in the range and rebuild the channel."""
        return self._array._set_range(self.start, self.end, value)

    def __repr__(self) -> str:
        return f"ArrayRange({self.start}, {self.end})"


class InterpolatedArray:
    """A scalar channel: one interpolator plus the samples it is built over."""

    def __init__(self, interpolator: ScalarInterpolator) -> None:
        self._interpolator = interpolator
        self._interpolator.connect_base_addition_callback(self._introduce_base)
        self._bases: List[float] = []
        self._values: List[float] = []
        self._base_addition_callback: Optional[BaseAdditionCallback] = None

    @property
    def interpolator(self) -> ScalarInterpolator:
        return self._interpolator

    @property
    def built(self) -> bool:
        return self._interpolator.built

    @property
    def bases(self) -> List[float]:
        return list(self._bases)

    @property
    def values(self) -> List[float]:
        return list(self._values)

    def connect_base_addition_callback(self, callback: Optional[BaseAdditionCallback]) -> None:
        """Register the single observer of new bases. Replaces the previous one."""
        self._base_addition_callback = callback

    def build(self, bases: Sequence[float], values: Sequence[float]) -> InterpolationResult:
        """Store the samples and build the interpolator over them.

        Returns:
            The interpolator's build result, unchanged.
        """
        self._bases = [float(b) for b in bases]
        self._values = [float(v) for v in values]
        return self._interpolator.build(self._bases, self._values)

    def compute(self, s: float) -> float:
        return self._interpolator.compute(s)

    def compute_first_derivative(self, s: float) -> float:
        return self._interpolator.compute_first_derivative(s)

    def _mirror(self, s: float) -> bool:
        """Add a sample at `s` taken from the current interpolant. False if already present."""
        if _find(self._bases, s) >= 0:
            return False
        i = bisect.bisect_left(self._bases, s)
        self._bases.insert(i, s)
        self._values.insert(i, self._interpolator.compute(s))
        return True

    def _introduce_base(self, s: float) -> None:
        # the interpolator introduced a basis
        if self._mirror(s) and self._base_addition_callback is not None:
            self._base_addition_callback(s)

    def on_base_inserted(self, s: float) -> None:
        """Mirror a basis the owner added to the shared set."""
        if self.built:
            self._mirror(s)

    def range(self, start: float, end: float) -> ArrayRange:
        """Select the sub-range [start, end] for a `set()`.

        On a piecewise-constant channel the value steps back to the old one exactly at
        an interior `end`, so only [start, end) changes. At the end of the domain the
        last sample is assigned too.

        Raises:
            ValueError: If start > end.
        """
        if start > end:
            raise ValueError(f"Range start {start} is after its end {end}")
        return ArrayRange(self, start, end)

    def _set_range(self, start: float, end: float, value: float) -> InterpolationResult:
        if not self.built:
            raise TrajectoryNotBuiltError("InterpolatedArray is edited before a successful build")
        lo, hi = self._bases[0], self._bases[-1]
        start = min(max(start, lo), hi)
        end = min(max(end, lo), hi)

        added = [s for s in (start, end) if self._mirror(s)]

        i_start = _find(self._bases, start)
        i_end = _find(self._bases, end)
        if self._interpolator.piecewise_constant and i_end < len(self._bases) - 1:
            # the sample at an interior end holds past it, so it keeps the old value
            i_end -= 1
        for i in range(i_start, i_end + 1):
            self._values[i] = float(value)

        result = self._interpolator.build(list(self._bases), list(self._values))
        if self._base_addition_callback is not None:
            for s in added:
                self._base_addition_callback(s)
        return result

    def clone(self) -> InterpolatedArray:
        """Independent copy with no base-addition callback."""
        array = InterpolatedArray(self._interpolator.clone())
        array._bases = list(self._bases)
        array._values = list(self._values)
        return array

    def __repr__(self) -> str:
        return f"InterpolatedArray({self._interpolator!r})"


class ChannelWindow:
    """Window-relative view of a channel, as handed out by trajectories.

    Arc length 0 maps to the window start of the owning trajectory. Arguments are
    clamped into [0, length].
    """

    def __init__(self, array: InterpolatedArray, start: float, end: float) -> None:
        self._array = array
        self._start = start
        self._end = end

    @property
    def array(self) -> InterpolatedArray:
        return self._array

    def length(self) -> float:
        return self._end - self._start

    def _underlying(self, s: float) -> float:
        return self._start + min(max(s, 0.0), self.length())

    def compute(self, s: float) -> float:
        return self._array.compute(self._underlying(s))

    def range(self, start: float, end: float) -> ArrayRange:
        if start > end:
            raise ValueError(f"Range start {start} is after its end {end}")
        return self._array.range(self._underlying(start), self._underlying(end))

    def __repr__(self) -> str:
        return f"ChannelWindow({self._array!r}, start={self._start}, end={self._end})"
