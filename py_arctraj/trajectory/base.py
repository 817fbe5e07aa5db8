"""Pieces shared by the trajectory layers: the builder protocol and resampling."""
from __future__ import annotations

from typing import Generic, TypeVar

from typing_extensions import Any, Callable, List, Optional, Protocol, Sequence

from py_arctraj.bases import fill_bases
from py_arctraj.exceptions import BuilderConsumedError, BuildResult, InterpolationResult
from py_arctraj.logger import logger
from py_arctraj.points import is_almost_same

__all__ = (
    'BuildableTrajectory',
    'TrajectoryBuilder',
    'is_scalar',
    'restore_samples',
)

T = TypeVar('T', bound='BuildableTrajectory')


class BuildableTrajectory(Protocol):
    """What a `TrajectoryBuilder` needs from the trajectory it builds."""

    def build(self, points: Sequence[Any]) -> InterpolationResult:
        ...

    def length(self) -> float:
        ...


def is_scalar(s: Any) -> bool:
    """True for a single arc length, False for a sequence of them."""
    return isinstance(s, (int, float))


class TrajectoryBuilder(Generic[T]):
    """Holds a trajectory under construction until a successful `build()`.

    A successful build consumes the builder: any further use raises
    `BuilderConsumedError`. A failed build leaves it usable, e.g. for another attempt
    with different interpolators or points.
    """

    def __init__(self, trajectory: T) -> None:
        self._trajectory: Optional[T] = trajectory

    @property
    def _target(self) -> T:
        if self._trajectory is None:
            raise BuilderConsumedError(f"{type(self).__qualname__} already produced a trajectory")
        return self._trajectory

    def build(self, points: Sequence[Any]) -> BuildResult[T]:
        """Build the trajectory from `points`.

        Returns:
            BuildResult with the trajectory, or with the failure chain if the build failed.

        Raises:
            BuilderConsumedError: If the builder already produced a trajectory.
        """
        trajectory = self._target
        name = type(trajectory).__name__
        result = trajectory.build(points)
        if not result:
            logger.debug(f"{name} build failed: {result}")
            return BuildResult(error=result)
        logger.debug(f"{name} built from {len(points)} points, length {trajectory.length():.6g}")
        self._trajectory = None
        return BuildResult(value=trajectory)


def restore_samples(compute: Callable[[float], Any], bases: Sequence[float], min_points: int) -> List[Any]:
    """Resample at `bases`, dropping samples that are almost the same as the previous kept one.

    When fewer than `min_points` samples survive, evenly spaced bases are inserted
    between the surviving ones and the resampling is repeated once. The minimum is
    not guaranteed, e.g. for a window of zero length.

    Args:
        compute: Window-relative evaluation of the trajectory.
        bases: Window-relative bases to resample at.
        min_points: Desired minimum number of samples.
    """

    def sanitize(ss: Sequence[float]):
        kept_bases: List[float] = []
        kept: List[Any] = []
        for s in ss:
            sample = compute(s)
            if not kept or not is_almost_same(kept[-1], sample):
                kept_bases.append(s)
                kept.append(sample)
        return kept_bases, kept

    sanitized_bases, samples = sanitize(fill_bases(bases, min_points))
    if len(samples) < min_points:
        sanitized_bases, samples = sanitize(fill_bases(sanitized_bases, min_points))
    return samples
