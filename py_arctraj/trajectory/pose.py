"""Arc-length parameterized trajectory of poses.

`PoseTrajectory` contains a `PointTrajectory` for the positions and adds an
orientation channel over the same bases. Orientations are kept as given unless
`align_orientation_with_trajectory_direction()` is called.
"""
from __future__ import annotations

from typing_extensions import List, Optional, Sequence, Tuple, Union

from py_arctraj.bases import BasisSet
from py_arctraj.exceptions import InterpolationResult, InterpolationSuccess
from py_arctraj.interpolation import Interpolator, InterpolatorSpec, SphericalLinear, create_interpolator
from py_arctraj.points import Pose, Quaternion
from py_arctraj.trajectory.base import TrajectoryBuilder, is_scalar, restore_samples
from py_arctraj.trajectory.point import ArcLength, PointTrajectory, scalar_interpolator

__all__ = ('PoseTrajectory',)


class PoseTrajectory:
    """Trajectory of `Pose` samples parameterized by arc length."""

    class Builder(TrajectoryBuilder['PoseTrajectory']):
        """Builder of PoseTrajectory. Defaults: cubic spline x/y, linear z, slerp orientation."""

        def __init__(self) -> None:
            super().__init__(PoseTrajectory())

        def set_xy_interpolator(self, method: InterpolatorSpec) -> PoseTrajectory.Builder:
            x = scalar_interpolator(method)
            point = self._target._point
            point._x = x
            point._y = x.clone() if x is method else scalar_interpolator(method)
            return self

        def set_z_interpolator(self, method: InterpolatorSpec) -> PoseTrajectory.Builder:
            self._target._point._z = scalar_interpolator(method)
            return self

        def set_orientation_interpolator(self, method: InterpolatorSpec) -> PoseTrajectory.Builder:
            self._target._orientation = create_interpolator(method)
            return self

    def __init__(self) -> None:
        self._point: PointTrajectory = PointTrajectory()
        self._orientation: Interpolator[Quaternion] = SphericalLinear()

    @property
    def point_trajectory(self) -> PointTrajectory:
        return self._point

    @property
    def basis_set(self) -> BasisSet:
        return self._point.basis_set

    @property
    def built(self) -> bool:
        return self._point.built and self._orientation.built

    @property
    def window(self) -> Tuple[float, float]:
        return self._point.window

    def build(self, poses: Sequence[Pose]) -> InterpolationResult:
        """Build the position layer, then the orientation channel over its bases."""
        result = self._point.build([p.position for p in poses])
        if not result:
            return result.wrap("failed to interpolate Pose::position")
        result = self._orientation.build(self.basis_set.to_list(), [p.orientation for p in poses])
        if not result:
            return result.wrap("failed to interpolate Pose::orientation")
        return InterpolationSuccess()

    def orientation_at_underlying(self, u: float) -> Quaternion:
        return self._orientation.compute(u)

    def _pose(self, u: float) -> Pose:
        return Pose(self._point._position(u), self._orientation.compute(u))

    def compute(self, s: ArcLength) -> Union[Pose, List[Pose]]:
        if is_scalar(s):
            return self._pose(self._point.to_underlying(s))
        return [self._pose(self._point.to_underlying(si)) for si in s]

    def align_orientation_with_trajectory_direction(self) -> InterpolationResult:
        """Replace the orientation channel by the direction of travel.

        The orientation at every shared basis becomes roll 0, pitch -elevation and
        yaw azimuth. Positions are not touched, so applying it twice changes nothing.
        """
        self._point._check_built()
        bases = self.basis_set.to_list()
        orientations = [
            Quaternion.from_rpy(0.0, -self._point.elevation_at_underlying(u), self._point.azimuth_at_underlying(u))
            for u in bases
        ]
        return self._orientation.build(bases, orientations)

    # position queries are served by the point layer

    def length(self) -> float:
        return self._point.length()

    def azimuth(self, s: ArcLength) -> Union[float, List[float]]:
        return self._point.azimuth(s)

    def elevation(self, s: ArcLength) -> Union[float, List[float]]:
        return self._point.elevation(s)

    def curvature(self, s: ArcLength) -> Union[float, List[float]]:
        return self._point.curvature(s)

    def crop(self, start: float, length: float) -> PoseTrajectory:
        self._point.crop(start, length)
        return self

    def get_underlying_bases(self) -> List[float]:
        return self._point.get_underlying_bases()

    def base_arange(self,
                    interval_or_tick: Union[float, Tuple[float, float]],
                    tick: Optional[float] = None,
                    end_inclusive: bool = True) -> List[float]:
        return self._point.base_arange(interval_or_tick, tick, end_inclusive)

    def restore(self, min_points: int = 4) -> List[Pose]:
        return restore_samples(self.compute, self.get_underlying_bases(), min_points)

    def copy(self) -> PoseTrajectory:
        clone = PoseTrajectory()
        clone._point = self._point.copy()
        clone._orientation = self._orientation.clone()
        return clone

    def __copy__(self) -> PoseTrajectory:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> PoseTrajectory:
        return self.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._point!r})"
