"""Arc-length parameterized trajectory of path points.

`PathPointTrajectory` contains a `PoseTrajectory` and adds three editable kinematic
channels: longitudinal velocity, lateral velocity and heading rate. The channels are
registered with the shared basis set, so a basis introduced by one of them (a
stairstep breakpoint or the boundary of a range edit) is added to the set and
sampled by every other channel. Discretizing the trajectory with `restore()` thus
keeps edited velocity steps sharp.

Examples:
    ```python
    from py_arctraj import PathPointTrajectory

    trajectory = PathPointTrajectory.Builder().build(path_points).unwrap()
    stop = 12.5
    trajectory.longitudinal_velocity_mps.range(stop, trajectory.length()).set(0.0)
    trajectory.compute(stop + 0.1).longitudinal_velocity_mps  # 0.0
    ```
"""
from __future__ import annotations

from typing_extensions import Dict, List, Optional, Sequence, Tuple, Union

from py_arctraj.bases import BasisSet
from py_arctraj.exceptions import InterpolationResult, InterpolationSuccess
from py_arctraj.interpolated_array import ChannelWindow, InterpolatedArray
from py_arctraj.interpolation import InterpolatorSpec, Stairstep, create_interpolator
from py_arctraj.points import PathPoint, to_float32
from py_arctraj.trajectory.base import TrajectoryBuilder, is_scalar, restore_samples
from py_arctraj.trajectory.point import ArcLength, scalar_interpolator
from py_arctraj.trajectory.pose import PoseTrajectory

__all__ = ('PathPointTrajectory',)

KINEMATIC_FIELDS = ('longitudinal_velocity_mps', 'lateral_velocity_mps', 'heading_rate_rps')


class PathPointTrajectory:
    """Trajectory of `PathPoint` samples parameterized by arc length."""

    class Builder(TrajectoryBuilder['PathPointTrajectory']):
        """Builder of PathPointTrajectory.

        Defaults: cubic spline x/y, linear z, slerp orientation and stairstep kinematics.
        """

        def __init__(self) -> None:
            super().__init__(PathPointTrajectory())

        def set_xy_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            x = scalar_interpolator(method)
            point = self._target._pose._point
            point._x = x
            point._y = x.clone() if x is method else scalar_interpolator(method)
            return self

        def set_z_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            self._target._pose._point._z = scalar_interpolator(method)
            return self

        def set_orientation_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            self._target._pose._orientation = create_interpolator(method)
            return self

        def set_longitudinal_velocity_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            self._target._set_channel('longitudinal_velocity_mps', method)
            return self

        def set_lateral_velocity_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            self._target._set_channel('lateral_velocity_mps', method)
            return self

        def set_heading_rate_interpolator(self, method: InterpolatorSpec) -> PathPointTrajectory.Builder:
            self._target._set_channel('heading_rate_rps', method)
            return self

    def __init__(self) -> None:
        self._pose: PoseTrajectory = PoseTrajectory()
        self._channels: Dict[str, InterpolatedArray] = {
            name: InterpolatedArray(Stairstep()) for name in KINEMATIC_FIELDS
        }
        self._wire()

    def _set_channel(self, name: str, method: InterpolatorSpec) -> None:
        self._channels[name] = InterpolatedArray(scalar_interpolator(method))
        self._wire()

    def _wire(self) -> None:
        # (re)attach the kinematic channels to the shared basis set
        basis_set = self.basis_set
        basis_set.detach_channels()
        for array in self._channels.values():
            basis_set.register_channel(array)

    @property
    def pose_trajectory(self) -> PoseTrajectory:
        return self._pose

    @property
    def basis_set(self) -> BasisSet:
        return self._pose.basis_set

    @property
    def built(self) -> bool:
        return self._pose.built and all(array.built for array in self._channels.values())

    @property
    def window(self) -> Tuple[float, float]:
        return self._pose.window

    def _channel_window(self, name: str) -> ChannelWindow:
        start, end = self._pose._point.window
        return ChannelWindow(self._channels[name], start, end)

    @property
    def longitudinal_velocity_mps(self) -> ChannelWindow:
        """Window-relative view of the longitudinal velocity channel, e.g. for range edits."""
        return self._channel_window('longitudinal_velocity_mps')

    @property
    def lateral_velocity_mps(self) -> ChannelWindow:
        return self._channel_window('lateral_velocity_mps')

    @property
    def heading_rate_rps(self) -> ChannelWindow:
        return self._channel_window('heading_rate_rps')

    def build(self, points: Sequence[PathPoint]) -> InterpolationResult:
        """Build the pose layer, then every kinematic channel over the resulting bases.

        Returns:
            InterpolationSuccess, or the failure naming the field that failed to build.
        """
        result = self._pose.build([p.pose for p in points])
        if not result:
            return result.wrap("failed to interpolate PathPoint::pose")

        # channels built later may still add bases, the snapshot keeps the
        # bases aligned with the values given for the input points
        bases = self.basis_set.to_list()
        for name, array in self._channels.items():
            result = array.build(bases, [getattr(p, name) for p in points])
            if not result:
                return result.wrap(f"failed to interpolate PathPoint::{name}")

        for array in self._channels.values():
            for s in self.basis_set:
                array.on_base_inserted(s)
        return InterpolationSuccess()

    def _path_point(self, u: float) -> PathPoint:
        return PathPoint(
            self._pose._pose(u),
            *(to_float32(self._channels[name].compute(u)) for name in KINEMATIC_FIELDS),
        )

    def compute(self, s: ArcLength) -> Union[PathPoint, List[PathPoint]]:
        """Path point at arc length `s`. Kinematic values are narrowed to single precision."""
        point = self._pose._point
        if is_scalar(s):
            return self._path_point(point.to_underlying(s))
        return [self._path_point(point.to_underlying(si)) for si in s]

    def align_orientation_with_trajectory_direction(self) -> InterpolationResult:
        return self._pose.align_orientation_with_trajectory_direction()

    def length(self) -> float:
        return self._pose.length()

    def azimuth(self, s: ArcLength) -> Union[float, List[float]]:
        return self._pose.azimuth(s)

    def elevation(self, s: ArcLength) -> Union[float, List[float]]:
        return self._pose.elevation(s)

    def curvature(self, s: ArcLength) -> Union[float, List[float]]:
        return self._pose.curvature(s)

    def crop(self, start: float, length: float) -> PathPointTrajectory:
        self._pose.crop(start, length)
        return self

    def get_underlying_bases(self) -> List[float]:
        return self._pose.get_underlying_bases()

    def base_arange(self,
                    interval_or_tick: Union[float, Tuple[float, float]],
                    tick: Optional[float] = None,
                    end_inclusive: bool = True) -> List[float]:
        return self._pose.base_arange(interval_or_tick, tick, end_inclusive)

    def restore(self, min_points: int = 4) -> List[PathPoint]:
        """Discretize the window back into path points.

        Consecutive samples are merged only when both their positions and their
        kinematics agree, so both sides of a velocity step survive.
        """
        return restore_samples(self.compute, self.get_underlying_bases(), min_points)

    def copy(self) -> PathPointTrajectory:
        """Independent deep copy, with the channels wired to the copy's own basis set."""
        clone = PathPointTrajectory()
        clone._pose = self._pose.copy()
        clone._channels = {name: array.clone() for name, array in self._channels.items()}
        clone._wire()
        return clone

    def __copy__(self) -> PathPointTrajectory:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> PathPointTrajectory:
        return self.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._pose._point!r})"
