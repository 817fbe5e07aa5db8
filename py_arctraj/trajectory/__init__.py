"""Layered arc-length trajectories.

Each layer contains the one below it and forwards position queries to it:

    - PointTrajectory: x, y, z channels, shared basis set and active window
    - PoseTrajectory: PointTrajectory plus an orientation channel
    - PathPointTrajectory: PoseTrajectory plus longitudinal velocity, lateral velocity
      and heading rate channels

Every layer is created through its nested `Builder`, which selects the interpolator
of each channel and returns a `BuildResult`.

Examples:
    >>> from py_arctraj.trajectory import PointTrajectory
    >>> from py_arctraj.interpolation import InterpolationMethodEnum
    >>> builder = PointTrajectory.Builder().set_xy_interpolator(InterpolationMethodEnum.AKIMA)
"""

from .base import *
from .point import *
from .pose import *
from .path_point import *

__all__ = (
    'BuildableTrajectory',
    'TrajectoryBuilder',
    'is_scalar',
    'restore_samples',
    'PointTrajectory',
    'scalar_interpolator',
    'PoseTrajectory',
    'PathPointTrajectory',
)
