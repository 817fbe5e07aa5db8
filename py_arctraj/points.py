"""Sample types consumed and produced by the trajectory layers.

Core Components:
    - Quaternion: Unit quaternion orientation
    - Pose: Position plus orientation
    - PathPoint: Pose plus longitudinal/lateral velocity and heading rate

Points themselves are plain `Vector` instances.

Kinematic fields of a PathPoint are single precision in the exchanged point schema.
Values produced by a trajectory are narrowed with `to_float32()` before they are
returned, while all internal computation stays in double precision.
"""
from __future__ import annotations

import math
import struct

from typing_extensions import NamedTuple, Optional, Sequence, Union

from py_arctraj.config import TrajectoryConfig, get_config
from py_arctraj.vector import Vector

__all__ = (
    'Quaternion',
    'Pose',
    'PathPoint',
    'Sample',
    'to_float32',
    'position_of',
    'is_almost_same',
)


def to_float32(value: float) -> float:
    """Round a double to the nearest single precision value."""
    return struct.unpack('f', struct.pack('f', value))[0]


class Quaternion(NamedTuple):
    """Orientation as a unit quaternion (x, y, z, w), identity by default."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @staticmethod
    def from_rpy(roll: float, pitch: float, yaw: float) -> Quaternion:
        """Build a quaternion from intrinsic roll, pitch and yaw angles in radians."""
        cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
        cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
        cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
        return Quaternion(
            x=sr * cp * cy - cr * sp * sy,
            y=cr * sp * cy + sr * cp * sy,
            z=cr * cp * sy - sr * sp * cy,
            w=cr * cp * cy + sr * sp * sy,
        )

    def to_rpy(self) -> tuple:
        """Return (roll, pitch, yaw) in radians."""
        x, y, z, w = self
        roll = math.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
        sin_pitch = max(-1.0, min(1.0, 2.0 * (w * y - z * x)))
        pitch = math.asin(sin_pitch)
        yaw = math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))
        return roll, pitch, yaw

    def yaw(self) -> float:
        return self.to_rpy()[2]

    def dot(self, other: Quaternion) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def normalize(self) -> Quaternion:
        n = math.sqrt(self.dot(self))
        if n < 1e-12:
            return Quaternion()
        return Quaternion(self.x / n, self.y / n, self.z / n, self.w / n)

    def slerp(self, other: Quaternion, ratio: float) -> Quaternion:
        """Spherical linear interpolation along the shorter arc.

        Args:
            other: Target orientation.
            ratio: 0.0 returns self, 1.0 returns other.
        """
        q0 = self.normalize()
        q1 = other.normalize()
        d = q0.dot(q1)
        if d < 0.0:
            q1 = Quaternion(-q1.x, -q1.y, -q1.z, -q1.w)
            d = -d
        if d > 0.9995:
            # nearly parallel, lerp is accurate and avoids sin(theta) ~ 0
            return Quaternion(*(a + ratio * (b - a) for a, b in zip(q0, q1))).normalize()
        theta = math.acos(d)
        sin_theta = math.sin(theta)
        w0 = math.sin((1.0 - ratio) * theta) / sin_theta
        w1 = math.sin(ratio * theta) / sin_theta
        return Quaternion(*(w0 * a + w1 * b for a, b in zip(q0, q1)))


class Pose(NamedTuple):
    """Position with orientation."""

    position: Vector
    orientation: Quaternion = Quaternion()


class PathPoint(NamedTuple):
    """Pose with the kinematic attributes of a planned path.

    Attributes:
        pose: Position and orientation.
        longitudinal_velocity_mps: Velocity along the heading [m/s].
        lateral_velocity_mps: Velocity across the heading [m/s].
        heading_rate_rps: Yaw rate [rad/s].
    """

    pose: Pose
    longitudinal_velocity_mps: float = 0.0
    lateral_velocity_mps: float = 0.0
    heading_rate_rps: float = 0.0


Sample = Union[Vector, Pose, PathPoint]


def position_of(sample: Union[Sample, Sequence[float]]) -> Vector:
    """Extract the position of any sample type, or of an (x, y[, z]) tuple."""
    if isinstance(sample, Vector):
        return sample
    if isinstance(sample, Pose):
        return sample.position
    if isinstance(sample, PathPoint):
        return sample.pose.position
    if len(sample) == 2:
        return Vector(float(sample[0]), float(sample[1]), 0.0)
    if len(sample) == 3:
        return Vector(float(sample[0]), float(sample[1]), float(sample[2]))
    raise TypeError(f"Can't extract a position from {sample!r}")


def is_almost_same(a: Sample, b: Sample, config: Optional[TrajectoryConfig] = None) -> bool:
    """Check whether two samples are interchangeable when discretizing a trajectory.

    Positions are compared with `points_minimum_dist_threshold`. Path points must
    additionally agree on every kinematic field within `kinematics_same_threshold`,
    so that consecutive samples on both sides of a velocity step are both kept.
    """
    config = config or get_config()
    if position_of(a).distance_to(position_of(b)) >= config.points_minimum_dist_threshold:
        return False
    if isinstance(a, PathPoint) and isinstance(b, PathPoint):
        tol = config.kinematics_same_threshold
        return (abs(a.longitudinal_velocity_mps - b.longitudinal_velocity_mps) < tol
                and abs(a.lateral_velocity_mps - b.lateral_velocity_mps) < tol
                and abs(a.heading_rate_rps - b.heading_rate_rps) < tol)
    return True
