"""Queries and conveniences built on top of the trajectory layers."""
from __future__ import annotations

from typing_extensions import Any, Callable, List, Optional, Sequence, Tuple, Union

from py_arctraj.config import get_config
from py_arctraj.exceptions import BuildResult
from py_arctraj.points import PathPoint, Pose, position_of
from py_arctraj.trajectory import PathPointTrajectory, PointTrajectory, PoseTrajectory
from py_arctraj.vector import Vector

__all__ = (
    'AnyTrajectory',
    'crossed',
    'find_intervals',
    'pretty_build',
)

AnyTrajectory = Union[PointTrajectory, PoseTrajectory, PathPointTrajectory]

# number of samples the default xy interpolator (natural cubic spline) needs
_SPLINE_MIN_POINTS = 4


def _cross(o: Vector, a: Vector, b: Vector) -> float:
    """z-component of (a - o) x (b - o)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def _segments_intersect(p0: Vector, p1: Vector, q0: Vector, q1: Vector) -> bool:
    d0 = _cross(q0, q1, p0)
    d1 = _cross(q0, q1, p1)
    if d0 == 0.0 and d1 == 0.0:
        # collinear overlap has no single crossing arc length
        return False
    if d0 * d1 > 0.0:
        return False
    e0 = _cross(p0, p1, q0)
    e1 = _cross(p0, p1, q1)
    return e0 * e1 <= 0.0


def crossed(trajectory: AnyTrajectory,
            polyline: Sequence[Union[Vector, Pose, PathPoint, Sequence[float]]],
            tick: Optional[float] = None) -> List[float]:
    """Arc lengths at which the trajectory crosses a polyline, in the xy-plane.

    The trajectory is sampled at its underlying bases and every `tick` meters. Each
    sampled chord that intersects a polyline segment is refined by bisection on the
    side of the segment's line the trajectory is on.

    Args:
        trajectory: Built trajectory of any layer.
        polyline: Two or more vertices.
        tick: Sampling step, `crossing_sample_tick` from the config by default.

    Returns:
        Sorted window-relative arc lengths, empty if there is no crossing.
    """
    config = get_config()
    tick = tick or config.crossing_sample_tick
    vertices = [position_of(v) for v in polyline]
    if len(vertices) < 2:
        return []

    def position(s: float) -> Vector:
        return position_of(trajectory.compute(s))

    ss = sorted(set(trajectory.get_underlying_bases()) | set(trajectory.base_arange(tick)))
    positions = [position(s) for s in ss]

    hits = []
    for i in range(len(ss) - 1):
        p0, p1 = positions[i], positions[i + 1]
        for q0, q1 in zip(vertices, vertices[1:]):
            if not _segments_intersect(p0, p1, q0, q1):
                continue

            def side(s: float) -> float:
                return _cross(q0, q1, position(s))

            lo, hi = ss[i], ss[i + 1]
            side_lo, side_hi = _cross(q0, q1, p0), _cross(q0, q1, p1)
            if side_lo == 0.0:
                hits.append(lo)
                continue
            if side_hi == 0.0:
                hits.append(hi)
                continue
            for _ in range(config.crossing_max_iterations):
                if hi - lo <= config.crossing_tolerance:
                    break
                mid = 0.5 * (lo + hi)
                side_mid = side(mid)
                if side_mid == 0.0:
                    lo = hi = mid
                    break
                if (side_mid > 0.0) == (side_lo > 0.0):
                    lo, side_lo = mid, side_mid
                else:
                    hi = mid
            hits.append(0.5 * (lo + hi))

    result: List[float] = []
    for s in sorted(hits):
        if not result or s - result[-1] > 2.0 * config.crossing_tolerance:
            result.append(s)
    return result


def find_intervals(trajectory: AnyTrajectory,
                   predicate: Callable[[Any], bool],
                   min_length: float = 0.0) -> List[Tuple[float, float]]:
    """Window-relative intervals of the underlying bases where `predicate(sample)` holds.

    Each interval runs from the first to the last basis of a run of consecutive bases
    whose samples satisfy the predicate. Intervals shorter than `min_length` are dropped.
    """
    intervals = []
    run_start: Optional[float] = None
    run_end: Optional[float] = None
    for s in trajectory.get_underlying_bases():
        if predicate(trajectory.compute(s)):
            if run_start is None:
                run_start = s
            run_end = s
        elif run_start is not None:
            intervals.append((run_start, run_end))
            run_start = run_end = None
    if run_start is not None:
        intervals.append((run_start, run_end))
    return [(a, b) for a, b in intervals if b - a >= min_length]


def _midpoint(a: Any, b: Any) -> Any:
    if isinstance(a, PathPoint):
        return PathPoint(_midpoint(a.pose, b.pose),
                         a.longitudinal_velocity_mps, a.lateral_velocity_mps, a.heading_rate_rps)
    if isinstance(a, Pose):
        return Pose((a.position + b.position) * 0.5, a.orientation.slerp(b.orientation, 0.5))
    return (a + b) * 0.5


def pretty_build(points: Sequence[Union[Vector, Pose, PathPoint, Sequence[float]]]) -> BuildResult:
    """Build a trajectory of the matching layer from as few as two samples.

    Midpoints are inserted into every segment until the default cubic spline has
    enough samples. For poses and path points the orientation is then aligned with
    the direction of travel.

    Returns:
        BuildResult of PointTrajectory, PoseTrajectory or PathPointTrajectory.
    """
    samples = list(points)
    builder: Any
    if samples and isinstance(samples[0], PathPoint):
        builder = PathPointTrajectory.Builder()
    elif samples and isinstance(samples[0], Pose):
        builder = PoseTrajectory.Builder()
    else:
        samples = [position_of(p) for p in samples]
        builder = PointTrajectory.Builder()

    while 2 <= len(samples) < _SPLINE_MIN_POINTS:
        expanded = []
        for a, b in zip(samples, samples[1:]):
            expanded.extend((a, _midpoint(a, b)))
        expanded.append(samples[-1])
        samples = expanded

    result = builder.build(samples)
    if result and not isinstance(result.value, PointTrajectory):
        result.value.align_orientation_with_trajectory_direction()
    return result
