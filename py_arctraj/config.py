"""Global configuration of the py_arctraj library.

Thresholds used by the trajectory layers live in one `TrajectoryConfig` instance
that is shared by every trajectory. It can be replaced programmatically with
`set_config()`, from a dictionary with `create_trajectory_config()`, or from a
`.arctraj.toml` file through `py_arctraj.basicConfig()`.

Examples:
    >>> from py_arctraj.config import create_trajectory_config, set_config, reset_config
    >>> set_config(create_trajectory_config({'points_minimum_dist_threshold': 1e-3}))
    >>> reset_config()
"""
from dataclasses import dataclass, asdict

from typing_extensions import Optional, TypedDict

__all__ = (
    'TrajectoryConfig',
    'TrajectoryConfigDict',
    'DEFAULT_TRAJECTORY_CONFIG',
    'create_trajectory_config',
    'set_config',
    'get_config',
    'reset_config',
)

cPointsMinimumDistThreshold: float = 1e-2  # meters, restored samples closer than this are merged
cKinematicsSameThreshold: float = 1e-3  # kinematic values closer than this compare as equal
cStairstepBreakpointOffset: float = 1e-3  # meters before a step where the breakpoint basis is placed
cCurvatureEpsilon: float = 1e-12  # curvature denominator treated as zero below this
cClampWarningTolerance: float = 1e-6  # meters outside the window tolerated without a warning
cCrossingSampleTick: float = 0.1  # meters between samples when searching crossings
cCrossingTolerance: float = 1e-9  # meters, bisection stops below this bracket width
cCrossingMaxIterations: int = 100


@dataclass
class TrajectoryConfig:
    """Configuration dataclass for trajectory construction and queries.

    Attributes:
        points_minimum_dist_threshold: Two samples whose positions are closer than this
            distance are considered the same point by `restore()`.
        kinematics_same_threshold: Two path points whose velocities and heading rates
            differ by less than this are considered kinematically equal.
        stairstep_breakpoint_offset: Distance before a stairstep transition at which
            the breakpoint basis is inserted.
        curvature_epsilon: Curvature denominators below this value yield zero curvature.
        warn_on_clamp: Log a warning when a query falls outside the active window.
        clamp_warning_tolerance: Out-of-window excess tolerated silently.
        crossing_sample_tick: Default sampling step of `crossed()`.
        crossing_tolerance: Arc length tolerance of crossing refinement.
        crossing_max_iterations: Maximum bisection iterations per crossing.
    """

    points_minimum_dist_threshold: float = cPointsMinimumDistThreshold
    kinematics_same_threshold: float = cKinematicsSameThreshold
    stairstep_breakpoint_offset: float = cStairstepBreakpointOffset
    curvature_epsilon: float = cCurvatureEpsilon
    warn_on_clamp: bool = True
    clamp_warning_tolerance: float = cClampWarningTolerance
    crossing_sample_tick: float = cCrossingSampleTick
    crossing_tolerance: float = cCrossingTolerance
    crossing_max_iterations: int = cCrossingMaxIterations


#: Default configuration instance
DEFAULT_TRAJECTORY_CONFIG: TrajectoryConfig = TrajectoryConfig()


class TrajectoryConfigDict(TypedDict, total=False):
    """TypedDict for partial configuration from dictionaries or TOML tables."""

    points_minimum_dist_threshold: float
    kinematics_same_threshold: float
    stairstep_breakpoint_offset: float
    curvature_epsilon: float
    warn_on_clamp: bool
    clamp_warning_tolerance: float
    crossing_sample_tick: float
    crossing_tolerance: float
    crossing_max_iterations: int


def create_trajectory_config(config: Optional[TrajectoryConfigDict] = None) -> TrajectoryConfig:
    """Create TrajectoryConfig from optional dictionary configuration.

    Args:
        config: Optional dictionary of overrides. Unspecified fields keep their defaults.

    Returns:
        TrajectoryConfig instance with merged configuration values.

    Raises:
        TypeError: If the dictionary contains unknown fields.
    """
    merged = asdict(DEFAULT_TRAJECTORY_CONFIG)
    if config is not None and isinstance(config, dict):
        merged.update(config)
    return TrajectoryConfig(**merged)


_ARCTRAJ_CONFIG: TrajectoryConfig = DEFAULT_TRAJECTORY_CONFIG


def set_config(config: TrajectoryConfig) -> None:
    global _ARCTRAJ_CONFIG
    _ARCTRAJ_CONFIG = config


def get_config() -> TrajectoryConfig:
    return _ARCTRAJ_CONFIG


def reset_config() -> None:
    set_config(DEFAULT_TRAJECTORY_CONFIG)
