"""Arc-length parameterized trajectory interpolation for motion planning."""

import importlib.metadata

__version__ = importlib.metadata.version("py_arctraj")

# Standard library imports
import os
import sys

# Third-party imports
from typing_extensions import Optional

# Local imports
from .logger import logger as log
from .config import TrajectoryConfigDict, create_trajectory_config, set_config

if sys.version_info[:2] < (3, 11):
    import tomli as tomllib
else:
    import tomllib


def _load_config(filepath: Optional[str] = None, suppress_warnings: bool = False) -> None:
    """Load configuration from a .arctraj.toml file.

    Args:
        filepath: Path to configuration file. If None, searches for .arctraj.toml or arctraj.toml
        suppress_warnings: If True, suppress warning messages
    """
    def find_arctraj_toml(start_dir: str = os.getcwd()) -> Optional[str]:
        """Search for the config file from `start_dir` up to the filesystem root."""
        current_dir = os.path.abspath(start_dir)
        while True:
            arctraj_paths = [
                os.path.join(current_dir, '.arctraj.toml'),
                os.path.join(current_dir, 'arctraj.toml'),
            ]
            for arctraj_path in arctraj_paths:
                if os.path.exists(arctraj_path):
                    return os.path.abspath(arctraj_path)

            parent_dir = os.path.dirname(current_dir)
            if parent_dir == current_dir:
                return None
            current_dir = parent_dir

    if filepath is None:
        filepath = find_arctraj_toml(os.getcwd())

    if filepath is not None:
        log.debug(f"Found {os.path.basename(filepath)} at {os.path.dirname(filepath)}")

        with open(filepath, "rb") as fp:
            _config = tomllib.load(fp)

            if (_arctraj := _config.get('arctraj')) is not None:
                set_config(create_trajectory_config(_arctraj))
            elif not suppress_warnings:
                log.warning("Config has no `arctraj` section")

    log.debug("Trajectory config load success")


def _basic_config(filename: Optional[str] = None,
                  config: Optional[TrajectoryConfigDict] = None,
                  suppress_warnings: bool = False) -> None:
    """Load the global trajectory config from file or Mapping.

    Args:
        filename: Configuration file path
        config: Dictionary of TrajectoryConfig overrides
        suppress_warnings: If True, suppress warning messages

    Raises:
        ValueError: If both filename and config are provided
    """
    if filename and config:
        raise ValueError("Can't use config and config file at same time")
    if not filename and config:
        set_config(create_trajectory_config(config))
    else:
        # trying to load definitions from arctraj.toml
        _load_config(filename, suppress_warnings)


basicConfig = _basic_config

basicConfig()


from .bases import BasisSet, crop_bases, fill_bases
from .config import (TrajectoryConfig, DEFAULT_TRAJECTORY_CONFIG, get_config, reset_config)
from .exceptions import (InterpolationError, TrajectoryNotBuiltError, TrajectoryBuildError,
                         BuilderConsumedError, FailureKind, InterpolationFailure,
                         InterpolationSuccess, InterpolationResult, BuildResult)
from .helpers import crossed, find_intervals, pretty_build
from .interpolated_array import InterpolatedArray, ChannelWindow
from .interpolation import (InterpolationMethod, InterpolationMethodEnum, Interpolator,
                            ScalarInterpolator, Linear, CubicSpline, AkimaSpline, Pchip,
                            Stairstep, SphericalLinear, create_interpolator)
from .logger import logger, enable_file_logging, disable_file_logging
from .points import Quaternion, Pose, PathPoint, is_almost_same
from .trajectory import PointTrajectory, PoseTrajectory, PathPointTrajectory
from .vector import Vector

# DRY: build __all__ from global symbols
_SKIP_GLOBALS = {
    # Skip Python builtins
    "__name__", "__doc__", "__package__", "__loader__", "__spec__",
    "__file__", "__cached__", "__builtins__",
    # Skip imported modules
    "tomllib", "sys", "os", "importlib",
    # Skip imported submodules
    "bases", "config", "exceptions", "helpers", "interpolated_array", "interpolation",
    "points", "trajectory", "vector",
    # Skip private/internal symbols
    "_load_config", "_basic_config", "log", "Optional",
}
# Build __all__ from the module's global namespace
__all__ = [
    name for name in globals()
    if not name.startswith("_") and name not in _SKIP_GLOBALS
]
