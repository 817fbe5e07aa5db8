"""py_arctraj exception and failure types.

Building an interpolator or a trajectory never raises on bad input data. It returns
a represented result instead: `InterpolationSuccess` or an `InterpolationFailure`
carrying a chain of causes. Exceptions are reserved for misuse of the API.

Exception Hierarchy
-------------------

Exception (built-in Python)
└── RuntimeError
    └── InterpolationError
        ├── TrajectoryNotBuiltError
        ├── TrajectoryBuildError
        └── BuilderConsumedError

Failure Values
--------------

- FailureKind: Root cause classification of a failed build.
  - EMPTY_INPUT: No samples were given.
  - LENGTH_MISMATCH: Bases and values differ in length (internal invariant violation).
  - INSUFFICIENT_SAMPLES: Fewer samples than the interpolator variant requires.
  - NON_MONOTONIC_BASES: Arc length did not strictly increase (duplicate or
    out-of-order input points).

- InterpolationFailure: Immutable failure value. Composite layers wrap a lower-layer
  failure with the name of the field being built, so the outermost message names
  the concrete failing channel while `root_cause` keeps the original reason.

- BuildResult: Value-or-failure returned by the trajectory builders.

Examples:
    ```python
    from py_arctraj import PathPointTrajectory

    result = PathPointTrajectory.Builder().build(points)
    if not result:
        print(result.error.chain)       # outer -> root messages
        print(result.error.root_kind)   # FailureKind of the root cause
    trajectory = result.unwrap()        # raises TrajectoryBuildError on failure
    ```
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from typing_extensions import List, Optional, Union

__all__ = (
    'InterpolationError',
    'TrajectoryNotBuiltError',
    'TrajectoryBuildError',
    'BuilderConsumedError',
    'FailureKind',
    'InterpolationFailure',
    'InterpolationSuccess',
    'InterpolationResult',
    'BuildResult',
)

T = TypeVar('T')


class FailureKind(str, Enum):
    """Root cause of a failed build."""

    EMPTY_INPUT = "empty input"
    LENGTH_MISMATCH = "length mismatch"
    INSUFFICIENT_SAMPLES = "insufficient samples"
    NON_MONOTONIC_BASES = "non-monotonic bases"


@dataclass(frozen=True)
class InterpolationFailure:
    """Failure of a build step, with the chain of causes that led to it.

    Attributes:
        message: Description of this step's failure.
        kind: Root cause classification. Only set on the innermost failure.
        cause: The lower-level failure this one wraps, if any.
    """

    message: str
    kind: Optional[FailureKind] = None
    cause: Optional[InterpolationFailure] = None

    def wrap(self, message: str) -> InterpolationFailure:
        """Return a new failure describing `message` that is caused by this one."""
        return InterpolationFailure(message, cause=self)

    @property
    def root_cause(self) -> InterpolationFailure:
        failure = self
        while failure.cause is not None:
            failure = failure.cause
        return failure

    @property
    def root_kind(self) -> Optional[FailureKind]:
        return self.root_cause.kind

    @property
    def chain(self) -> List[str]:
        """Messages from the outermost failure down to the root cause."""
        messages = []
        failure: Optional[InterpolationFailure] = self
        while failure is not None:
            messages.append(failure.message)
            failure = failure.cause
        return messages

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ": ".join(self.chain)


class InterpolationSuccess:
    """Successful build marker."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InterpolationSuccess)

    def __hash__(self) -> int:
        return hash(InterpolationSuccess)

    def __repr__(self) -> str:
        return "InterpolationSuccess()"


InterpolationResult = Union[InterpolationSuccess, InterpolationFailure]


class InterpolationError(RuntimeError):
    """Base class of py_arctraj runtime errors."""


class TrajectoryNotBuiltError(InterpolationError):
    """Raised when an interpolator or trajectory is queried before a successful build."""


class TrajectoryBuildError(InterpolationError):
    """Raised by `BuildResult.unwrap()` when the build failed.

    Contains:
    - failure: The InterpolationFailure that caused the build to fail
    """

    def __init__(self, failure: InterpolationFailure):
        self.failure: InterpolationFailure = failure
        super().__init__(f"Trajectory build failed: {failure}")


class BuilderConsumedError(InterpolationError):
    """Raised when a Builder is reused after it produced a trajectory."""


@dataclass(frozen=True)
class BuildResult(Generic[T]):
    """Result of `Builder.build()`: either a trajectory or the failure explaining why not.

    Attributes:
        value: The built trajectory, None on failure.
        error: The failure, None on success.
    """

    value: Optional[T] = None
    error: Optional[InterpolationFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the built trajectory.

        Raises:
            TrajectoryBuildError: If the build failed.
        """
        if self.error is not None:
            raise TrajectoryBuildError(self.error)
        assert self.value is not None
        return self.value
