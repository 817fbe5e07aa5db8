"""3D Vector Mathematics.

The Vector class is an immutable NamedTuple. It is the point sample type of
`PointTrajectory` and the carrier of derivative vectors (dx/ds, dy/ds, dz/ds) used
for azimuth and elevation.

Typical Usage:
    ```python
    from py_arctraj import Vector

    a = Vector(0.0, 0.0, 0.0)
    b = Vector(3.0, 4.0, 0.0)

    segment_length = (b - a).magnitude()  # 5.0
    direction = (b - a).normalize()       # Vector(0.6, 0.8, 0.0)
    midpoint = a + (b - a) * 0.5
    ```
"""
from __future__ import annotations

import math
from typing import Union, NamedTuple

__all__ = ('Vector',)


class Vector(NamedTuple):
    """Immutable 3D vector in a right-handed map frame.

    Attributes:
        x: East/forward component.
        y: North/left component.
        z: Up component.
    """

    x: float
    y: float
    z: float = 0.0

    def magnitude(self) -> float:
        """Calculate the Euclidean norm (length) of the vector.

        Note:
            Uses math.hypot() for numerical stability with extreme values.
        """
        return math.hypot(self.x, self.y, self.z)

    def mul_by_const(self, a: float) -> Vector:
        """Multiply vector by a scalar constant."""
        return Vector(self.x * a, self.y * a, self.z * a)

    def mul_by_vector(self, b: Vector) -> float:
        """Calculate the dot product of two vectors."""
        return self.x * b.x + self.y * b.y + self.z * b.z

    def add(self, b: Vector) -> Vector:
        """Add two vectors component-wise."""
        return Vector(self.x + b.x, self.y + b.y, self.z + b.z)

    def subtract(self, b: Vector) -> Vector:
        """Subtract one vector from another component-wise.

        The result represents the vector from b to self.
        """
        return Vector(self.x - b.x, self.y - b.y, self.z - b.z)

    def negate(self) -> Vector:
        """Create a vector with opposite direction."""
        return Vector(-self.x, -self.y, -self.z)

    def normalize(self) -> Vector:
        """Create a unit vector pointing in the same direction.

        Returns:
            New Vector instance with magnitude 1.0 and same direction.
                For near-zero vectors (magnitude < 1e-10), returns a copy of
                the original vector to avoid division by zero.
        """
        m = self.magnitude()
        if math.fabs(m) < 1e-10:
            return Vector(self.x, self.y, self.z)
        return self.mul_by_const(1.0 / m)

    def distance_to(self, b: Vector) -> float:
        """Euclidean distance between two points."""
        return math.hypot(self.x - b.x, self.y - b.y, self.z - b.z)

    def __mul__(self, other: Union[int, float, Vector]) -> Union[float, Vector]:  # type: ignore[override]
        """Scalar multiplication for numbers, dot product for vectors.

        Raises:
            TypeError: If other is not int, float, or Vector instance.
        """
        if isinstance(other, (int, float)):
            return self.mul_by_const(other)
        if isinstance(other, Vector):
            return self.mul_by_vector(other)
        raise TypeError(other)

    # Operator overloads - aliases more efficient than wrappers
    def __add__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.add(other)

    def __radd__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.add(other)

    def __iadd__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.add(other)

    def __sub__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.subtract(other)

    def __isub__(self, other: Vector) -> Vector:  # type: ignore[override]
        return self.subtract(other)

    def __rmul__(self, other: Union[int, float, Vector]) -> Union[float, Vector]:  # type: ignore[override]
        return self.__mul__(other)

    def __imul__(self, other: Union[int, float, Vector]) -> Union[float, Vector]:  # type: ignore[override]
        return self.__mul__(other)

    def __neg__(self) -> Vector:  # type: ignore[override]
        return self.negate()
