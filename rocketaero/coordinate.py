"""Weighted coordinates and float tolerance helpers.

The centre of pressure of a component is carried as a ``Coordinate``: a
position in the rocket frame together with a weight (for aerodynamic data,
the normal force derivative CNa of the part). Combining two coordinates
with ``average`` pulls the result toward the heavier one, which is how the
CP of an assembly is built up from its parts.

Example:
    >>> from rocketaero.coordinate import Coordinate
    >>>
    >>> nose = Coordinate(0.05, 0.0, 0.0, 2.0)
    >>> fins = Coordinate(0.80, 0.0, 0.0, 8.0)
    >>> nose.average(fins)
    Coordinate(x=0.65, y=0.0, z=0.0, weight=10.0)
"""

import math
from dataclasses import dataclass
from typing import ClassVar

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

# Absolute tolerance for comparing recomputed coefficients
EPSILON = 1e-8


@beartype
def float_equals(a: float, b: float) -> bool:
    """Compare two floats within ``EPSILON``."""
    return math.fabs(a - b) < EPSILON


@beartype
def optional_equals(a: float | None, b: float | None) -> bool:
    """Compare two optional floats.

    Two absent values are equal; an absent value never equals a present one.
    """
    if a is None or b is None:
        return a is None and b is None
    return float_equals(a, b)


# =============================================================================
# Coordinate
# =============================================================================


@beartype
@dataclass(frozen=True, eq=False)
class Coordinate:
    """Immutable position with an attached weight.

    Attributes:
        x, y, z: Position in the rocket frame [m]
        weight: Weight used when averaging positions
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    weight: float = 0.0

    NUL: ClassVar["Coordinate"]

    def average(self, other: "Coordinate") -> "Coordinate":
        """Weighted average of this coordinate and ``other``.

        The result weight is the sum of both weights. When the weights
        cancel out the plain midpoint is returned with zero weight.
        """
        w = self.weight + other.weight
        if math.fabs(w) < EPSILON ** 2:
            return Coordinate(
                (self.x + other.x) / 2,
                (self.y + other.y) / 2,
                (self.z + other.z) / 2,
                0.0,
            )

        return Coordinate(
            (self.x * self.weight + other.x * other.weight) / w,
            (self.y * self.weight + other.y * other.weight) / w,
            (self.z * self.weight + other.z * other.weight) / w,
            w,
        )

    def __add__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(
            self.x + other.x,
            self.y + other.y,
            self.z + other.z,
            self.weight + other.weight,
        )

    def __sub__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x - other.x, self.y - other.y, self.z - other.z, self.weight)

    def __mul__(self, scale: float) -> "Coordinate":
        return Coordinate(self.x * scale, self.y * scale, self.z * scale, self.weight)

    def length(self) -> float:
        """Euclidean length of the position part."""
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def as_array(self) -> NDArray[np.float64]:
        """Return ``[x, y, z, weight]`` as a float64 array."""
        return np.array([self.x, self.y, self.z, self.weight], dtype=np.float64)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Coordinate):
            return False
        return (
            float_equals(self.x, other.x)
            and float_equals(self.y, other.y)
            and float_equals(self.z, other.z)
            and float_equals(self.weight, other.weight)
        )

    def __hash__(self) -> int:
        # Coarse bucket; equal coordinates land in the same bucket except
        # right at a rounding boundary
        return int(round((self.x + self.y + self.z) * 1000))


NUL = Coordinate(0.0, 0.0, 0.0, 0.0)
Coordinate.NUL = NUL
