"""Three-component vectors used for positions, velocities and box sizes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Tuple

import numpy as np

from groconf.errors import VectorParseError


def _parse_float(text: str) -> float:
    # float() also takes digit separators and non-ASCII digits
    if "_" in text or not text.isascii():
        raise ValueError(f"Invalid number {text!r}")
    return float(text)


class Direction(Enum):
    """Principal axes of a configuration."""

    X = 0
    Y = 1
    Z = 2


@dataclass(frozen=True)
class Vector3:
    """A three-component vector.

    Attributes
    ----------
    x
        First component.
    y
        Second component.
    z
        Third component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def distance(self, other: Vector3) -> float:
        """Return the Euclidean distance to another vector."""
        dx, dy, dz = other - self
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def distance_cylindrical(self, other: Vector3, axis: Direction) -> Tuple[float, float]:
        """Decompose the distance to another vector along a principal axis.

        Parameters
        ----------
        other
            Vector to measure the distance to.
        axis
            Cylinder axis.

        Returns
        -------
        tuple
            Radial distance in the plane normal to the axis and the absolute
            distance along the axis.
        """

        delta = tuple(other - self)
        axial = delta[axis.value]
        radial = [value for i, value in enumerate(delta) if i != axis.value]
        return math.hypot(*radial), abs(axial)

    def pbc_multiply(self, nx: int, ny: int, nz: int) -> Vector3:
        """Scale each component by an integer image count."""
        return Vector3(self.x * nx, self.y * ny, self.z * nz)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> Vector3:
        """Build a vector from any length-3 sequence or array.

        Raises
        ------
        ValueError
            If the input does not hold exactly three values.
        """

        array = np.asarray(values, dtype=float).reshape(-1)
        if array.shape != (3,):
            raise ValueError(f"Expected 3 values, got {array.size}")
        return cls(float(array[0]), float(array[1]), float(array[2]))

    @classmethod
    def from_fixed(cls, text: str, width: int) -> Vector3:
        """Parse three consecutive fixed-width fields.

        The text is cut into chunks of ``width`` characters and the first three
        chunks are read as numbers. Anything after the third chunk is ignored.

        Parameters
        ----------
        text
            Text starting at the first field.
        width
            Width of every field.

        Returns
        -------
        Vector3
            Parsed vector.

        Raises
        ------
        VectorParseError
            With ``missing=True`` if the text is blank or holds fewer than
            three fields, and ``missing=False`` if a field is not a number.
        """

        if not text.strip():
            raise VectorParseError("No values to parse", missing=True)

        chunks = [text[start:start + width] for start in range(0, len(text), width)]
        values = []
        for chunk in chunks[:3]:
            try:
                values.append(_parse_float(chunk.strip()))
            except ValueError as exc:
                raise VectorParseError(f"Invalid value {chunk!r}", missing=False) from exc
        if len(values) < 3:
            raise VectorParseError(f"Expected 3 values, got {len(values)}", missing=True)
        return cls(*values)

    @classmethod
    def from_whitespace(cls, text: str) -> Vector3:
        """Parse the first three whitespace-separated numbers of a string.

        Raises
        ------
        VectorParseError
            If fewer than three tokens are present or one of the first three
            is not a number.
        """

        tokens = text.split()
        if len(tokens) < 3:
            raise VectorParseError(f"Expected 3 values, got {len(tokens)}", missing=True)
        try:
            return cls(_parse_float(tokens[0]), _parse_float(tokens[1]), _parse_float(tokens[2]))
        except ValueError as exc:
            raise VectorParseError(f"Invalid values {tokens[:3]!r}", missing=False) from exc
