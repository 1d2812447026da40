"""Host-side vector helpers backed by NumPy.

Kernel code works on ``taichi.math.vec3``; this module covers the Python
side, where camera and scene parameters are validated before they are
written into Taichi fields.

Example:
    >>> from mcray.core.vector import UnitVector3, as_vec3
    >>> direction = UnitVector3.normalize((0.0, 3.0, 4.0))
    >>> direction.y
    0.6
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from mcray.errors import DegenerateGeometryError

Vec3Like = Sequence[float] | npt.NDArray[np.floating]


def as_vec3(value: Vec3Like, name: str = "vector") -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a float64 array.

    Args:
        value: Any sequence or array with exactly three finite components.
        name: Label used in error messages.

    Returns:
        A new float64 array of shape (3,).

    Raises:
        ValueError: If the shape is wrong or a component is not finite.
    """
    array = np.asarray(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got {array.shape[0]}")
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} has non-finite components: {tuple(array)}")
    return array.copy()


class UnitVector3:
    """An immutable direction guaranteed to have unit length.

    Instances are only produced by :meth:`normalize`, so holding one means
    normalisation already happened and succeeded.
    """

    __slots__ = ("_data",)

    def __init__(self, data: npt.NDArray[np.float64], _token: object = None) -> None:
        if _token is not _CONSTRUCT:
            raise TypeError("use UnitVector3.normalize() to build a unit vector")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def normalize(cls, value: Vec3Like, name: str = "direction") -> UnitVector3:
        """Normalise ``value`` to unit length.

        Raises:
            DegenerateGeometryError: If ``value`` has zero length.
            ValueError: If ``value`` is malformed or not finite.
        """
        array = as_vec3(value, name)
        norm = float(np.linalg.norm(array))
        if norm == 0.0:
            raise DegenerateGeometryError(f"{name} has zero length and cannot be normalised")
        return cls(array / norm, _CONSTRUCT)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the components."""
        return self._data.copy()

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def dot(self, other: UnitVector3 | Vec3Like) -> float:
        other_data = other._data if isinstance(other, UnitVector3) else as_vec3(other)
        return float(np.dot(self._data, other_data))

    def cross(self, other: UnitVector3 | Vec3Like) -> npt.NDArray[np.float64]:
        """Cross product; the result is a plain vector, not necessarily unit length."""
        other_data = other._data if isinstance(other, UnitVector3) else as_vec3(other)
        return np.cross(self._data, other_data)

    def __array__(self, dtype=None, copy=None):
        return self._data.astype(dtype) if dtype is not None else self._data.copy()

    def __neg__(self) -> UnitVector3:
        return UnitVector3(-self._data, _CONSTRUCT)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitVector3):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash(self.to_tuple())

    def __repr__(self) -> str:
        return f"UnitVector3({self.x}, {self.y}, {self.z})"


_CONSTRUCT = object()
