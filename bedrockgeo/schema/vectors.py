"""
Math primitives shared by the geometry schema and the Bedrock exporter.

All values are immutable. Arithmetic always returns a new value.

COORDINATES:
- Model space, Y-up, right-handed (same convention the Bedrock renderer uses)
- Bedrock geometry is authored in pixels: 16 units = 1 block
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

Quat4 = Tuple[float, float, float, float]  # [w, x, y, z]


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    @property
    def u(self) -> float:
        return self.x

    @property
    def v(self) -> float:
        return self.y

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def to_list(self) -> List[float]:
        return [self.x, self.y]


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector3:
        """Unit-length copy. The zero vector normalizes to itself."""
        length = self.length()
        if length == 0:
            return Vector3.ZERO
        return Vector3(self.x / length, self.y / length, self.z / length)

    def to_list(self) -> List[float]:
        return [self.x, self.y, self.z]


Vector2.ZERO = Vector2(0.0, 0.0)
Vector3.ZERO = Vector3(0.0, 0.0, 0.0)
Vector3.ONE = Vector3(1.0, 1.0, 1.0)


def coerce_vector2(value):
    """Accept a Vector2 or any [u, v] sequence (interchange JSON)."""
    if isinstance(value, Vector2):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return Vector2(float(value[0]), float(value[1]))
    raise ValueError(f"Expected [u, v], got {value!r}")


def coerce_vector3(value):
    """Accept a Vector3 or any [x, y, z] sequence (interchange JSON)."""
    if isinstance(value, Vector3):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return Vector3(float(value[0]), float(value[1]), float(value[2]))
    raise ValueError(f"Expected [x, y, z], got {value!r}")


@dataclass(frozen=True)
class Transform:
    """
    Rigid/affine transform used as a bone's bind pose.

    Rotation is a quaternion [w, x, y, z], matching the rest of the schema.
    The core stores bind poses but never composes them.
    """
    translation: Vector3 = Vector3.ZERO
    rotation: Quat4 = (1.0, 0.0, 0.0, 0.0)
    scale: Vector3 = Vector3.ONE

    @property
    def is_identity(self) -> bool:
        return self == Transform.IDENTITY

    def to_matrix(self) -> np.ndarray:
        """4x4 matrix, applied as Translate * Rotate * Scale."""
        w, x, y, z = self.rotation
        norm = math.sqrt(w * w + x * x + y * y + z * z)
        if norm == 0:
            w, x, y, z = 1.0, 0.0, 0.0, 0.0
        else:
            w, x, y, z = w / norm, x / norm, y / norm, z / norm

        rotation = np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ], dtype=np.float64)

        matrix = np.eye(4, dtype=np.float64)
        matrix[:3, :3] = rotation @ np.diag(self.scale.to_list())
        matrix[:3, 3] = self.translation.to_list()
        return matrix


Transform.IDENTITY = Transform()


def coerce_transform(value):
    """
    Accept a Transform or its interchange JSON form:
    {"translation": [x, y, z], "rotation": [w, x, y, z], "scale": [x, y, z]},
    every key optional.
    """
    if isinstance(value, Transform):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"Expected a transform object, got {value!r}")

    unknown = set(value) - {"translation", "rotation", "scale"}
    if unknown:
        raise ValueError(f"Unknown transform keys: {sorted(unknown)}")

    rotation = value.get("rotation", Transform.IDENTITY.rotation)
    if not isinstance(rotation, (list, tuple)) or len(rotation) != 4:
        raise ValueError(f"Expected [w, x, y, z], got {rotation!r}")

    return Transform(
        translation=coerce_vector3(value.get("translation", Vector3.ZERO)),
        rotation=tuple(float(component) for component in rotation),
        scale=coerce_vector3(value.get("scale", Vector3.ONE)),
    )


@dataclass(frozen=True)
class BoundingBox:
    min: Vector3 = Vector3.ZERO
    max: Vector3 = Vector3.ZERO

    @property
    def size(self) -> Vector3:
        return self.max - self.min

    @property
    def center(self) -> Vector3:
        return (self.min + self.max) * 0.5

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            Vector3(min(self.min.x, other.min.x), min(self.min.y, other.min.y), min(self.min.z, other.min.z)),
            Vector3(max(self.max.x, other.max.x), max(self.max.y, other.max.y), max(self.max.z, other.max.z)),
        )

    @classmethod
    def from_vertices(cls, vertices: Sequence[float]) -> BoundingBox:
        """Bounds of a flat x,y,z buffer. Empty buffer gives the zero box."""
        if len(vertices) == 0:
            return cls(Vector3.ZERO, Vector3.ZERO)
        points = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        lo = points.min(axis=0).tolist()
        hi = points.max(axis=0).tolist()
        return cls(Vector3(*lo), Vector3(*hi))

    @classmethod
    def from_points(cls, points: Iterable[Vector3]) -> BoundingBox:
        flat: List[float] = []
        for point in points:
            flat.extend((point.x, point.y, point.z))
        return cls.from_vertices(flat)
