"""Generic geometry schema definitions."""
from .vectors import Vector2, Vector3, Transform, BoundingBox
from .geometry import (
    Geometry,
    Mesh,
    Bone,
    Cube,
    CubeUV,
    FaceUV,
    FaceName,
)

__all__ = [
    "Vector2",
    "Vector3",
    "Transform",
    "BoundingBox",
    "Geometry",
    "Mesh",
    "Bone",
    "Cube",
    "CubeUV",
    "FaceUV",
    "FaceName",
]
