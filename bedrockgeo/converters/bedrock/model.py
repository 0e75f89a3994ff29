"""
Bedrock entity geometry types (minecraft:geometry, format 1.12.0).

These mirror the generic schema in the shape the Bedrock renderer expects.
Each type builds its part of the output document with to_json_map().

FIELD PRESENCE:
Optional fields are left out of the document when unset. The document never
contains None or empty placeholders, and every key below is spelled exactly
as the engine reads it.

Document shape:
    {
      "format_version": "1.12.0",
      "minecraft:geometry": [
        {
          "description": {
            "identifier": "geometry.example",
            "texture_width": 64, "texture_height": 64,
            "visible_bounds_width": 1.0, "visible_bounds_height": 1.0,
            "visible_bounds_offset": [0, 0, 0]
          },
          "bones": [
            {"name": "body", "pivot": [0, 0, 0], "parent": "root", "rotation": [...],
             "cubes": [{"origin": [...], "size": [...], "uv": [0, 0]}]}
          ]
        }
      ]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from bedrockgeo.schema.geometry import FaceName, FaceUV
from bedrockgeo.schema.vectors import Vector2, Vector3

# Format defaults
DEFAULT_FORMAT_VERSION = "1.12.0"
DEFAULT_TEXTURE_SIZE = 64
DEFAULT_VISIBLE_BOUNDS_SIZE = 1.0
GEOMETRY_KEY = "minecraft:geometry"


@dataclass(frozen=True)
class BoxUV:
    """Single texture offset; the six faces follow the box UV template."""
    offset: Vector2

    def to_json(self) -> List[float]:
        return [self.offset.u, self.offset.v]


@dataclass(frozen=True)
class PerFaceUV:
    """Independent UV rectangle per face, keyed by face name."""
    faces: Dict[FaceName, FaceUV] = field(default_factory=dict, hash=False)

    def to_json(self) -> Dict[str, Any]:
        return {
            face.value: {"uv": face_uv.uv.to_list(), "uv_size": face_uv.uv_size.to_list()}
            for face, face_uv in self.faces.items()
        }


BedrockUV = Union[BoxUV, PerFaceUV]


@dataclass(frozen=True)
class BedrockCube:
    origin: Vector3
    size: Vector3
    uv: BedrockUV
    pivot: Optional[Vector3] = None
    rotation: Optional[Vector3] = None
    inflate: Optional[float] = None
    mirror: Optional[bool] = None

    def to_json_map(self) -> Dict[str, Any]:
        cube = {
            "origin": self.origin.to_list(),
            "size": self.size.to_list(),
        }
        if self.pivot is not None:
            cube["pivot"] = self.pivot.to_list()
        if self.rotation is not None:
            cube["rotation"] = self.rotation.to_list()
        if self.inflate is not None:
            cube["inflate"] = self.inflate
        if self.mirror is not None:
            cube["mirror"] = self.mirror
        cube["uv"] = self.uv.to_json()
        return cube


@dataclass(frozen=True)
class BedrockBone:
    name: str
    parent: Optional[str] = None
    pivot: Vector3 = Vector3.ZERO
    rotation: Vector3 = Vector3.ZERO
    cubes: Tuple[BedrockCube, ...] = ()

    def to_json_map(self) -> Dict[str, Any]:
        bone: Dict[str, Any] = {
            "name": self.name,
            "pivot": self.pivot.to_list(),
        }
        if self.parent is not None:
            bone["parent"] = self.parent
        if self.rotation != Vector3.ZERO:
            bone["rotation"] = self.rotation.to_list()
        if self.cubes:
            bone["cubes"] = [cube.to_json_map() for cube in self.cubes]
        return bone


@dataclass(frozen=True)
class BedrockGeometry:
    identifier: str
    format_version: str = DEFAULT_FORMAT_VERSION
    texture_width: int = DEFAULT_TEXTURE_SIZE
    texture_height: int = DEFAULT_TEXTURE_SIZE
    visible_bounds_width: float = DEFAULT_VISIBLE_BOUNDS_SIZE
    visible_bounds_height: float = DEFAULT_VISIBLE_BOUNDS_SIZE
    visible_bounds_offset: Vector3 = Vector3.ZERO
    bones: Tuple[BedrockBone, ...] = ()

    def to_json_map(self) -> Dict[str, Any]:
        return {
            "format_version": self.format_version,
            GEOMETRY_KEY: [
                {
                    "description": {
                        "identifier": self.identifier,
                        "texture_width": self.texture_width,
                        "texture_height": self.texture_height,
                        "visible_bounds_width": self.visible_bounds_width,
                        "visible_bounds_height": self.visible_bounds_height,
                        "visible_bounds_offset": self.visible_bounds_offset.to_list(),
                    },
                    "bones": [bone.to_json_map() for bone in self.bones],
                }
            ],
        }
