"""
Geometry → Bedrock Exporter

Maps the generic Geometry schema onto Bedrock entity geometry.

Two paths:
- Rigged: every Bone becomes a Bedrock bone, parents resolved by name
- Simple: a Geometry without bones is exported as one "root" bone holding a
  single cube that spans the combined mesh

Units are passed through unchanged. Bedrock reads positions in pixels
(16 per block), so loaders working in blocks or meters should call
Geometry.scaled() before exporting.
"""

import logging
import math
from typing import Any, Dict, Optional, Sequence, Tuple

from bedrockgeo.converters.bedrock.model import (
    DEFAULT_FORMAT_VERSION,
    DEFAULT_TEXTURE_SIZE,
    DEFAULT_VISIBLE_BOUNDS_SIZE,
    BedrockBone,
    BedrockCube,
    BedrockGeometry,
    BoxUV,
)
from bedrockgeo.converters.uv_mapper import to_bedrock_uv
from bedrockgeo.schema.geometry import Bone, Cube, Geometry, Mesh
from bedrockgeo.schema.vectors import BoundingBox, Vector2, Vector3

logger = logging.getLogger(__name__)

# Constants
PIXELS_PER_BLOCK = 16  # Minecraft standard
IDENTIFIER_PREFIX = "geometry."
SIMPLE_ROOT_BONE = "root"

VisibleBounds = Tuple[float, float, Vector3]


def make_identifier(name: str) -> str:
    """geometry.<name>, the form the engine looks identifiers up by."""
    if name.startswith(IDENTIFIER_PREFIX):
        return name
    return f"{IDENTIFIER_PREFIX}{name}"


def to_bedrock_cube(cube: Cube) -> BedrockCube:
    """Convert a generic Cube, dropping every field left at its default."""
    rotated = cube.rotation != Vector3.ZERO
    return BedrockCube(
        origin=cube.origin,
        size=cube.size,
        uv=to_bedrock_uv(cube.uv),
        # A rotated cube always carries its pivot
        pivot=cube.pivot if rotated or cube.pivot != Vector3.ZERO else None,
        rotation=cube.rotation if rotated else None,
        inflate=cube.inflate if cube.inflate != 0 else None,
        mirror=True if cube.mirror else None,
    )


def to_bedrock_bone(bone: Bone, bones: Sequence[Bone]) -> BedrockBone:
    """Convert a generic Bone; parent_index becomes the parent's name."""
    parent = None if bone.is_root else bones[bone.parent_index].name
    return BedrockBone(
        name=bone.name,
        parent=parent,
        pivot=bone.pivot,
        rotation=bone.rotation,
        cubes=tuple(to_bedrock_cube(cube) for cube in bone.cubes),
    )


def mesh_to_bedrock_bone(mesh: Mesh, name: str = SIMPLE_ROOT_BONE) -> BedrockBone:
    """Approximate a mesh by one box-UV cube over its bounds."""
    if mesh.vertex_count == 0:
        return BedrockBone(name=name)

    bounds = mesh.calculate_bounds()
    cube = BedrockCube(
        origin=bounds.min,
        size=bounds.size,
        uv=BoxUV(Vector2.ZERO),
    )
    return BedrockBone(name=name, cubes=(cube,))


def calculate_rig_bounds(geometry: Geometry) -> BoundingBox:
    """Bounds of what the exporter emits: cubes when rigged, meshes otherwise."""
    if not geometry.has_skeleton:
        return geometry.calculate_bounds()

    corners = []
    for bone in geometry.bones:
        for cube in bone.cubes:
            grow = Vector3(cube.inflate, cube.inflate, cube.inflate)
            corners.append(cube.origin - grow)
            corners.append(cube.origin + cube.size + grow)
    return BoundingBox.from_points(corners)


def visible_bounds_from(bounds: BoundingBox) -> VisibleBounds:
    """
    Suggest visible-bounds metadata (in blocks) that encloses the given bounds.

    Width covers the larger horizontal extent, height the vertical one, both
    rounded up to whole blocks with a minimum of one. The offset is the
    bounds center.
    """
    size = bounds.size
    width = max(math.ceil(max(size.x, size.z) / PIXELS_PER_BLOCK), 1)
    height = max(math.ceil(size.y / PIXELS_PER_BLOCK), 1)
    offset = bounds.center * (1.0 / PIXELS_PER_BLOCK)
    return float(width), float(height), offset


def to_bedrock_geometry(
    geometry: Geometry,
    identifier: str,
    texture_width: int = DEFAULT_TEXTURE_SIZE,
    texture_height: int = DEFAULT_TEXTURE_SIZE,
    visible_bounds: Optional[VisibleBounds] = None,
    format_version: str = DEFAULT_FORMAT_VERSION,
) -> BedrockGeometry:
    """
    Map a Geometry to BedrockGeometry.

    Args:
        geometry: Validated generic geometry
        identifier: Model identifier, "geometry." is prefixed when missing
        texture_width: Texture width in pixels
        texture_height: Texture height in pixels
        visible_bounds: Optional (width, height, offset); defaults to 1x1 at origin
        format_version: Bedrock format version string

    Returns:
        BedrockGeometry ready for to_json_map()
    """
    if geometry.has_skeleton:
        logger.info(f"Mapping {len(geometry.bones)} bones of '{geometry.id}' to Bedrock")
        bones = tuple(to_bedrock_bone(bone, geometry.bones) for bone in geometry.bones)
    else:
        logger.info(f"Mapping {len(geometry.meshes)} meshes of '{geometry.id}' to a single Bedrock bone")
        bones = (mesh_to_bedrock_bone(geometry.combined_mesh()),)

    for bone in bones:
        logger.debug(f"Bone '{bone.name}' (parent={bone.parent}, cubes={len(bone.cubes)})")

    if visible_bounds is None:
        visible_bounds = (DEFAULT_VISIBLE_BOUNDS_SIZE, DEFAULT_VISIBLE_BOUNDS_SIZE, Vector3.ZERO)
    bounds_width, bounds_height, bounds_offset = visible_bounds

    return BedrockGeometry(
        identifier=make_identifier(identifier),
        format_version=format_version,
        texture_width=texture_width,
        texture_height=texture_height,
        visible_bounds_width=bounds_width,
        visible_bounds_height=bounds_height,
        visible_bounds_offset=bounds_offset,
        bones=bones,
    )


def export_bedrock(geometry: Geometry, identifier: str, **options: Any) -> Dict[str, Any]:
    """
    Export a Geometry straight to the Bedrock document tree.

    Keyword options are passed to to_bedrock_geometry(). The result only
    holds str/int/float/bool/list/dict values and can go to json.dumps as is.
    """
    return to_bedrock_geometry(geometry, identifier, **options).to_json_map()
