"""
UV Mapper - picks the Bedrock UV encoding for a cube.

Bedrock cubes carry exactly one of two UV shapes:
- Box UV: a single [u, v] offset, faces laid out by the standard template
- Per-face UV: {"north": {"uv": [u, v], "uv_size": [w, h]}, ...}

The choice is made here, once, from the generic CubeUV. Box UV wins when it
is set; the per-face rectangles are ignored in that case. Per-face maps
follow FaceName order (north, south, east, west, up, down).
"""
from bedrockgeo.converters.bedrock.model import BedrockUV, BoxUV, PerFaceUV
from bedrockgeo.schema.geometry import CubeUV


def to_bedrock_uv(cube_uv: CubeUV) -> BedrockUV:
    """Converts a generic CubeUV to the Bedrock tagged UV value."""
    if cube_uv.is_box_uv:
        return BoxUV(cube_uv.box_uv)
    return PerFaceUV(dict(cube_uv.faces()))
