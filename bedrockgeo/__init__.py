"""
bedrockgeo - Convert engine-agnostic 3D models to Minecraft Bedrock geometry

Takes triangle meshes plus an optional bone/cube rig and produces the
minecraft:geometry document read by the Bedrock entity renderer.
"""

from bedrockgeo.schema import Geometry, Mesh, Bone, Cube, CubeUV, FaceUV
from bedrockgeo.converters.convert import ExportOptions, convert
from bedrockgeo.converters.bedrock.exporter import export_bedrock

__version__ = "0.0.1"
__all__ = [
    "Geometry",
    "Mesh",
    "Bone",
    "Cube",
    "CubeUV",
    "FaceUV",
    "ExportOptions",
    "convert",
    "export_bedrock",
]
