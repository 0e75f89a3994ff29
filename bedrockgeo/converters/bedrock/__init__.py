"""Bedrock entity geometry export"""

from .model import BedrockGeometry, BedrockBone, BedrockCube, BoxUV, PerFaceUV
from .exporter import export_bedrock, to_bedrock_geometry

__all__ = [
    "BedrockGeometry",
    "BedrockBone",
    "BedrockCube",
    "BoxUV",
    "PerFaceUV",
    "export_bedrock",
    "to_bedrock_geometry",
]
