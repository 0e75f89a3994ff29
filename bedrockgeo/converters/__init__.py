"""Format converters for bedrockgeo models"""

from bedrockgeo.converters.bedrock.exporter import export_bedrock, to_bedrock_geometry
from bedrockgeo.converters.convert import ExportOptions, convert, load_geometry, parse_geometry

__all__ = [
    "export_bedrock",
    "to_bedrock_geometry",
    "ExportOptions",
    "convert",
    "load_geometry",
    "parse_geometry",
]
