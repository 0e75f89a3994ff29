"""Custom exceptions for geometry loading and conversion"""


class BedrockGeoError(Exception):
    """Base exception for bedrockgeo errors"""
    pass


class InvalidGeometryError(BedrockGeoError, ValueError):
    """Interchange JSON that does not describe a valid Geometry"""
    pass


class UnsupportedFormatError(BedrockGeoError, ValueError):
    """File extension the converter cannot read or write"""
    pass
