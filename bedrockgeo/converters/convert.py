"""
Format conversion utilities

Loads a Geometry from interchange JSON, normalizes it and writes the Bedrock
geometry document.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from pydantic import ValidationError

from bedrockgeo.converters.bedrock.exporter import (
    calculate_rig_bounds,
    to_bedrock_geometry,
    visible_bounds_from,
)
from bedrockgeo.converters.bedrock.model import DEFAULT_TEXTURE_SIZE
from bedrockgeo.exceptions import InvalidGeometryError, UnsupportedFormatError
from bedrockgeo.schema.geometry import Geometry

logger = logging.getLogger(__name__)

INPUT_EXTENSIONS = ('.json',)
OUTPUT_EXTENSIONS = ('.json',)


@dataclass
class ExportOptions:
    """
    Knobs for a single conversion.

    Attributes:
        identifier: Geometry identifier (defaults to the input file name)
        scale: Uniform scale applied to every mesh before export
        generate_normals: Synthesize normals for meshes without them
        flip_uvs: Flip V on every mesh (bottom-left to top-left origin)
        texture_width: Texture width written to the description
        texture_height: Texture height written to the description
        fit_visible_bounds: Derive visible bounds from the exported cubes
    """
    identifier: Optional[str] = None
    scale: float = 1.0
    generate_normals: bool = False
    flip_uvs: bool = False
    texture_width: int = DEFAULT_TEXTURE_SIZE
    texture_height: int = DEFAULT_TEXTURE_SIZE
    fit_visible_bounds: bool = False


def parse_geometry(data: Dict[str, Any]) -> Geometry:
    """Validate an interchange dict into a Geometry."""
    try:
        return Geometry.model_validate(data)
    except ValidationError as e:
        raise InvalidGeometryError(f"Invalid geometry: {e}") from e


def load_geometry(path: str) -> Geometry:
    """Load interchange JSON from disk."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    _check_extension(path, INPUT_EXTENSIONS)

    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidGeometryError(f"Invalid JSON in {path}: {e}") from e
    return parse_geometry(data)


def prepare_geometry(geometry: Geometry, options: ExportOptions) -> Geometry:
    """Apply the optional normalization steps, in a fixed order."""
    if options.generate_normals:
        geometry = geometry.with_generated_normals()
    if options.flip_uvs:
        geometry = geometry.with_flipped_uvs()
    if options.scale != 1.0:
        geometry = geometry.scaled(options.scale)
    return geometry


def build_document(geometry: Geometry, options: ExportOptions) -> Dict[str, Any]:
    """Normalize the geometry and build the Bedrock document tree."""
    geometry = prepare_geometry(geometry, options)
    identifier = options.identifier or geometry.id

    visible_bounds = None
    if options.fit_visible_bounds:
        visible_bounds = visible_bounds_from(calculate_rig_bounds(geometry))

    bedrock = to_bedrock_geometry(
        geometry,
        identifier,
        texture_width=options.texture_width,
        texture_height=options.texture_height,
        visible_bounds=visible_bounds,
    )
    return bedrock.to_json_map()


def convert(input_path: str, output_path: str, options: Optional[ExportOptions] = None) -> Dict[str, Any]:
    """
    Convert interchange JSON to a Bedrock geometry file.

    Args:
        input_path: Path to the interchange JSON
        output_path: Path of the .json file to write
        options: Export options (defaults used when None)

    Returns:
        The document that was written

    Raises:
        FileNotFoundError: If input file doesn't exist
        ValueError: If the input is invalid or a format is unsupported

    Examples:
        >>> convert("zombie.json", "zombie.geo.json")
        >>> convert("crate.json", "crate.geo.json", ExportOptions(scale=16))
    """
    if options is None:
        options = ExportOptions()
    _check_extension(output_path, OUTPUT_EXTENSIONS)

    geometry = load_geometry(input_path)
    if options.identifier is None:
        options = _with_default_identifier(options, input_path)

    logger.info(f"Converting {input_path} -> {output_path} (identifier={options.identifier})")
    document = build_document(geometry, options)

    with open(output_path, 'w') as f:
        json.dump(document, f, indent=2)
    return document


def _with_default_identifier(options: ExportOptions, input_path: str) -> ExportOptions:
    """Identifier from the file name: zombie.geo.json -> zombie"""
    name = os.path.basename(input_path).split('.')[0]
    return replace(options, identifier=name)


def _check_extension(path: str, allowed: tuple) -> None:
    ext = os.path.splitext(path)[1].lower()
    if ext not in allowed:
        raise UnsupportedFormatError(
            f"Unsupported file format: {ext}. "
            f"Supported: {', '.join(allowed)}"
        )
