"""
bedrockgeo CLI - Command-line interface for exporting Bedrock geometry
"""

import logging
import sys

import click

from bedrockgeo import __version__
from bedrockgeo.converters.bedrock.exporter import calculate_rig_bounds
from bedrockgeo.converters.convert import ExportOptions, convert as convert_model, load_geometry


def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    bedrockgeo - Export 3D models as Minecraft Bedrock entity geometry.

    Examples:
        bedrockgeo convert zombie.json zombie.geo.json
        bedrockgeo info zombie.json
    """
    pass


@cli.command()
@click.argument('input_path')
@click.argument('output_path')
@click.option('--identifier', default=None, help='Geometry identifier (default: input file name)')
@click.option('--scale', default=1.0, type=float, help='Uniform scale applied to every mesh')
@click.option('--generate-normals', is_flag=True, help='Synthesize normals for meshes without them')
@click.option('--flip-uvs', is_flag=True, help='Flip the V texture coordinate on every mesh')
@click.option('--texture-width', default=64, type=int, help='Texture width in pixels')
@click.option('--texture-height', default=64, type=int, help='Texture height in pixels')
@click.option('--fit-bounds', is_flag=True, help='Derive visible bounds from the exported geometry')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed conversion info')
def convert(input_path, output_path, identifier, scale, generate_normals, flip_uvs,
            texture_width, texture_height, fit_bounds, verbose):
    """
    Convert interchange JSON to a Bedrock geometry file.

    Examples:
        bedrockgeo convert zombie.json zombie.geo.json
        bedrockgeo convert crate.json crate.geo.json --scale 16 --fit-bounds
    """
    _configure_logging(verbose)
    try:
        options = ExportOptions(
            identifier=identifier,
            scale=scale,
            generate_normals=generate_normals,
            flip_uvs=flip_uvs,
            texture_width=texture_width,
            texture_height=texture_height,
            fit_visible_bounds=fit_bounds,
        )

        if verbose:
            click.echo(f"Converting: {input_path} → {output_path}")

        document = convert_model(input_path, output_path, options)

        if verbose:
            description = document["minecraft:geometry"][0]["description"]
            bones = document["minecraft:geometry"][0]["bones"]
            click.echo(f"  Identifier: {description['identifier']}")
            click.echo(f"  Bones: {len(bones)}")

        click.secho(f"✓ Success! Converted to {output_path}", fg='green')

    except FileNotFoundError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except Exception as e:
        click.secho(f"Unexpected error: {e}", fg='red', err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument('input_path')
def info(input_path):
    """
    Show mesh and rig statistics for an interchange JSON file.
    """
    try:
        geometry = load_geometry(input_path)
    except (FileNotFoundError, ValueError) as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)

    bounds = calculate_rig_bounds(geometry)
    click.echo(f"Geometry: {geometry.id}")
    click.echo(f"  Meshes: {len(geometry.meshes)} ({geometry.vertex_count} vertices, {geometry.triangle_count} triangles)")
    click.echo(f"  Bones: {len(geometry.bones)}")
    click.echo(f"  Cubes: {sum(len(bone.cubes) for bone in geometry.bones)}")
    click.echo(f"  Bounds: min={bounds.min.to_list()} max={bounds.max.to_list()}")


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
