"""
bedrockgeo Advanced Example

Simple (mesh-only) export: merges meshes, generates normals, scales from
blocks to pixels and fits the visible bounds before writing the file.
"""

import json

from bedrockgeo import ExportOptions, Geometry, Mesh
from bedrockgeo.converters.convert import build_document

# Two unit quads side by side, in blocks
left = Mesh(
    id="left",
    name="left",
    vertices=[0, 0, 0, 1, 0, 0, 1, 1, 0, 0, 1, 0],
    uvs=[0, 0, 1, 0, 1, 1, 0, 1],
    indices=[0, 1, 2, 0, 2, 3],
)
right = left.model_copy(update={
    "id": "right",
    "name": "right",
    "vertices": (1, 0, 0, 2, 0, 0, 2, 1, 0, 1, 1, 0),
})

geometry = Geometry(id="panel", meshes=[left, right])
combined = geometry.combined_mesh()
print(f"Combined: {combined.vertex_count} vertices, {combined.triangle_count} triangles")

options = ExportOptions(
    identifier="panel",
    scale=16,
    generate_normals=True,
    flip_uvs=True,
    fit_visible_bounds=True,
)
document = build_document(geometry, options)

with open("panel.geo.json", "w") as f:
    json.dump(document, f, indent=2)
print("✅ Saved to panel.geo.json")
