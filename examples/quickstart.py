"""
bedrockgeo Quick Start Example

Builds a two-bone rig by hand and prints the Bedrock geometry document.
"""

import json

from bedrockgeo import Bone, Cube, CubeUV, Geometry, export_bedrock

body = Cube(origin=[-4, 0, -2], size=[8, 12, 4], uv=CubeUV(box_uv=[16, 16]))
head = Cube(origin=[-4, 12, -4], size=[8, 8, 8], uv=CubeUV(box_uv=[0, 0]))

geometry = Geometry(
    id="steve",
    bones=[
        Bone(name="body", pivot=[0, 12, 0], cubes=[body]),
        Bone(name="head", parent_index=0, pivot=[0, 24, 0], cubes=[head]),
    ],
    root_bone_index=0,
)

document = export_bedrock(geometry, "steve")
print(json.dumps(document, indent=2))
