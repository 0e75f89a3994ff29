"""
Generic geometry schema: meshes plus an optional bone/cube hierarchy.

This is the engine-agnostic side of the converter. Loaders build a Geometry,
the exporter maps it to the Bedrock document shape.

IMMUTABILITY:
Every model is frozen. Operations like scaled() or with_generated_normals()
return a new value and never touch the buffers of the input.

VALIDATION:
Invariants are checked once, when a value is constructed (model_validate or
the constructor). Values derived by the operations below are valid by
construction; most are built with model_copy(), which skips re-validation.

BUFFERS:
- vertices: flat [x0, y0, z0, x1, ...], 3 floats per vertex
- normals:  same layout as vertices, empty means "absent"
- uvs:      flat [u0, v0, u1, ...], 2 floats per vertex, empty means "absent"
- indices:  3 vertex numbers per triangle (vertex numbers, not float offsets)
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from bedrockgeo.schema.vectors import (
    BoundingBox,
    Transform,
    Vector2,
    Vector3,
    coerce_transform,
    coerce_vector2,
    coerce_vector3,
)

# Vector and bind pose fields accept either values or their plain JSON form
Vec2 = Annotated[Vector2, BeforeValidator(coerce_vector2)]
Vec3 = Annotated[Vector3, BeforeValidator(coerce_vector3)]
BindPose = Annotated[Transform, BeforeValidator(coerce_transform)]

COMBINED_MESH_NAME = "combined"


#########################
# CUBE UV
#########################

class FaceName(str, Enum):
    north = "north"
    south = "south"
    east = "east"
    west = "west"
    up = "up"
    down = "down"


class FaceUV(BaseModel):
    """UV rectangle for one cube face, in texture pixels."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    uv: Vec2 = Field(..., description="Top-left corner of the face in the texture.")
    uv_size: Vec2 = Field(..., description="Extent of the face in the texture.")


class CubeUV(BaseModel):
    """
    UV layout of a cube: either six optional per-face rectangles or a single
    box UV offset. The Bedrock format only accepts one of the two, so the
    exporter picks box UV whenever it is set.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    north: Optional[FaceUV] = None
    south: Optional[FaceUV] = None
    east: Optional[FaceUV] = None
    west: Optional[FaceUV] = None
    up: Optional[FaceUV] = None
    down: Optional[FaceUV] = None
    box_uv: Optional[Vec2] = Field(None, description="Box UV offset; faces are laid out by the standard template.")

    @property
    def is_box_uv(self) -> bool:
        return self.box_uv is not None

    def faces(self) -> List[Tuple[FaceName, FaceUV]]:
        """Present faces, in FaceName order."""
        present = []
        for face in FaceName:
            face_uv = getattr(self, face.value)
            if face_uv is not None:
                present.append((face, face_uv))
        return present

    @model_validator(mode='after')
    def validate_has_uv(self):
        if self.box_uv is None and not self.faces():
            raise ValueError("CubeUV needs either box_uv or at least one face")
        return self


#########################
# BONES AND CUBES
#########################

class Cube(BaseModel):
    """Axis-aligned box in model space, optionally rotated about its pivot."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    origin: Vec3 = Field(..., description="Minimum corner in model space.")
    size: Vec3 = Field(..., description="Extent along each axis.")
    pivot: Vec3 = Vector3.ZERO
    rotation: Vec3 = Field(default=Vector3.ZERO, description="Euler angles in degrees.")
    uv: CubeUV
    inflate: float = Field(default=0.0, description="Uniform outward expansion, additive on every face.")
    mirror: bool = False


class Bone(BaseModel):
    """Named node of the rig. Parents are referenced by index into Geometry.bones."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    name: str
    parent_index: int = -1
    pivot: Vec3 = Vector3.ZERO
    rotation: Vec3 = Field(default=Vector3.ZERO, description="Euler angles in degrees.")
    bind_pose: BindPose = Transform.IDENTITY
    cubes: Tuple[Cube, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.parent_index == -1


#########################
# MESH
#########################

class Mesh(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')

    id: str
    name: str
    vertices: Tuple[float, ...] = ()
    normals: Tuple[float, ...] = ()
    uvs: Tuple[float, ...] = ()
    indices: Tuple[int, ...] = ()
    material_id: Optional[str] = None
    bone_weights: Optional[Tuple[float, ...]] = None
    bone_indices: Optional[Tuple[int, ...]] = None

    @model_validator(mode='after')
    def validate_buffers(self):
        if len(self.vertices) % 3 != 0:
            raise ValueError(f"Mesh '{self.name}': vertex buffer length {len(self.vertices)} is not a multiple of 3")
        vertex_count = len(self.vertices) // 3

        if self.normals and len(self.normals) != len(self.vertices):
            raise ValueError(
                f"Mesh '{self.name}': {len(self.normals)} normal floats for {len(self.vertices)} vertex floats"
            )
        if self.uvs and len(self.uvs) != vertex_count * 2:
            raise ValueError(
                f"Mesh '{self.name}': {len(self.uvs)} uv floats for {vertex_count} vertices"
            )

        if len(self.indices) % 3 != 0:
            raise ValueError(f"Mesh '{self.name}': index buffer length {len(self.indices)} is not a multiple of 3")
        for index in self.indices:
            if index < 0 or index >= vertex_count:
                raise ValueError(
                    f"Mesh '{self.name}': index {index} out of range for {vertex_count} vertices"
                )

        if (self.bone_weights is None) != (self.bone_indices is None):
            raise ValueError(f"Mesh '{self.name}': bone_weights and bone_indices must be given together")
        if self.bone_weights is not None and len(self.bone_weights) != len(self.bone_indices):
            raise ValueError(
                f"Mesh '{self.name}': {len(self.bone_weights)} bone weights for {len(self.bone_indices)} bone indices"
            )
        return self

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def has_normals(self) -> bool:
        return len(self.normals) > 0

    @property
    def has_uvs(self) -> bool:
        return len(self.uvs) > 0

    @property
    def has_bone_data(self) -> bool:
        return self.bone_weights is not None and self.bone_indices is not None

    def calculate_bounds(self) -> BoundingBox:
        return BoundingBox.from_vertices(self.vertices)

    def with_generated_normals(self) -> Mesh:
        """
        Smooth vertex normals from the triangle list.

        Each triangle's unit face normal, (v1 - v0) x (v2 - v0), is added to
        all three of its vertices; the sums are then normalized. Vertices no
        triangle touches (or that only touch degenerate triangles) keep a
        zero normal. Returns self unchanged when normals already exist.
        """
        if self.has_normals:
            return self

        positions = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        triangles = np.asarray(self.indices, dtype=np.int64).reshape(-1, 3)
        normals = np.zeros_like(positions)

        if len(triangles):
            v0 = positions[triangles[:, 0]]
            v1 = positions[triangles[:, 1]]
            v2 = positions[triangles[:, 2]]
            face_normals = _normalize_rows(np.cross(v1 - v0, v2 - v0))

            # np.add.at accumulates repeated vertex numbers, += would not
            for corner in range(3):
                np.add.at(normals, triangles[:, corner], face_normals)

        normals = _normalize_rows(normals)
        return self.model_copy(update={"normals": tuple(normals.reshape(-1).tolist())})

    def scaled(self, factor: float) -> Mesh:
        """Uniform scale of positions. Normals stay valid for isotropic scale."""
        scaled_vertices = np.asarray(self.vertices, dtype=np.float64) * factor
        return self.model_copy(update={"vertices": tuple(scaled_vertices.tolist())})

    def with_flipped_uvs(self) -> Mesh:
        """V -> 1 - V, U unchanged (bottom-left vs. top-left texture origin)."""
        if not self.has_uvs:
            return self

        flipped = [
            value if i % 2 == 0 else 1.0 - value
            for i, value in enumerate(self.uvs)
        ]
        return self.model_copy(update={"uvs": tuple(flipped)})


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Normalize each row; zero-length rows stay zero."""
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    return np.divide(vectors, lengths, out=np.zeros_like(vectors), where=lengths > 0)


#########################
# GEOMETRY
#########################

class Geometry(BaseModel):
    """
    Aggregate root handed over by a model loader.

    meshes keep their render order. bones are addressed by position in the
    tuple: Bone.parent_index and root_bone_index are indices into it, and
    root_bone_index == -1 means the model has no skeleton.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    id: str
    meshes: Tuple[Mesh, ...] = ()
    bones: Tuple[Bone, ...] = ()
    root_bone_index: int = -1

    @model_validator(mode='after')
    def validate_hierarchy(self):
        bone_count = len(self.bones)
        if self.root_bone_index != -1 and not 0 <= self.root_bone_index < bone_count:
            raise ValueError(f"root_bone_index {self.root_bone_index} out of range for {bone_count} bones")

        for bone in self.bones:
            if bone.parent_index != -1 and not 0 <= bone.parent_index < bone_count:
                raise ValueError(
                    f"Bone '{bone.name}': parent_index {bone.parent_index} out of range for {bone_count} bones"
                )

        # Any chain longer than the bone count must revisit a bone
        for start, bone in enumerate(self.bones):
            steps = 0
            current = bone.parent_index
            while current != -1:
                steps += 1
                if steps > bone_count:
                    raise ValueError(f"Malformed hierarchy: bone '{bone.name}' (index {start}) is part of a parent cycle")
                current = self.bones[current].parent_index
        return self

    @property
    def has_skeleton(self) -> bool:
        return self.root_bone_index >= 0

    @property
    def vertex_count(self) -> int:
        return sum(mesh.vertex_count for mesh in self.meshes)

    @property
    def triangle_count(self) -> int:
        return sum(mesh.triangle_count for mesh in self.meshes)

    def children_of(self, index: int) -> List[int]:
        return [i for i, bone in enumerate(self.bones) if bone.parent_index == index]

    def combined_mesh(self) -> Mesh:
        """
        Merge every mesh into one, for simple (non-skeletal) export.

        Indices are shifted by the number of vertices already appended, so
        they keep pointing at the same positions in the merged buffer.
        Normals and UVs are kept only when every mesh has them. Materials and
        skinning data are dropped.
        """
        if not self.meshes:
            return Mesh(id=f"{self.id}:{COMBINED_MESH_NAME}", name=COMBINED_MESH_NAME)
        if len(self.meshes) == 1:
            return self.meshes[0]

        keep_normals = all(mesh.has_normals for mesh in self.meshes)
        keep_uvs = all(mesh.has_uvs for mesh in self.meshes)

        all_vertices: List[float] = []
        all_normals: List[float] = []
        all_uvs: List[float] = []
        all_indices: List[int] = []
        index_offset = 0

        for mesh in self.meshes:
            all_vertices.extend(mesh.vertices)
            if keep_normals:
                all_normals.extend(mesh.normals)
            if keep_uvs:
                all_uvs.extend(mesh.uvs)
            all_indices.extend(index + index_offset for index in mesh.indices)
            index_offset += mesh.vertex_count

        return Mesh(
            id=f"{self.id}:{COMBINED_MESH_NAME}",
            name=COMBINED_MESH_NAME,
            vertices=tuple(all_vertices),
            normals=tuple(all_normals),
            uvs=tuple(all_uvs),
            indices=tuple(all_indices),
        )

    def calculate_bounds(self) -> BoundingBox:
        if not self.meshes:
            return BoundingBox(Vector3.ZERO, Vector3.ZERO)
        all_vertices: List[float] = []
        for mesh in self.meshes:
            all_vertices.extend(mesh.vertices)
        return BoundingBox.from_vertices(all_vertices)

    def scaled(self, factor: float) -> Geometry:
        """Scale every mesh. Bone pivots and cubes are left as they are."""
        return self.model_copy(update={"meshes": tuple(mesh.scaled(factor) for mesh in self.meshes)})

    def with_generated_normals(self) -> Geometry:
        return self.model_copy(update={"meshes": tuple(mesh.with_generated_normals() for mesh in self.meshes)})

    def with_flipped_uvs(self) -> Geometry:
        return self.model_copy(update={"meshes": tuple(mesh.with_flipped_uvs() for mesh in self.meshes)})
