"""
Tests for the Geometry aggregate: hierarchy validation, mesh merging,
whole-model bounds and scaling
"""
import pytest
from pydantic import ValidationError

from bedrockgeo.schema.geometry import Bone, Cube, CubeUV, Geometry, Mesh
from bedrockgeo.schema.vectors import BoundingBox, Transform, Vector3


def create_mesh(mesh_id, offset=0.0, **overrides):
    """Unit quad shifted along X by offset"""
    fields = {
        "id": mesh_id,
        "name": mesh_id,
        "vertices": [
            offset, 0, 0,
            offset + 1, 0, 0,
            offset + 1, 1, 0,
            offset, 1, 0,
        ],
        "normals": [0, 0, 1] * 4,
        "uvs": [0, 0, 1, 0, 1, 1, 0, 1],
        "indices": [0, 1, 2, 0, 2, 3],
        "material_id": f"{mesh_id}_mat",
    }
    fields.update(overrides)
    return Mesh(**fields)


def create_cube():
    return Cube(origin=[0, 0, 0], size=[1, 1, 1], uv=CubeUV(box_uv=[0, 0]))


class TestHierarchyValidation:
    """Bone references are checked when a Geometry is built"""

    def test_mesh_only_geometry(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a")])
        assert geometry.root_bone_index == -1
        assert not geometry.has_skeleton

    def test_valid_hierarchy(self):
        geometry = Geometry(
            id="g",
            bones=[
                Bone(name="root"),
                Bone(name="body", parent_index=0),
                Bone(name="head", parent_index=1),
            ],
            root_bone_index=0,
        )
        assert geometry.has_skeleton
        assert geometry.children_of(0) == [1]
        assert geometry.children_of(1) == [2]

    def test_parent_may_come_later(self):
        """Bone order is not required to be parent-first"""
        geometry = Geometry(id="g", bones=[Bone(name="child", parent_index=1), Bone(name="root")])
        assert geometry.children_of(1) == [0]

    def test_bones_without_root_index_are_not_a_skeleton(self):
        """root_bone_index == -1 means meshes only, even when bones are present"""
        geometry = Geometry(id="g", bones=[Bone(name="stray")])
        assert not geometry.has_skeleton

    def test_root_index_out_of_range(self):
        with pytest.raises(ValidationError):
            Geometry(id="g", bones=[Bone(name="root")], root_bone_index=1)

    def test_parent_index_out_of_range(self):
        with pytest.raises(ValidationError):
            Geometry(id="g", bones=[Bone(name="root"), Bone(name="orphan", parent_index=5)])

    def test_cycle_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Geometry(
                id="g",
                bones=[
                    Bone(name="a", parent_index=1),
                    Bone(name="b", parent_index=0),
                ],
            )
        assert "Malformed hierarchy" in str(exc_info.value)

    def test_self_parent_is_rejected(self):
        with pytest.raises(ValidationError):
            Geometry(id="g", bones=[Bone(name="loop", parent_index=0)])

    def test_cube_without_uv_is_rejected(self):
        with pytest.raises(ValidationError):
            Cube(origin=[0, 0, 0], size=[1, 1, 1], uv=CubeUV())

    def test_interchange_lists_become_vectors(self):
        geometry = Geometry.model_validate({
            "id": "g",
            "bones": [{
                "name": "root",
                "pivot": [0, 8, 0],
                "cubes": [{
                    "origin": [-4, 0, -4],
                    "size": [8, 8, 8],
                    "uv": {"north": {"uv": [0, 0], "uv_size": [8, 8]}},
                }],
            }],
            "root_bone_index": 0,
        })
        bone = geometry.bones[0]
        assert bone.pivot == Vector3(0, 8, 0)
        assert bone.cubes[0].origin == Vector3(-4, 0, -4)
        assert not bone.cubes[0].uv.is_box_uv

    def test_bind_pose_from_interchange_json(self):
        geometry = Geometry.model_validate({
            "id": "g",
            "bones": [{
                "name": "root",
                "bind_pose": {"translation": [1, 2, 3], "scale": [2, 2, 2]},
            }],
            "root_bone_index": 0,
        })
        pose = geometry.bones[0].bind_pose
        assert pose == Transform(translation=Vector3(1, 2, 3), scale=Vector3(2, 2, 2))
        assert pose.rotation == (1.0, 0.0, 0.0, 0.0)

    def test_bind_pose_rotation_from_interchange_json(self):
        bone = Bone.model_validate({"name": "arm", "bind_pose": {"rotation": [0, 0, 1, 0]}})
        assert bone.bind_pose.rotation == (0.0, 0.0, 1.0, 0.0)
        assert bone.bind_pose.translation == Vector3.ZERO

    def test_default_bind_pose_is_identity(self):
        assert Bone(name="root").bind_pose.is_identity

    def test_bad_bind_pose_is_rejected(self):
        with pytest.raises(ValidationError):
            Bone.model_validate({"name": "arm", "bind_pose": {"rotation": [1, 0, 0]}})
        with pytest.raises(ValidationError):
            Bone.model_validate({"name": "arm", "bind_pose": {"offset": [1, 0, 0]}})


class TestCombinedMesh:
    def test_no_meshes_gives_empty_combined_mesh(self):
        combined = Geometry(id="g").combined_mesh()
        assert combined.name == "combined"
        assert combined.vertex_count == 0
        assert combined.triangle_count == 0

    def test_single_mesh_is_returned_unchanged(self):
        mesh = create_mesh("only")
        combined = Geometry(id="g", meshes=[mesh]).combined_mesh()
        assert combined == mesh

    def test_merge_offsets_indices(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a"), create_mesh("b", offset=2)])
        combined = geometry.combined_mesh()

        assert combined.name == "combined"
        assert combined.indices == (0, 1, 2, 0, 2, 3, 4, 5, 6, 4, 6, 7)
        # Second mesh's first vertex sits right after the first mesh's four
        assert combined.vertices[12:15] == (2.0, 0.0, 0.0)

    def test_merge_preserves_counts(self):
        meshes = [
            create_mesh("a"),
            create_mesh("b", offset=2),
            create_mesh(
                "c",
                vertices=[0, 0, 5, 1, 0, 5, 0, 1, 5],
                normals=[0, 0, 1] * 3,
                uvs=[0, 0, 1, 0, 0, 1],
                indices=[0, 1, 2],
            ),
        ]
        combined = Geometry(id="g", meshes=meshes).combined_mesh()

        assert combined.vertex_count == sum(m.vertex_count for m in meshes)
        assert combined.triangle_count == sum(m.triangle_count for m in meshes)
        assert all(index < combined.vertex_count for index in combined.indices)
        assert len(combined.normals) == len(combined.vertices)
        assert len(combined.uvs) == combined.vertex_count * 2

    def test_merge_drops_material_and_skinning(self):
        skinned = create_mesh("b", offset=2, bone_weights=[1] * 4, bone_indices=[0] * 4)
        combined = Geometry(id="g", meshes=[create_mesh("a"), skinned]).combined_mesh()
        assert combined.material_id is None
        assert not combined.has_bone_data

    def test_merge_drops_partial_uvs(self):
        """UVs present on only some meshes cannot line up with the merged vertices"""
        geometry = Geometry(id="g", meshes=[create_mesh("a"), create_mesh("b", offset=2, uvs=[])])
        combined = geometry.combined_mesh()
        assert not combined.has_uvs
        assert combined.has_normals


class TestGeometryBounds:
    def test_bounds_over_all_meshes(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a"), create_mesh("b", offset=2)])
        bounds = geometry.calculate_bounds()
        assert bounds.min == Vector3(0, 0, 0)
        assert bounds.max == Vector3(3, 1, 0)

    def test_bounds_match_combined_mesh(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a", offset=-4), create_mesh("b", offset=2)])
        assert geometry.calculate_bounds() == geometry.combined_mesh().calculate_bounds()

    def test_empty_geometry_bounds(self):
        assert Geometry(id="g").calculate_bounds() == BoundingBox(Vector3.ZERO, Vector3.ZERO)


class TestGeometryTransforms:
    def test_scaled_scales_every_mesh(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a"), create_mesh("b", offset=2)])
        scaled = geometry.scaled(16)
        assert scaled.calculate_bounds().max == Vector3(48, 16, 0)
        assert scaled.meshes[0].name == "a"

    def test_scaled_leaves_bones_untouched(self):
        bones = [Bone(name="root", pivot=[0, 4, 0], cubes=[create_cube()])]
        geometry = Geometry(id="g", meshes=[create_mesh("a")], bones=bones, root_bone_index=0)
        assert geometry.scaled(2).bones == geometry.bones

    def test_normals_and_uv_flip_apply_to_every_mesh(self):
        geometry = Geometry(
            id="g",
            meshes=[create_mesh("a", normals=[]), create_mesh("b", offset=2, normals=[])],
        )
        prepared = geometry.with_generated_normals().with_flipped_uvs()
        assert all(mesh.has_normals for mesh in prepared.meshes)
        assert prepared.meshes[1].uvs == (0, 1, 1, 1, 1, 0, 0, 0)
        # Input is untouched
        assert not geometry.meshes[0].has_normals

    def test_counts(self):
        geometry = Geometry(id="g", meshes=[create_mesh("a"), create_mesh("b", offset=2)])
        assert geometry.vertex_count == 8
        assert geometry.triangle_count == 4
