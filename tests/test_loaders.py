from __future__ import annotations

from pathlib import Path

import pytest

from uvchecker.uvc.core import MeshLoadError, NotAMeshError
from uvchecker.uvc.loaders import load_obj_meshes, resolve_mesh

from .helpers import write_check_asset


def test_obj_objects_keep_polygons(tmp_path: Path) -> None:
    meshes = load_obj_meshes(write_check_asset(tmp_path))

    assert list(meshes) == ["Flipped", "Straddle", "Guides"]
    flipped = meshes["Flipped"]
    assert flipped.face_count() == 1
    assert flipped.face_vertex_loop(0) == (0, 1, 2, 3)
    assert [flipped.uv_index_at(0, i) for i in range(4)] == [0, 3, 2, 1]
    assert meshes["Straddle"].face_vertex_loop(0) == (4, 5, 6)
    assert meshes["Guides"].face_count() == 0


def test_obj_without_objects_uses_file_stem(tmp_path: Path) -> None:
    obj_path = tmp_path / "plane.obj"
    obj_path.write_text(
        "v 0 0 0\nv 1 0 0\nv 1 1 0\nvt 0 0\nvt 1 0\nvt 1 1\nf -3/-3 -2/-2 -1/-1\n",
        encoding="utf-8",
    )
    resolved = resolve_mesh(obj_path)
    assert resolved.path == "|plane"
    assert resolved.mesh.face_vertex_loop(0) == (0, 1, 2)
    assert resolved.mesh.uv_coordinate(resolved.mesh.uv_index_at(0, 2)) == (1.0, 1.0)


def test_face_without_texcoords_references_missing_uv(tmp_path: Path) -> None:
    obj_path = tmp_path / "bare.obj"
    obj_path.write_text("v 0 0 0\nv 1 0 0\nv 1 1 0\nf 1 2 3\n", encoding="utf-8")
    mesh = resolve_mesh(obj_path).mesh
    assert mesh.uv_index_at(0, 0) == -1


def test_resolve_selects_first_polygon_object(tmp_path: Path) -> None:
    resolved = resolve_mesh(write_check_asset(tmp_path))
    assert resolved.path == "|Flipped"


def test_resolve_named_object(tmp_path: Path) -> None:
    resolved = resolve_mesh(write_check_asset(tmp_path), object_name="Straddle")
    assert resolved.path == "|Straddle"
    assert resolved.mesh.face_count() == 1


def test_resolve_rejects_line_only_object(tmp_path: Path) -> None:
    with pytest.raises(NotAMeshError):
        resolve_mesh(write_check_asset(tmp_path), object_name="Guides")


def test_resolve_rejects_unknown_object(tmp_path: Path) -> None:
    with pytest.raises(MeshLoadError, match="not found"):
        resolve_mesh(write_check_asset(tmp_path), object_name="Missing")


def test_resolve_rejects_unknown_loader(tmp_path: Path) -> None:
    with pytest.raises(MeshLoadError, match="Unsupported loader"):
        resolve_mesh(write_check_asset(tmp_path), loader="fbx")


def test_resolve_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MeshLoadError):
        resolve_mesh(tmp_path / "missing.obj")


def test_malformed_obj_raises(tmp_path: Path) -> None:
    obj_path = tmp_path / "broken.obj"
    obj_path.write_text("v 0 zero 0\n", encoding="utf-8")
    with pytest.raises(MeshLoadError, match="line 1"):
        load_obj_meshes(obj_path)


def test_obj_groups_become_separate_objects(tmp_path: Path) -> None:
    obj_path = tmp_path / "grp.obj"
    obj_path.write_text(
        "v 0 0 0\nv 1 0 0\nv 0 1 0\nvt 0 0\nvt 1 0\nvt 0 1\n"
        "g A\nf 1/1 2/2 3/3\ng B\nf 1/1 3/3 2/2\n",
        encoding="utf-8",
    )
    meshes = load_obj_meshes(obj_path)

    assert set(meshes) == {"A", "B"}
    assert [meshes["B"].uv_index_at(0, i) for i in range(3)] == [0, 2, 1]

    resolved = resolve_mesh(obj_path, object_name="B")
    assert resolved.path == "|B"
    assert resolved.mesh.face_count() == 1
