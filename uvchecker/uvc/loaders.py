"""Mesh loading and selection for the ``uvc check`` command."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import trimesh

from .core import MeshLoadError, NotAMeshError
from .mesh import MeshAccessor, PolyMesh, TrimeshMesh

__all__ = [
    "ResolvedMesh",
    "load_obj_meshes",
    "load_trimesh_meshes",
    "resolve_mesh",
]

_LOGGER = logging.getLogger(__name__)

_LOADERS = {"auto", "obj", "trimesh"}


@dataclass(frozen=True, eq=False)
class ResolvedMesh:
    """A selected mesh together with the path used to report its components."""

    path: str
    mesh: MeshAccessor
    source: Path


def resolve_mesh(
    mesh_path: Path,
    object_name: Optional[str] = None,
    loader: str = "auto",
) -> ResolvedMesh:
    """Load ``mesh_path`` and select one polygon mesh from it.

    The first object holding polygons is selected unless ``object_name`` is
    given. The reported path is ``|<object name>``.
    """

    resolved_path = mesh_path.expanduser().resolve()
    loader_choice = loader.lower()
    if loader_choice not in _LOADERS:
        raise MeshLoadError(
            f"Unsupported loader '{loader}'. Choose one of: {', '.join(sorted(_LOADERS))}"
        )
    if not resolved_path.is_file():
        raise MeshLoadError(f"Mesh file '{resolved_path}' does not exist")

    use_obj = loader_choice == "obj" or (
        loader_choice == "auto" and resolved_path.suffix.lower() == ".obj"
    )
    if use_obj:
        candidates: Dict[str, Any] = dict(load_obj_meshes(resolved_path))
    else:
        candidates = load_trimesh_meshes(resolved_path)

    name, mesh = _select_candidate(candidates, object_name, resolved_path)
    _LOGGER.debug("Selected object '%s' from %s (%d faces)", name, resolved_path, mesh.face_count())
    return ResolvedMesh(path=f"|{name}", mesh=mesh, source=resolved_path)


def _select_candidate(
    candidates: Dict[str, Any],
    object_name: Optional[str],
    mesh_path: Path,
) -> Tuple[str, MeshAccessor]:
    if not candidates:
        raise MeshLoadError(f"Mesh '{mesh_path}' does not contain any objects")

    if object_name is not None:
        if object_name not in candidates:
            available = ", ".join(sorted(candidates))
            raise MeshLoadError(
                f"Object '{object_name}' not found in '{mesh_path}' (available: {available})"
            )
        return object_name, _as_polygon_mesh(object_name, candidates[object_name])

    for name, candidate in candidates.items():
        if _has_polygons(candidate):
            return name, _as_polygon_mesh(name, candidate)

    first_name = next(iter(candidates))
    return first_name, _as_polygon_mesh(first_name, candidates[first_name])


def _has_polygons(candidate: Any) -> bool:
    if isinstance(candidate, PolyMesh):
        return candidate.face_count() > 0
    return isinstance(candidate, trimesh.Trimesh) and len(candidate.faces) > 0


def _as_polygon_mesh(name: str, candidate: Any) -> MeshAccessor:
    if not _has_polygons(candidate):
        raise NotAMeshError(f"Selected object '{name}' is not mesh.")
    if isinstance(candidate, trimesh.Trimesh):
        return TrimeshMesh.from_trimesh(candidate)
    return candidate


def load_trimesh_meshes(mesh_path: Path) -> Dict[str, Any]:
    """Load ``mesh_path`` with trimesh and return its geometries by name."""

    try:
        loaded = trimesh.load(str(mesh_path), process=False, maintain_order=True)
    except Exception as exc:  # pragma: no cover - depends on trimesh format handlers
        raise MeshLoadError(f"Failed to load mesh '{mesh_path}': {exc}") from exc

    if isinstance(loaded, trimesh.Scene):
        return dict(loaded.geometry)
    return {mesh_path.stem: loaded}


def load_obj_meshes(mesh_path: Path) -> Dict[str, PolyMesh]:
    """Parse an OBJ file into one :class:`PolyMesh` per ``o`` object or ``g`` group.

    Polygons are kept intact. UV indices are zero-based ``vt`` indices shared
    by all objects; face corners without a ``vt`` reference UV index ``-1``.
    """

    vertices_raw: List[Tuple[float, float, float]] = []
    texcoords_raw: List[Tuple[float, float]] = []
    object_faces: Dict[str, List[List[int]]] = {}
    object_face_uvs: Dict[str, List[List[int]]] = {}

    current_object = mesh_path.stem
    object_faces[current_object] = []
    object_face_uvs[current_object] = []

    try:
        handle = mesh_path.open("r", encoding="utf-8")
    except OSError as exc:  # pragma: no cover - depends on filesystem
        raise MeshLoadError(f"Failed to read mesh '{mesh_path}': {exc}") from exc

    with handle:
        for line_number, raw_line in enumerate(handle, start=1):
            stripped = raw_line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            parts = stripped.split()
            prefix = parts[0]
            values = parts[1:]

            try:
                if prefix == "v" and len(values) >= 3:
                    vertices_raw.append((float(values[0]), float(values[1]), float(values[2])))
                elif prefix == "vt" and values:
                    v_coord = float(values[1]) if len(values) > 1 else 0.0
                    texcoords_raw.append((float(values[0]), v_coord))
                elif prefix in ("o", "g"):
                    current_object = " ".join(values).strip() or f"object{len(object_faces)}"
                    object_faces.setdefault(current_object, [])
                    object_face_uvs.setdefault(current_object, [])
                elif prefix == "f" and values:
                    face: List[int] = []
                    face_uv: List[int] = []
                    for token in values:
                        v_index, vt_index = _parse_obj_indices(
                            token, len(vertices_raw), len(texcoords_raw)
                        )
                        face.append(v_index - 1)
                        face_uv.append(vt_index - 1)
                    object_faces[current_object].append(face)
                    object_face_uvs[current_object].append(face_uv)
            except ValueError as exc:
                raise MeshLoadError(
                    f"Malformed OBJ data in '{mesh_path}' at line {line_number}: {exc}"
                ) from exc

    # Drop the implicit default object when the file names all of its objects.
    default_name = mesh_path.stem
    if len(object_faces) > 1 and not object_faces[default_name]:
        del object_faces[default_name]
        del object_face_uvs[default_name]

    vertices = np.asarray(vertices_raw, dtype=np.float64).reshape(-1, 3)
    uv = np.asarray(texcoords_raw, dtype=np.float64).reshape(-1, 2)

    meshes: Dict[str, PolyMesh] = {}
    for name, faces in object_faces.items():
        meshes[name] = PolyMesh.from_polygons(
            vertices, faces, uv, face_uvs=object_face_uvs[name]
        )
        _LOGGER.debug("OBJ object '%s': %d faces", name, len(faces))

    return meshes


def _parse_obj_indices(token: str, vertex_count: int, texcoord_count: int) -> Tuple[int, int]:
    parts = token.split("/")
    if not parts or not parts[0]:
        raise MeshLoadError(f"Invalid face index token '{token}' in OBJ file")

    vertex_index = int(parts[0])
    if vertex_index < 0:
        vertex_index = vertex_count + vertex_index + 1

    texcoord_index = 0
    if len(parts) > 1 and parts[1]:
        texcoord_index = int(parts[1])
        if texcoord_index < 0:
            texcoord_index = texcoord_count + texcoord_index + 1

    return vertex_index, texcoord_index
