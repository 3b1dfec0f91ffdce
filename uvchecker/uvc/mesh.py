"""Read-only mesh accessors consumed by the UV checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np
import trimesh

from .core import DegenerateFaceError, MeshLoadError, UnresolvedUVIndexError

__all__ = [
    "MeshAccessor",
    "PolyMesh",
    "TrimeshMesh",
    "Triangle",
    "fan_triangulate",
]

Triangle = Tuple[int, int, int]


class MeshAccessor(ABC):
    """Per-face view of a polygon mesh and its UV table.

    Implementations must be free of side effects so that disjoint faces can
    be read from several threads at once.
    """

    @abstractmethod
    def face_count(self) -> int:
        """Return the number of faces in the mesh."""

    @abstractmethod
    def face_vertex_loop(self, face_index: int) -> Sequence[int]:
        """Return the mesh vertex indices of ``face_index`` in loop order."""

    @abstractmethod
    def face_triangles(self, face_index: int) -> Sequence[Triangle]:
        """Return the triangulation of a face as local loop positions.

        Raises :class:`DegenerateFaceError` when the face cannot be
        triangulated.
        """

    @abstractmethod
    def uv_index_at(self, face_index: int, local_position: int) -> int:
        """Return the UV index stored at ``local_position`` of a face."""

    @abstractmethod
    def uv_coordinate(self, uv_index: int) -> Tuple[float, float]:
        """Return ``(u, v)`` for ``uv_index``.

        Raises :class:`UnresolvedUVIndexError` when the index has no entry.
        """


def fan_triangulate(count: int) -> np.ndarray:
    """Fan-triangulate a loop of ``count`` positions from position 0."""

    if count < 3:
        return np.zeros((0, 3), dtype=np.int64)
    rest = np.arange(1, count - 1, dtype=np.int64)
    return np.column_stack((np.zeros_like(rest), rest, rest + 1))


def _lookup_uv(uv: np.ndarray, uv_index: int) -> Tuple[float, float]:
    if uv_index < 0 or uv_index >= uv.shape[0]:
        raise UnresolvedUVIndexError(uv_index)
    u, v = uv[uv_index]
    if not (np.isfinite(u) and np.isfinite(v)):
        raise UnresolvedUVIndexError(uv_index, f"UV index {uv_index} has a non-finite coordinate")
    return float(u), float(v)


@dataclass(frozen=True, eq=False)
class PolyMesh(MeshAccessor):
    """Polygon mesh held in numpy arrays.

    ``face_uvs[i]`` runs parallel to ``face_vertices[i]`` and indexes rows of
    ``uv``. ``triangles[i]`` holds local loop positions of face ``i``.
    """

    vertices: np.ndarray
    face_vertices: Tuple[np.ndarray, ...]
    face_uvs: Tuple[np.ndarray, ...]
    uv: np.ndarray
    triangles: Tuple[np.ndarray, ...]

    @classmethod
    def from_polygons(
        cls,
        vertices: Any,
        faces: Sequence[Sequence[int]],
        uv: Any,
        *,
        face_uvs: Optional[Sequence[Sequence[int]]] = None,
        triangles: Optional[Sequence[Sequence[Sequence[int]]]] = None,
    ) -> "PolyMesh":
        """Build a mesh from polygon loops.

        ``face_uvs`` defaults to ``faces`` (one UV per vertex). Faces without
        an explicit triangulation are fan-triangulated.
        """

        vertex_array = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        uv_array = np.asarray(uv, dtype=np.float64).reshape(-1, 2)

        face_loops = tuple(np.asarray(face, dtype=np.int64).reshape(-1) for face in faces)
        uv_source = faces if face_uvs is None else face_uvs
        if len(uv_source) != len(face_loops):
            raise ValueError(
                f"Expected UV loops for {len(face_loops)} faces, got {len(uv_source)}"
            )
        uv_loops = tuple(np.asarray(loop, dtype=np.int64).reshape(-1) for loop in uv_source)

        for face_index, (face, uv_loop) in enumerate(zip(face_loops, uv_loops)):
            if face.shape[0] != uv_loop.shape[0]:
                raise ValueError(
                    f"Face {face_index} has {face.shape[0]} vertices but {uv_loop.shape[0]} UVs"
                )

        if triangles is None:
            face_tris = tuple(fan_triangulate(face.shape[0]) for face in face_loops)
        else:
            if len(triangles) != len(face_loops):
                raise ValueError(
                    f"Expected triangulations for {len(face_loops)} faces, got {len(triangles)}"
                )
            face_tris = tuple(
                np.asarray(tris, dtype=np.int64).reshape(-1, 3) for tris in triangles
            )

        return cls(
            vertices=vertex_array,
            face_vertices=face_loops,
            face_uvs=uv_loops,
            uv=uv_array,
            triangles=face_tris,
        )

    def face_count(self) -> int:
        return len(self.face_vertices)

    def face_vertex_loop(self, face_index: int) -> Sequence[int]:
        return tuple(int(index) for index in self.face_vertices[face_index])

    def face_triangles(self, face_index: int) -> Sequence[Triangle]:
        loop_length = self.face_vertices[face_index].shape[0]
        tris = self.triangles[face_index]
        if loop_length < 3:
            raise DegenerateFaceError(
                face_index, f"Face {face_index} has only {loop_length} vertices"
            )
        if tris.shape[0] == 0:
            raise DegenerateFaceError(face_index)
        if int(tris.min()) < 0 or int(tris.max()) >= loop_length:
            raise DegenerateFaceError(
                face_index, f"Face {face_index} triangulation references missing loop positions"
            )
        return [(int(a), int(b), int(c)) for a, b, c in tris]

    def uv_index_at(self, face_index: int, local_position: int) -> int:
        return int(self.face_uvs[face_index][local_position])

    def uv_coordinate(self, uv_index: int) -> Tuple[float, float]:
        return _lookup_uv(self.uv, uv_index)


@dataclass(frozen=True, eq=False)
class TrimeshMesh(MeshAccessor):
    """Adapter exposing a textured :class:`trimesh.Trimesh` as triangle faces.

    Texture coordinates are stored per vertex, so the UV index of a loop
    position is its vertex index.
    """

    faces: np.ndarray
    uv: np.ndarray

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh) -> "TrimeshMesh":
        uv = getattr(mesh.visual, "uv", None)
        if uv is None:
            raise MeshLoadError("Mesh does not carry texture coordinates")

        uv_array = np.asarray(uv, dtype=np.float64)
        vertex_count = len(mesh.vertices)
        if uv_array.ndim != 2 or uv_array.shape[0] != vertex_count:
            raise MeshLoadError(
                f"Mesh has {uv_array.shape[0]} texture coordinates for {vertex_count} vertices"
            )

        return cls(faces=np.asarray(mesh.faces, dtype=np.int64), uv=uv_array[:, :2])

    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def face_vertex_loop(self, face_index: int) -> Sequence[int]:
        return tuple(int(index) for index in self.faces[face_index])

    def face_triangles(self, face_index: int) -> Sequence[Triangle]:
        return [(0, 1, 2)]

    def uv_index_at(self, face_index: int, local_position: int) -> int:
        return int(self.faces[face_index][local_position])

    def uv_coordinate(self, uv_index: int) -> Tuple[float, float]:
        return _lookup_uv(self.uv, uv_index)
