"""Detection of face edges that cross UDIM tile borders."""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Set, Tuple

from .core import CheckCancelledError
from .mesh import MeshAccessor

__all__ = [
    "uv_tile",
    "udim_number",
    "detect_udim_crossings",
    "detect_udim_crossing_faces",
    "touched_udims",
]

Tile = Tuple[int, int]


def uv_tile(u: float, v: float) -> Tile:
    """Return the integer tile ``(floor(u), floor(v))`` holding a UV point."""

    return math.floor(u), math.floor(v)


def udim_number(tile: Tile) -> int:
    """Return the conventional UDIM number (1001 based) of ``tile``."""

    tile_u, tile_v = tile
    return 1001 + tile_u + 10 * tile_v


def detect_udim_crossings(
    mesh: MeshAccessor,
    face_range: Optional[range] = None,
    *,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Set[int]:
    """Return every UV index that ends an edge spanning two UDIM tiles."""

    faces = range(mesh.face_count()) if face_range is None else face_range
    crossing: Set[int] = set()

    for face_index in faces:
        if should_stop is not None and should_stop():
            raise CheckCancelledError(f"UDIM check cancelled at face {face_index}")

        count = len(mesh.face_vertex_loop(face_index))
        for position in range(count):
            current = mesh.uv_index_at(face_index, position)
            following = mesh.uv_index_at(face_index, (position + 1) % count)

            if uv_tile(*mesh.uv_coordinate(current)) != uv_tile(*mesh.uv_coordinate(following)):
                crossing.add(current)
                crossing.add(following)

    return crossing


def detect_udim_crossing_faces(
    mesh: MeshAccessor,
    *,
    should_stop: Optional[Callable[[], bool]] = None,
) -> List[int]:
    """Return the UV indices from :func:`detect_udim_crossings` in ascending order."""

    return sorted(detect_udim_crossings(mesh, should_stop=should_stop))


def touched_udims(mesh: MeshAccessor) -> List[int]:
    """Return the sorted UDIM numbers of every tile a face corner lands in."""

    tiles: Set[int] = set()
    for face_index in range(mesh.face_count()):
        for position in range(len(mesh.face_vertex_loop(face_index))):
            u, v = mesh.uv_coordinate(mesh.uv_index_at(face_index, position))
            tiles.add(udim_number(uv_tile(u, v)))
    return sorted(tiles)
