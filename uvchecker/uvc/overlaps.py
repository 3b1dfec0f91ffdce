"""Detection of UV triangles wound against the expected orientation."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .core import CheckCancelledError
from .mesh import MeshAccessor

__all__ = ["signed_area", "detect_overlaps"]

UV = Tuple[float, float]


def signed_area(a: UV, b: UV, c: UV) -> float:
    """Return the signed area of the UV triangle ``a, b, c``.

    Counter-clockwise corners give a positive area.
    """

    ax, ay = a
    bx, by = b
    cx, cy = c
    return (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by)) / 2


def detect_overlaps(
    mesh: MeshAccessor,
    face_range: Optional[range] = None,
    *,
    should_stop: Optional[Callable[[], bool]] = None,
) -> List[int]:
    """Return the index of the owning face for every inverted UV triangle.

    A face appears once per inverted triangle, in face order and then
    triangulation order. Zero-area triangles are not reported.
    """

    faces = range(mesh.face_count()) if face_range is None else face_range
    result: List[int] = []

    for face_index in faces:
        if should_stop is not None and should_stop():
            raise CheckCancelledError(f"Overlap check cancelled at face {face_index}")

        for triangle in mesh.face_triangles(face_index):
            corners = [
                mesh.uv_coordinate(mesh.uv_index_at(face_index, position))
                for position in triangle
            ]
            if signed_area(*corners) < 0:
                result.append(face_index)

    return result
