from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

from uvchecker.uvc.mesh import PolyMesh

UV = Tuple[float, float]


def single_face_mesh(uvs: Sequence[UV]) -> PolyMesh:
    """Return a one-polygon mesh whose loop positions carry ``uvs`` in order."""

    vertices = [(u, v, 0.0) for u, v in uvs]
    face = list(range(len(uvs)))
    return PolyMesh.from_polygons(vertices, [face], uvs)


def quad_grid_mesh(columns: int, rows: int, flipped: Sequence[int] = ()) -> PolyMesh:
    """Return a grid of unshared quads, winding the faces in ``flipped`` clockwise."""

    vertices = []
    uvs = []
    faces = []
    flipped_set = set(flipped)
    for row in range(rows):
        for column in range(columns):
            corners = [
                (column * 0.3, row * 0.3),
                (column * 0.3 + 0.25, row * 0.3),
                (column * 0.3 + 0.25, row * 0.3 + 0.25),
                (column * 0.3, row * 0.3 + 0.25),
            ]
            if len(faces) in flipped_set:
                corners = [corners[0], corners[3], corners[2], corners[1]]
            start = len(vertices)
            for u, v in corners:
                vertices.append((u, v, 0.0))
                uvs.append((u, v))
            faces.append([start, start + 1, start + 2, start + 3])
    return PolyMesh.from_polygons(vertices, faces, uvs)


def write_check_asset(directory: Path) -> Path:
    obj_data = """\
# two objects sharing the vertex and UV tables
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
v 2 0 0
v 3 0 0
v 2 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vt 0.2 0.2
vt 1.8 0.3
vt 0.3 1.9
o Flipped
f 1/1 2/4 3/3 4/2
o Straddle
f 5/5 6/6 7/7
o Guides
l 1 2
"""

    obj_path = directory / "check_asset.obj"
    obj_path.write_text(obj_data, encoding="utf-8")
    return obj_path
