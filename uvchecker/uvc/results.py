"""Formatting of check results into component path strings."""

from __future__ import annotations

from typing import Iterable, List

__all__ = ["format_face_paths"]


def format_face_paths(mesh_path: str, indices: Iterable[int]) -> List[str]:
    """Return ``<mesh_path>.f[<index>]`` for each index, keeping input order."""

    return [f"{mesh_path}.f[{int(index)}]" for index in indices]
