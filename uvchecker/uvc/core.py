"""Core types and exceptions for uvchecker."""

from __future__ import annotations

__all__ = [
    "UVCheckError",
    "InvalidModeError",
    "NotAMeshError",
    "MeshLoadError",
    "DegenerateFaceError",
    "UnresolvedUVIndexError",
    "CheckCancelledError",
]


class UVCheckError(Exception):
    """Base exception for uvchecker errors."""


class InvalidModeError(UVCheckError):
    """Raised when the check selector is not a known check mode."""


class NotAMeshError(UVCheckError):
    """Raised when the selected object has no polygon geometry."""


class MeshLoadError(UVCheckError):
    """Raised when a mesh cannot be loaded or selected."""


class DegenerateFaceError(UVCheckError):
    """Raised when a face cannot be triangulated."""

    def __init__(self, face_index: int, message: str | None = None) -> None:
        self.face_index = face_index
        super().__init__(message or f"Face {face_index} cannot be triangulated")


class UnresolvedUVIndexError(UVCheckError):
    """Raised when a UV index has no coordinate in the UV table."""

    def __init__(self, uv_index: int, message: str | None = None) -> None:
        self.uv_index = uv_index
        super().__init__(message or f"UV index {uv_index} has no coordinate")


class CheckCancelledError(UVCheckError):
    """Raised when a running check is cancelled between faces."""
