"""Check selection and execution for the ``uvc check`` command."""

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Set

from .core import InvalidModeError
from .mesh import MeshAccessor
from .overlaps import detect_overlaps
from .results import format_face_paths
from .udim import detect_udim_crossing_faces, detect_udim_crossings

__all__ = ["CheckMode", "CheckRequest", "CheckOptions", "run_check", "find_offending_indices"]

_LOGGER = logging.getLogger(__name__)

_DEFAULT_CHUNK_SIZE = 4096


class CheckMode(enum.IntEnum):
    """The two supported UV checks, numbered as the ``--check`` flag expects."""

    OVERLAPS = 0
    UDIM = 1

    @classmethod
    def parse(cls, value: Any) -> "CheckMode":
        """Return the mode for an enum member, its number or its name."""

        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                value = int(text)
            else:
                named = _MODE_NAMES.get(text)
                if named is None:
                    raise InvalidModeError(f"Invalid check number '{value}'")
                return named

        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass

        raise InvalidModeError(f"Invalid check number '{value}'")

    @property
    def banner(self) -> str:
        return "Checking overlaps" if self is CheckMode.OVERLAPS else "Checking udim borders"


_MODE_NAMES = {
    "overlap": CheckMode.OVERLAPS,
    "overlaps": CheckMode.OVERLAPS,
    "udim": CheckMode.UDIM,
    "udims": CheckMode.UDIM,
}


@dataclass(frozen=True)
class CheckRequest:
    """A single check invocation against one mesh."""

    mesh_path: str
    mode: CheckMode
    verbose: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", CheckMode.parse(self.mode))


@dataclass
class CheckOptions:
    """Options that configure how a check is executed."""

    workers: Optional[int] = None
    chunk_size: int = _DEFAULT_CHUNK_SIZE
    cancel_event: Optional[threading.Event] = None


def run_check(
    request: CheckRequest,
    mesh: MeshAccessor,
    options: Optional[CheckOptions] = None,
) -> List[str]:
    """Run the check selected by ``request`` and return component paths."""

    check_options = options or CheckOptions()
    if request.verbose:
        _LOGGER.info(request.mode.banner)

    indices = find_offending_indices(request.mode, mesh, check_options)
    _LOGGER.debug(
        "%s reported %d entries for %s", request.mode.name, len(indices), request.mesh_path
    )
    return format_face_paths(request.mesh_path, indices)


def find_offending_indices(
    mode: CheckMode,
    mesh: MeshAccessor,
    options: Optional[CheckOptions] = None,
) -> List[int]:
    """Return face indices (overlaps) or sorted UV indices (UDIM) for ``mode``."""

    mode = CheckMode.parse(mode)
    check_options = options or CheckOptions()
    should_stop = _stop_callback(check_options.cancel_event)
    chunks = _partition_faces(mesh.face_count(), check_options.chunk_size)
    workers = _resolve_workers(check_options.workers, len(chunks))

    if mode is CheckMode.OVERLAPS:
        if workers <= 1:
            return detect_overlaps(mesh, should_stop=should_stop)

        _LOGGER.debug("Running overlap check over %d chunks with %d workers", len(chunks), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            parts = list(
                executor.map(
                    lambda chunk: detect_overlaps(mesh, chunk, should_stop=should_stop), chunks
                )
            )
        overlaps: List[int] = []
        for part in parts:
            overlaps.extend(part)
        return overlaps

    if mode is CheckMode.UDIM:
        if workers <= 1:
            return detect_udim_crossing_faces(mesh, should_stop=should_stop)

        _LOGGER.debug("Running UDIM check over %d chunks with %d workers", len(chunks), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            sets = list(
                executor.map(
                    lambda chunk: detect_udim_crossings(mesh, chunk, should_stop=should_stop),
                    chunks,
                )
            )
        crossing: Set[int] = set()
        for part in sets:
            crossing.update(part)
        return sorted(crossing)

    raise InvalidModeError(f"Invalid check number '{mode}'")


def _stop_callback(event: Optional[threading.Event]) -> Optional[Callable[[], bool]]:
    if event is None:
        return None
    return event.is_set


def _partition_faces(face_count: int, chunk_size: int) -> List[range]:
    size = max(1, int(chunk_size))
    return [range(start, min(start + size, face_count)) for start in range(0, face_count, size)]


def _resolve_workers(workers: Optional[int], chunk_count: int) -> int:
    if workers is None or workers <= 1 or chunk_count <= 1:
        return 1
    return min(int(workers), chunk_count)
