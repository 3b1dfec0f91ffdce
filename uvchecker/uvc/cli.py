"""Command line interface for the ``uvc`` tool."""

from __future__ import annotations

import json
import logging
from importlib import import_module
from pathlib import Path
from typing import Any, Dict, List, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import get_version
from .check import CheckMode, CheckOptions, CheckRequest, run_check
from .core import UVCheckError
from .loaders import resolve_mesh
from .udim import touched_udims

__all__ = ["main"]

_LOGGER = logging.getLogger(__name__)

# Legacy fallback used when ``--check`` is omitted; never a valid mode.
_UNSET_CHECK = "99"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))


def _probe_module(module_name: str) -> Tuple[bool, str | None]:
    try:
        module = import_module(module_name)
    except Exception as exc:  # pragma: no cover - import failure depends on environment
        return False, str(exc)

    version = getattr(module, "__version__", None)
    detail = f"v{version}" if version else None
    return True, detail


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Entrypoint for the ``uvc`` command."""

    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["console"] = Console(stderr=True)
    ctx.obj["verbose"] = bool(verbose)


@main.command()
def version() -> None:
    """Show package version and capability probes."""

    click.echo(f"uvchecker {get_version()}")

    for module_name in ("numpy", "trimesh"):
        available, detail = _probe_module(module_name)
        status = "yes" if available else "no"
        if detail:
            status = f"{status} ({detail})"
        click.echo(f"{module_name}: {status}")


@main.command(name="check")
@click.argument("mesh_path", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option(
    "-c",
    "--check",
    "check",
    default=_UNSET_CHECK,
    show_default=False,
    help="Check to run: 0/overlaps or 1/udim",
)
@click.option("--object", "object_name", type=str, help="Object to check (defaults to first mesh)")
@click.option(
    "--loader",
    type=click.Choice(["auto", "obj", "trimesh"], case_sensitive=False),
    default="auto",
    show_default=True,
    help="Mesh loader backend",
)
@click.option("--workers", type=int, default=None, help="Worker threads used to scan faces")
@click.option("-v", "--verbose", "check_verbose", is_flag=True, help="Report which check runs")
@click.option(
    "--json",
    "json_path",
    type=click.Path(path_type=Path),
    help="Write the check report to this JSON file.",
)
@click.option("--summary", is_flag=True, help="Print a summary table to stderr")
@click.pass_context
def check_command(
    ctx: click.Context,
    mesh_path: Path,
    check: str,
    object_name: str | None,
    loader: str,
    workers: int | None,
    check_verbose: bool,
    json_path: Path | None,
    summary: bool,
) -> None:
    """Report UV overlaps or UDIM border crossings of a mesh."""

    try:
        mode = CheckMode.parse(check)
        resolved = resolve_mesh(mesh_path, object_name=object_name, loader=loader)
        request = CheckRequest(mesh_path=resolved.path, mode=mode, verbose=check_verbose)
        results = run_check(request, resolved.mesh, CheckOptions(workers=workers))
        udims = touched_udims(resolved.mesh) if (summary or json_path is not None) else []
    except UVCheckError as exc:
        raise click.ClickException(str(exc)) from exc

    for entry in results:
        click.echo(entry)

    ctx_obj: Dict[str, Any] = ctx.obj if isinstance(ctx.obj, dict) else {}
    console = ctx_obj.get("console")
    if not isinstance(console, Console):
        console = Console(stderr=True)

    if summary:
        console.print(
            _summary_table(resolved.path, mode, resolved.mesh.face_count(), results, udims)
        )

    if json_path is not None:
        report = {
            "mesh": resolved.path,
            "source": str(resolved.source),
            "check": mode.name.lower(),
            "count": len(results),
            "udims": udims,
            "results": results,
        }
        json_path.parent.mkdir(parents=True, exist_ok=True)
        with json_path.open("w", encoding="utf-8") as handle:
            json.dump(report, handle, indent=2)
            handle.write("\n")
        console.print(f"[green]Wrote check report to {json_path}[/green]")


def _summary_table(
    mesh_path: str,
    mode: CheckMode,
    face_count: int,
    results: List[str],
    udims: List[int],
) -> Table:
    table = Table(title=mesh_path)
    table.add_column("Check")
    table.add_column("Faces", justify="right")
    table.add_column("Reported", justify="right")
    table.add_column("Unique", justify="right")
    table.add_column("UDIMs")
    udim_text = ", ".join(str(tile) for tile in udims) if udims else "—"
    table.add_row(
        mode.name.lower(),
        str(face_count),
        str(len(results)),
        str(len(set(results))),
        udim_text,
    )
    return table


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
