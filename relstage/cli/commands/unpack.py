"""``relstage unpack SOURCE RELEASE`` — fetch, verify and unpack a staged release.

Loads the release's ``metadata.json`` from SOURCE (a local bucket directory
or an ``http(s)://`` bucket URL), runs the unpack pipeline and prints a
summary of the charts, manifests and component image bundles found.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from relstage.cli.commands._sources import store_for_source
from relstage.config import UnpackSettings
from relstage.core.errors import UnpackError
from relstage.core.staged import load_staged_release
from relstage.core.unpacker import Unpacker
from relstage.models.bundle import UnpackedRelease
from relstage.routing import LoggingSink, MemorySink, SinkDispatcher

console = Console()


def _render(unpacked: UnpackedRelease) -> None:
    table = Table(title="Component image bundles")
    table.add_column("Component", style="cyan")
    table.add_column("Image")
    table.add_column("Platform", style="green")
    for component, images in unpacked.component_image_bundles.items():
        for image in images:
            table.add_row(component, image.image_name, f"{image.os}/{image.architecture}")

    console.print(
        Panel(
            "\n".join([
                f"[bold]Version:[/bold] {unpacked.release_version}",
                f"[bold]Commit:[/bold]  {unpacked.git_commit_ref}",
                f"[bold]Charts:[/bold]  {', '.join(c.name for c in unpacked.charts) or '-'}",
                f"[bold]YAMLs:[/bold]   {', '.join(y.name for y in unpacked.yamls) or '-'}",
            ]),
            title="[bold]Unpacked release[/bold]",
            border_style="green",
        )
    )
    console.print(table)


def unpack_cmd(
    source: str = typer.Argument(
        ...,
        help="Local bucket directory or http(s):// bucket URL.",
    ),
    release: str = typer.Argument(
        ...,
        help="Object name prefix of the staged release inside the bucket.",
    ),
    workers: int = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Number of server artifacts to fetch in parallel.",
    ),
    work_dir: Path = typer.Option(
        None,
        "--work-dir",
        help="Parent directory for the unpack workspace.",
    ),
    keep: bool = typer.Option(
        False,
        "--keep/--no-keep",
        help="Keep the unpacked workspace on disk after printing the summary.",
    ),
) -> None:
    """Fetch, verify and unpack a staged release."""
    overrides: dict[str, object] = {}
    if workers is not None:
        overrides["max_workers"] = workers
    if work_dir is not None:
        overrides["work_dir"] = work_dir
    settings = UnpackSettings(**overrides)

    events = MemorySink()
    unpacker = Unpacker(settings, SinkDispatcher([LoggingSink(), events]))

    try:
        staged = load_staged_release(
            store_for_source(source), release, settings.metadata_file_name
        )
        unpacked = unpacker.unpack(staged)
    except UnpackError as exc:
        console.print(f"[bold red]Unpack failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    try:
        _render(unpacked)
        console.print(f"[dim]{len(events.events)} progress events recorded.[/dim]")
    finally:
        if keep:
            console.print(f"[bold]Workspace:[/bold] {unpacked.workspace}")
        else:
            unpacked.cleanup()
