"""``relstage inspect SOURCE RELEASE`` — list a staged release's artifacts."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from relstage.cli.commands._sources import store_for_source
from relstage.config import UnpackSettings
from relstage.core.errors import UnpackError
from relstage.core.selector import artifacts_of_kind
from relstage.core.staged import load_staged_release
from relstage.models.artifacts import ArtifactKind

console = Console()


def inspect_cmd(
    source: str = typer.Argument(..., help="Local bucket directory or http(s):// bucket URL."),
    release: str = typer.Argument(..., help="Object name prefix of the staged release."),
    kind: ArtifactKind = typer.Option(None, help="Only list artifacts of this kind."),
) -> None:
    """Show the metadata and artifacts of a staged release."""
    settings = UnpackSettings()
    try:
        staged = load_staged_release(
            store_for_source(source), release, settings.metadata_file_name
        )
    except UnpackError as exc:
        console.print(f"[bold red]Cannot load release:[/bold red] {exc}")
        raise typer.Exit(code=1)

    kinds = [kind] if kind else list(ArtifactKind)
    table = Table(title=f"{staged.name} ({staged.metadata.release_version or 'devel'})")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Platform", style="green")
    table.add_column("SHA-256")
    for artifact_kind in kinds:
        for artifact in artifacts_of_kind(staged, artifact_kind):
            table.add_row(
                artifact.name,
                artifact.kind.value,
                artifact.platform or "-",
                artifact.sha256[:12],
            )

    console.print(f"[bold]Commit:[/bold] {staged.metadata.git_commit_ref}")
    console.print(table)
