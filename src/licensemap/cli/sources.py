"""Knowledge source management commands."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from licensemap.entities.core import SourceTrack
from licensemap.repository import FeatureNotFoundError, SourceNotFoundError

from .common import CLIError, console, get_state


app = typer.Typer(
    add_completion=False,
    help="List, edit and delete stored knowledge sources.",
    no_args_is_help=True,
)


def _parse_track(track: Optional[str]) -> SourceTrack | None:
    if track is None:
        return None
    for candidate in SourceTrack:
        if candidate.value.lower() == track.strip().lower():
            return candidate
    choices = ", ".join(item.value for item in SourceTrack)
    raise CLIError(f"--track must be one of: {choices}")


def _list_command(
    ctx: typer.Context,
    track: Optional[str] = typer.Option(
        None,
        "--track",
        "-t",
        help="Only list sources of this product track (Enterprise or Business).",
    ),
) -> None:
    state = get_state(ctx)
    sources = state.repository.list(_parse_track(track))
    if not sources:
        console.print(f"[yellow]No knowledge sources found in {state.sources_dir}.[/yellow]")
        return

    table = Table(title="Knowledge Sources", box=None)
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Track")
    table.add_column("Tiers")
    table.add_column("Categories", justify="right")
    table.add_column("Features", justify="right")
    for source in sources:
        feature_total = sum(len(category.features) for category in source.data.categories)
        table.add_row(
            source.id,
            source.title,
            source.track.value,
            ", ".join(source.data.tiers),
            str(len(source.data.categories)),
            str(feature_total),
        )
    console.print(table)


def _delete_command(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Identifier of the source to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    state = get_state(ctx)
    source = state.repository.get(source_id)
    if source is None:
        raise CLIError(f"Unknown knowledge source '{source_id}'")
    if not yes and not typer.confirm(f"Delete knowledge source '{source.title}'?"):
        raise typer.Exit(code=1)
    state.repository.delete(source_id)
    console.print(f"[green]Deleted {source.title} ({source_id}).[/green]")


def _set_link_command(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Identifier of the source to edit."),
    category: str = typer.Option(..., "--category", "-c", help="Category display name."),
    feature: str = typer.Option(..., "--feature", "-f", help="Feature display name."),
    link: str = typer.Option("", "--link", "-l", help="Documentation URL; empty clears it."),
) -> None:
    state = get_state(ctx)
    try:
        state.repository.set_feature_link(source_id, category, feature, link)
    except SourceNotFoundError as error:
        raise CLIError(f"Unknown knowledge source '{source_id}'") from error
    except FeatureNotFoundError as error:
        raise CLIError(f"No feature '{feature}' in category '{category}' of '{source_id}'") from error
    console.print(f"[green]Updated link for {feature}.[/green]")


app.command("list")(_list_command)
app.command("delete")(_delete_command)
app.command("set-link")(_set_link_command)
