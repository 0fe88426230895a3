"""Tier comparison command."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from uuid import uuid4

import typer
from rich.markup import escape
from rich.table import Table

from licensemap.comparison import ComparisonSelection, ComparisonSession, DetailLevel, export_matrix
from licensemap.entities.core import StatusKind
from licensemap.utils.logging import logging_context
from licensemap.utils.status import classify_status

from .common import CLIError, console, get_state


_STATUS_STYLES = {
    StatusKind.INCLUDED: "green",
    StatusKind.PARTIAL: "yellow",
    StatusKind.ADD_ON: "cyan",
    StatusKind.EXCLUDED: "red",
}


def _format_cell(value: str | bool, session: ComparisonSession) -> str:
    if isinstance(value, bool):
        return "[green]✓[/green]" if value else ""
    style = _STATUS_STYLES[classify_status(value, session.policies.status)]
    return f"[{style}]{escape(value)}[/{style}]"


def compare_command(
    ctx: typer.Context,
    select: List[str] = typer.Option(  # noqa: B008 - Typer signature
        ...,
        "--select",
        "-s",
        metavar="SOURCE_ID:TIER",
        help="Tier to compare (repeatable, order defines the columns).",
    ),
    query: str = typer.Option("", "--query", "-q", help="Case-insensitive feature search."),
    category: List[str] = typer.Option(  # noqa: B008 - Typer signature
        [],
        "--category",
        "-c",
        help="Restrict to these categories (repeatable).",
    ),
    diff_only: bool = typer.Option(False, "--diff-only", help="Only show features that differ."),
    detail: DetailLevel = typer.Option(
        DetailLevel.FULL,
        "--detail",
        "-d",
        case_sensitive=False,
        help="Render raw statuses (full) or availability checkmarks.",
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export",
        help="Also write the filtered matrix to this path.",
    ),
    export_format: str = typer.Option(
        "csv",
        "--format",
        help="Export format: csv or json.",
        case_sensitive=False,
    ),
) -> None:
    """Merge the selected tiers and print the unified comparison matrix."""

    state = get_state(ctx)
    try:
        selection = ComparisonSelection.parse(select)
    except ValueError as error:
        raise CLIError(str(error)) from error

    with logging_context(session=uuid4().hex[:8], command="compare"):
        session = ComparisonSession(
            state.repository,
            policies=state.settings.policies,
            selection=selection,
        )
        session.set_filters(query=query, categories=category, diff_only=diff_only, detail=detail)
        _render_comparison(session, export, export_format)


def _render_comparison(session: ComparisonSession, export: Optional[Path], export_format: str) -> None:
    unified = session.unified
    if unified.is_empty:
        console.print("[yellow]Nothing to compare: none of the selected sources could be resolved.[/yellow]")
        return

    table = Table(title="Unified Comparison", show_lines=False)
    table.add_column("Feature")
    for label in unified.tier_labels:
        table.add_column(escape(label), justify="center")

    current_category: str | None = None
    rows = session.rows()
    for row in rows:
        if row.category != current_category:
            table.add_row(f"[bold]{escape(row.category)}[/bold]", *([""] * len(unified.tiers)))
            current_category = row.category
        marker = " [magenta]*[/magenta]" if row.feature.is_diff else ""
        table.add_row(
            f"  {escape(row.feature.name)}{marker}",
            *(_format_cell(cell, session) for cell in row.cells),
        )
    console.print(table)
    console.print(f"{len(rows)} features in {len(session.projection)} categories.")

    if export is not None:
        try:
            destination = export_matrix(
                unified,
                session.projection,
                export,
                fmt=export_format,
                detail=session.view.detail,
                status_policy=session.policies.status,
            )
        except ValueError as error:
            raise CLIError(str(error)) from error
        console.print(f"[green]Exported {len(rows)} rows to {destination}.[/green]")
