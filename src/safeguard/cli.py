"""CLI interface for safeguard."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from safeguard.classify.media import MediaFile
from safeguard.config import SafeguardConfig, load_config, merge_cli_overrides
from safeguard.content.lifecycle import ContentLifecycle, ModerationOutcome
from safeguard.content.models import Content, ContentStatus, ContentType, ModerationDecision
from safeguard.content.services import open_lifecycle
from safeguard.errors import InvariantViolation, ValidationError

app = typer.Typer(
    name="safeguard",
    help="Classify submitted content and run the moderation workflow.",
)

console = Console()

_STATUS_STYLE = {
    ContentStatus.ANALYZING: "blue",
    ContentStatus.SAFE: "green",
    ContentStatus.SUSPICIOUS: "yellow",
    ContentStatus.HARMFUL: "red",
}


class _State:
    config: SafeguardConfig = SafeguardConfig()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from safeguard import __version__

        console.print(f"safeguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .safeguard.toml file."),
    ] = None,
    storage_dir: Annotated[
        Optional[Path],
        typer.Option("--store", "-s", help="Directory holding the content store."),
    ] = None,
    media_timeout: Annotated[
        Optional[float],
        typer.Option("--media-timeout", help="Seconds to wait on media analysis.", min=0.01),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Safeguard - content classification and moderation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _State.config = merge_cli_overrides(
        load_config(config_path), storage_dir=storage_dir, media_timeout=media_timeout
    )


def _lifecycle() -> ContentLifecycle:
    return open_lifecycle(_State.config)


def _status_text(status: ContentStatus) -> str:
    style = _STATUS_STYLE[status]
    return f"[{style}]{status}[/{style}]"


def _preview(text: str, width: int = 50) -> str:
    return text[:width] + "..." if len(text) > width else text


def _content_table(title: str, records: list[Content]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Content")
    table.add_column("Submitted")
    table.add_column("Reviewed by")
    for record in records:
        table.add_row(
            record.id,
            record.content_type,
            _status_text(record.status),
            _preview(record.payload),
            record.submitted_at.strftime("%Y-%m-%d %H:%M"),
            record.moderated_by or "",
        )
    return table


@app.command()
def submit(
    text: Annotated[
        Optional[str],
        typer.Argument(help="Text to submit. Omit when submitting a file."),
    ] = None,
    content_type: Annotated[
        ContentType,
        typer.Option("--type", "-t", help="Content type."),
    ] = ContentType.TEXT,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Media file to submit.", exists=True, dir_okay=False),
    ] = None,
    width: Annotated[Optional[int], typer.Option(help="Image width in pixels.")] = None,
    height: Annotated[Optional[int], typer.Option(help="Image height in pixels.")] = None,
    duration: Annotated[
        Optional[float], typer.Option(help="Video or audio duration in seconds.")
    ] = None,
) -> None:
    """Submit content for automatic classification."""
    media = None
    if file is not None:
        media = MediaFile.from_path(file, width=width, height=height, duration=duration)

    lifecycle = _lifecycle()
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Analyzing content...", total=None)
            content_id = asyncio.run(lifecycle.submit(content_type, text or "", media))
    except (ValidationError, InvariantViolation) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    record = lifecycle.get(content_id)
    if record is None:
        console.print(f"[red]Error:[/red] content {content_id} was not stored")
        raise typer.Exit(1)
    console.print(f"Submitted [cyan]{content_id}[/cyan]: {_status_text(record.status)}")
    console.print(record.report or "")


@app.command()
def status(
    content_id: Annotated[str, typer.Argument(help="Content ID.")],
) -> None:
    """Show a record's classification and moderation state."""
    record = _lifecycle().get(content_id)
    if record is None:
        console.print(f"[yellow]Content not found:[/yellow] {content_id}")
        raise typer.Exit(1)

    console.print(f"[bold]{record.content_type.capitalize()} content[/bold] {record.id}")
    console.print(f"Status: {_status_text(record.status)} (confidence {record.confidence:.0%})")
    console.print(f"Submitted: {record.submitted_at.isoformat()}")
    console.print(f"Content: {record.payload}")
    if record.report:
        console.print(f"Report: {record.report}")
    if record.is_reviewed:
        console.print(f"Moderated by: {record.moderated_by} at {record.moderated_at}")
        if record.moderation_notes:
            console.print(f"Notes: {record.moderation_notes}")


@app.command()
def moderate(
    content_id: Annotated[str, typer.Argument(help="Content ID.")],
    decision: Annotated[ModerationDecision, typer.Argument(help="approve, edit or block.")],
    notes: Annotated[Optional[str], typer.Option("--notes", "-n", help="Moderator notes.")] = None,
    moderator: Annotated[
        Optional[str], typer.Option("--moderator", "-m", help="Moderator identity.")
    ] = None,
) -> None:
    """Apply a moderator decision to a record."""
    lifecycle = _lifecycle()
    outcome = lifecycle.moderate(content_id, decision, notes=notes, moderator=moderator)
    if outcome is ModerationOutcome.NOT_FOUND:
        console.print(f"[yellow]Content not found:[/yellow] {content_id}")
        raise typer.Exit(1)

    record = lifecycle.get(content_id)
    if record is None:
        console.print(f"[yellow]Content not found:[/yellow] {content_id}")
        raise typer.Exit(1)
    console.print(f"Content {content_id} is now {_status_text(record.status)}")


@app.command()
def queue(
    search: Annotated[Optional[str], typer.Option("--search", help="Filter by content.")] = None,
) -> None:
    """List suspicious content awaiting review."""
    records = _lifecycle().review_queue(query=search)
    if not records:
        console.print("[green]No content to moderate.[/green]")
        return
    console.print(_content_table("Pending review", records))


@app.command("list")
def list_cmd(
    status_filter: Annotated[
        Optional[ContentStatus], typer.Option("--status", help="Only this status.")
    ] = None,
    content_type: Annotated[
        Optional[ContentType], typer.Option("--type", "-t", help="Only this content type.")
    ] = None,
    search: Annotated[Optional[str], typer.Option("--search", help="Filter by content.")] = None,
    reviewed: Annotated[
        bool, typer.Option("--reviewed", help="Only content a moderator has settled.")
    ] = False,
) -> None:
    """List submitted content."""
    lifecycle = _lifecycle()
    if reviewed:
        records = lifecycle.reviewed(query=search)
    else:
        records = lifecycle.list(content_type=content_type, status=status_filter, query=search)
    if not records:
        console.print("[yellow]No content found.[/yellow]")
        return
    console.print(_content_table("Content", records))


@app.command()
def log(
    content_id: Annotated[
        Optional[str], typer.Option("--content", help="Only actions on this record.")
    ] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-l", help="Number of entries.")] = None,
) -> None:
    """Show recent moderation actions, newest first."""
    moderation_log = _lifecycle().moderation_log
    if content_id:
        actions = list(reversed(moderation_log.for_content(content_id)))
        if limit:
            actions = actions[:limit]
    else:
        actions = moderation_log.recent(limit or _State.config.moderation.recent_log_limit)

    if not actions:
        console.print("[yellow]No moderation activity yet.[/yellow]")
        return

    table = Table(title="Moderation log")
    table.add_column("When")
    table.add_column("Content", style="cyan")
    table.add_column("Action")
    table.add_column("Moderator")
    table.add_column("Notes")
    for action in actions:
        table.add_row(
            action.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            action.content_id,
            action.action,
            action.moderator,
            action.notes or "",
        )
    console.print(table)


@app.command()
def stats() -> None:
    """Count content by status."""
    counts = _lifecycle().stats()
    for status_value, count in counts.items():
        console.print(f"{_status_text(status_value)}: {count}")


if __name__ == "__main__":
    app()
