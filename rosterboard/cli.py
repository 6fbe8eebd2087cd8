"""Roster board CLI - Main entry point."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .errors import BoardError
from .planning_center import PlanningCenterError

app = typer.Typer(
    name="rosterboard",
    help="Church service display board - Planning Center sync and display feed",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _run(coro_fn, *args):
    """Run ``coro_fn(db, *args)`` in a fresh session, turning domain errors into exit 1."""
    from .database import async_session_factory, engine

    async def runner():
        try:
            async with async_session_factory() as db:
                return await coro_fn(db, *args)
        finally:
            await engine.dispose()

    try:
        return asyncio.run(runner())
    except (BoardError, PlanningCenterError) as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


async def _location_id(db, slug: str):
    from .services import location_svc

    return (await location_svc.get_location_by_slug(db, slug)).id


# ============================================================================
# Database
# ============================================================================


@app.command("init-db")
def init_db():
    """Create tables directly (SQLite development databases)."""
    from .database import engine
    from .models import Base

    async def create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(create())
    console.print("[green]Database tables created.[/green]")


# ============================================================================
# Planning Center
# ============================================================================


@app.command("folders")
def folders():
    """List Planning Center root folders that can become locations."""
    from .sync.sync_engine import fetch_location_candidates

    candidates = _run(fetch_location_candidates)
    if not candidates:
        console.print("[yellow]No folders with service types found.[/yellow]")
        return

    table = Table(title="Location Candidates")
    table.add_column("Folder ID", style="dim")
    table.add_column("Folder", style="cyan")
    table.add_column("Service Types")
    for candidate in candidates:
        names = ", ".join(f"{st['name']} ({st['id']})" for st in candidate["service_types"])
        table.add_row(candidate["folder_id"], candidate["name"], names)
    console.print(table)


@app.command("sync-positions")
def sync_positions(slug: str = typer.Argument(..., help="Location slug")):
    """Pull team positions for a location's service type."""
    from .sync.sync_engine import sync_positions as run_sync

    async def go(db):
        return await run_sync(db, await _location_id(db, slug))

    result = _run(go)
    table = Table(title=f"Positions for {slug}")
    table.add_column("Name", style="cyan")
    table.add_column("Sync", style="green")
    for position in result.positions:
        table.add_row(position.name, "on" if position.sync_enabled else "[dim]off[/dim]")
    console.print(table)
    console.print(f"[green]{result.created} created, {result.updated} updated[/green]")


@app.command("sync-people")
def sync_people(slug: str = typer.Argument(..., help="Location slug")):
    """Import people scheduled on the location's next plan."""
    from .sync.sync_engine import sync_people as run_sync

    async def go(db):
        return await run_sync(db, await _location_id(db, slug))

    result = _run(go)
    console.print(
        Panel(
            f"Plan: {result.plan_title or result.plan_id}\n"
            f"Processed: {result.processed}  "
            f"Created: {result.created}  Updated: {result.updated}  Skipped: {result.skipped}",
            title=f"People sync - {slug}",
        )
    )


@app.command("merge-people")
def merge_people(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Collapse duplicate people sharing a Planning Center id."""
    from .sync.merge import merge_duplicate_persons

    if not force:
        if not typer.confirm("Merge duplicate people into their oldest record?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    result = _run(merge_duplicate_persons)
    console.print(
        f"[green]Merged {result.groups_merged} group(s), removed {result.rows_removed} row(s), "
        f"moved {result.links_moved} link(s).[/green]"
    )


# ============================================================================
# Display
# ============================================================================


@app.command("display")
def display(slug: str = typer.Argument(None, help="Location slug (primary when omitted)")):
    """Show the display feed a board would render."""
    from .services.display_svc import compose_display

    async def go(db):
        return await compose_display(db, slug=slug)

    feed = _run(go)
    console.print(
        Panel(
            f"{feed.church_name} - {feed.location_name}\n{feed.date.isoformat()} ({feed.timezone})",
            title="Display",
        )
    )

    table = Table(title="Roster")
    table.add_column("Item", style="cyan")
    table.add_column("Position")
    for item in feed.display_items:
        if item.type == "separator":
            table.add_row(f"[bold]{item.name}[/bold]", "")
        else:
            table.add_row(f"{item.first_name or ''} {item.last_name or ''}".strip(), item.position_name or "")
    console.print(table)

    if feed.setlist is None:
        console.print("[dim]No setlist.[/dim]")
        return
    setlist = Table(title=feed.setlist.title or "Setlist")
    setlist.add_column("Title")
    setlist.add_column("Type", style="dim")
    setlist.add_column("Key", style="green")
    for entry in feed.setlist.items:
        setlist.add_row(entry.title or "", entry.type or "", entry.key_name or "")
    console.print(setlist)
    if feed.date_matches_plan is False:
        console.print(f"[yellow]Next plan is on {feed.setlist.plan_date}, not {feed.date}.[/yellow]")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the API server."""
    import uvicorn

    uvicorn.run("rosterboard.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
