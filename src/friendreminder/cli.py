from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
from datetime import date

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from friendreminder.client import ContactCache
from friendreminder.scheduler import POLL_INTERVAL_SECONDS, ReminderNotification, ReminderScheduler

app = typer.Typer(help="Friend Reminder — keep in touch with the people you care about")
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_cache(api_url: str | None) -> ContactCache:
    cache = ContactCache(base_url=api_url)
    cache.load()
    return cache


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
) -> None:
    """Start the Friend Reminder API server."""
    import uvicorn

    uvicorn.run("friendreminder.web:create_app", host=host, port=port, reload=reload, factory=True)


@app.command("list")
def list_contacts(api_url: str = typer.Option(None, help="Server base URL")) -> None:
    """Show contacts ordered by their next reminder."""
    cache = _load_cache(api_url)
    contacts = cache.sorted_for_display()
    cache.close()

    if not contacts:
        console.print("[green]No contacts yet.[/green]")
        return

    table = Table(title="Friend Contacts")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Contact via", style="magenta")
    table.add_column("Reminder", style="yellow")
    table.add_column("Notes", justify="right")
    for c in contacts:
        table.add_row(
            c.id,
            c.name,
            f"{c.contact_point} — {c.contact_detail}",
            f"{c.remind_date} at {c.remind_time}",
            str(len(c.notes)),
        )
    console.print(table)


@app.command()
def add(
    name: str = typer.Argument(..., help="Who to keep in touch with"),
    contact_point: str = typer.Option(..., "--via", help="Channel, e.g. Email, Phone, Text"),
    contact_detail: str = typer.Option(..., "--detail", help="Address or number for the channel"),
    remind_date: str = typer.Option(..., "--date", help="Reminder date (YYYY-MM-DD)"),
    remind_time: str = typer.Option(..., "--time", help="Reminder time (HH:MM)"),
    api_url: str = typer.Option(None, help="Server base URL"),
) -> None:
    """Create a contact with a reminder."""
    cache = ContactCache(base_url=api_url)
    contact = cache.create(
        {
            "name": name,
            "contactPoint": contact_point,
            "contactDetail": contact_detail,
            "notes": [],
            "dateCreated": date.today().isoformat(),
            "remindDate": remind_date,
            "remindTime": remind_time,
        }
    )
    cache.close()
    if contact is None:
        console.print("[red]Could not create contact.[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Created {contact.name} ({contact.id}).[/green]")


@app.command()
def note(
    contact_id: str = typer.Argument(..., help="Contact id"),
    content: str = typer.Argument(..., help="Note text (max 512 characters)"),
    api_url: str = typer.Option(None, help="Server base URL"),
) -> None:
    """Add a timestamped note to a contact."""
    cache = _load_cache(api_url)
    try:
        contact = cache.add_note(contact_id, content)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    finally:
        cache.close()
    if contact is None:
        console.print("[red]Could not add note.[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{contact.name} now has {len(contact.notes)} note(s).[/green]")


@app.command()
def delete(
    contact_id: str = typer.Argument(..., help="Contact id"),
    api_url: str = typer.Option(None, help="Server base URL"),
) -> None:
    """Delete a contact."""
    cache = ContactCache(base_url=api_url)
    ok = cache.remove(contact_id)
    cache.close()
    if not ok:
        console.print("[red]Could not delete contact.[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Deleted.[/green]")


def _show(notification: ReminderNotification) -> None:
    console.print(Panel(notification.message, title=notification.title, border_style="cyan"))


async def _watch(scheduler: ReminderScheduler) -> None:
    async with scheduler:
        # runs until cancelled by Ctrl-C
        await asyncio.Event().wait()


@app.command()
def watch(
    interval: float = typer.Option(POLL_INTERVAL_SECONDS, help="Seconds between reminder checks"),
    api_url: str = typer.Option(None, help="Server base URL"),
) -> None:
    """Load contacts once and pop up reminders as they become due."""
    cache = _load_cache(api_url)
    console.print(f"Watching {len(cache.contacts)} contact(s). Press Ctrl-C to stop.")
    scheduler = ReminderScheduler(cache, _show, interval_seconds=interval)
    try:
        asyncio.run(_watch(scheduler))
    except KeyboardInterrupt:
        console.print("Stopped.")
    finally:
        cache.close()
