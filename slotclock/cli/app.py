"""
Main CLI application using Typer.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from pendulum import DateTime
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig
from ..domain.exceptions import OrderingClosedError
from ..domain.models import SlotAvailability, StatusLabel, parse_time_of_day
from ..domain.slot_clock import SlotClock
from ..adapters.mock_slot_store_client import MockSlotStoreClient
from ..adapters.slot_store_client import SlotStoreClient
from ..services.slot_availability import SlotAvailabilityService

app = typer.Typer(
    name="slotclock",
    help="Check which cloud-kitchen slots are accepting orders",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    StatusLabel.OPEN: "bold green",
    StatusLabel.CLOSING_SOON: "bold yellow",
    StatusLabel.CLOSED: "bold red",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock slots instead of the slot store.")]
AtOption = Annotated[Optional[str], typer.Option("--at", help="Evaluate at this time of day today (HH:MM) instead of now.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _configure_logging(config: AppConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_service(config: AppConfig, mock: bool) -> SlotAvailabilityService:
    """
    Wire the store adapter, slot clock and service from configuration.

    Raises:
        typer.Exit: If no store is configured and mock mode is off
    """
    if mock:
        store = MockSlotStoreClient()
    elif config.store is None:
        console.print(
            "[bold red]Error:[/bold red] No slot store configured. "
            "Add a 'store' section to config.yaml or use --mock."
        )
        raise typer.Exit(1)
    else:
        store = SlotStoreClient.from_config(config.store)

    return SlotAvailabilityService(
        slot_store=store,
        slot_clock=SlotClock(closing_soon_minutes=config.closing_soon_minutes),
        timezone=config.timezone
    )


def _resolve_instant(service: SlotAvailabilityService, at: Optional[str]) -> DateTime:
    """Current instant, or today at the given HH:MM."""
    now = service.now()
    if not at:
        return now

    time_of_day = parse_time_of_day(at)
    return now.set(hour=time_of_day.hour, minute=time_of_day.minute, second=0, microsecond=0)


def _format_status(entry: SlotAvailability) -> str:
    label = entry.verdict.status_label
    return f"[{STATUS_STYLES[label]}]{label.value.replace('_', ' ')}[/{STATUS_STYLES[label]}]"


def _build_status_table(availability: List[SlotAvailability], instant: DateTime) -> Table:
    table = Table(
        title=f"Slots at {instant.format('DD.MM.YYYY HH:mm')} ({instant.timezone_name})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Slot", style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Window")
    table.add_column("Cutoff", justify="right")
    table.add_column("Status")
    table.add_column("Remaining", justify="right")

    for entry in availability:
        slot = entry.slot
        remaining = entry.verdict.time_remaining
        table.add_row(
            slot.name or slot.id,
            slot.id,
            slot.window_display() + (" (overnight)" if slot.is_overnight else ""),
            f"{slot.cutoff_hours_before:g}h",
            _format_status(entry),
            str(remaining) if remaining is not None else "-"
        )

    return table


@app.command()
def status(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    at: AtOption = None,
    verbose: VerboseOption = False,
):
    """
    Show all active slots and whether they accept orders.

    Examples:

        slotclock status --mock

        slotclock status --mock --at 07:30
    """
    try:
        config = AppConfig.load_or_default(config_file)
        _configure_logging(config, verbose)

        service = _build_service(config, mock)
        instant = _resolve_instant(service, at)
        availability = service.list_availability(now=instant)

        console.print()
        if not availability:
            console.print("[yellow]⚠ No active slots found.[/yellow]")
        else:
            console.print(_build_status_table(availability, instant))
        console.print()

    except typer.Exit:
        raise

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def check(
    slot_id: Annotated[str, typer.Argument(help="ID of the slot to check")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    at: AtOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a slot accepts orders right now.

    Exits with 0 when ordering is open and 2 when it is closed.
    """
    try:
        config = AppConfig.load_or_default(config_file)
        _configure_logging(config, verbose)

        service = _build_service(config, mock)
        instant = _resolve_instant(service, at)
        availability = service.ensure_ordering_open(slot_id, now=instant)

    except OrderingClosedError as e:
        console.print(Panel.fit(
            f"[bold red]✗ Ordering closed[/bold red]\n\n{e.availability.format_display()}",
            title=e.availability.slot.name or slot_id
        ))
        raise typer.Exit(2)

    except typer.Exit:
        raise

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Ordering open[/bold green]\n\n{availability.format_display()}",
        title=availability.slot.name or slot_id
    ))


@app.command()
def watch(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Seconds between refreshes. Defaults to refresh_interval_seconds from the config.")] = None,
    iterations: Annotated[int, typer.Option("--iterations", "-n", help="Stop after this many refreshes (0 = run until interrupted).")] = 0,
    verbose: VerboseOption = False,
):
    """
    Re-evaluate all slots periodically to keep countdowns current.
    """
    try:
        config = AppConfig.load_or_default(config_file)
        _configure_logging(config, verbose)

        service = _build_service(config, mock)
        refresh_seconds = interval if interval is not None else config.refresh_interval_seconds
        if refresh_seconds <= 0:
            console.print("[bold red]Error:[/bold red] --interval must be greater than zero")
            raise typer.Exit(1)

        count = 0
        while True:
            instant = service.now()
            availability = service.list_availability(now=instant)
            console.print(_build_status_table(availability, instant))

            count += 1
            if iterations and count >= iterations:
                break

            logger.debug("Next refresh in %d seconds", refresh_seconds)
            time.sleep(refresh_seconds)

    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")

    except typer.Exit:
        raise

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def menu(
    slot_id: Annotated[str, typer.Argument(help="ID of the slot")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List the available menu items of a slot.
    """
    try:
        config = AppConfig.load_or_default(config_file)
        _configure_logging(config, verbose)

        service = _build_service(config, mock)
        items = service.get_menu(slot_id)

        if not items:
            console.print(f"[yellow]No items available for slot '{slot_id}'.[/yellow]")
            return

        table = Table(
            title=f"Menu for {slot_id}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Item", style="bold yellow")
        table.add_column("Veg", justify="center")
        table.add_column("Set", justify="right")
        table.add_column("Min sets", justify="right")
        table.add_column("Price", justify="right")

        for item in items:
            table.add_row(
                item.name,
                "✓" if item.is_vegetarian else "",
                str(item.set_size),
                str(item.min_order_sets),
                f"₹{item.price:.2f}"
            )

        console.print()
        console.print(table)
        console.print()

    except typer.Exit:
        raise

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotclock[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
