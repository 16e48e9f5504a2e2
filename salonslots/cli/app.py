"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_appointment_store import JsonAppointmentStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SchedulingError
from ..domain.models import Weekday, total_duration
from ..domain.slot_calculator import SlotCalculator
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="salonslots",
    help="Find bookable appointment slots for salon professionals",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: Optional[str], tz: str):
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Invalid date '{value}': {e}[/red]")
        raise typer.Exit(1)


@app.command()
def slots(
    professional: Annotated[str, typer.Argument(help="Professional id or name")],
    date: Annotated[Optional[str], typer.Option("--date", help="Booking date (YYYY-MM-DD). Defaults to today.")] = None,
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service name; repeat to book several services in one block.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Booking duration in minutes (instead of --service)")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    appointments: Annotated[Optional[Path], typer.Option("--appointments", "-a", help="JSON file with existing appointments")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    List bookable start times for a professional on a given day.

    Examples:

        salonslots slots ana --date 2024-11-25 --service Corte

        salonslots slots ana --service Corte --service Barba

        salonslots slots ana --duration 45 --appointments appointments.json
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone
        target_date = _parse_date(date, tz)

        pro = config.resolve_professional(professional)

        appointments_file = appointments or config.appointments_file
        if appointments_file is None:
            console.print("[bold red]Error:[/bold red] No appointments file configured. Use --appointments.")
            raise typer.Exit(1)

        service_names = service or []
        if not service_names and duration is None:
            console.print("[bold red]Error:[/bold red] Provide at least one --service or a --duration.")
            raise typer.Exit(1)

        store = JsonAppointmentStore(data_file=appointments_file, timezone=tz)
        availability_service = AvailabilityService(
            occupancy_fetcher=store,
            slot_calculator=SlotCalculator(
                timezone=tz,
                step_minutes=config.defaults.slot_interval_minutes,
            ),
        )

        if service_names:
            booking_duration = total_duration(
                AvailabilityService.resolve_services(pro, service_names)
            )
        else:
            booking_duration = duration

        available = asyncio.run(
            availability_service.get_available_slots(
                professional=pro,
                duration_minutes=booking_duration,
                target_date=target_date,
            )
        )

        console.print(
            f"\n[bold cyan]{pro.name}[/bold cyan] · {target_date.format('DD.MM.YYYY')} "
            f"({Weekday.from_date(target_date).value}) · {booking_duration} min\n"
        )

        if not available:
            console.print("[yellow]⚠ No bookable slots on this day.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(available)} slot(s) available:[/bold green]")
        console.print("  " + "  ".join(available))
        console.print()

    except (FileNotFoundError, ValueError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_professionals(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured professionals.
    """
    try:
        config = _load_config(config_file)

        if not config.professionals:
            console.print("[yellow]No professionals defined in the config file.[/yellow]")
            return

        table = Table(
            title="Professionals",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold yellow")
        table.add_column("Step (min)", justify="right")
        table.add_column("Services")

        for professional in config.professionals:
            step = professional.slot_interval_minutes or config.defaults.slot_interval_minutes
            services = ", ".join(
                f"{s.name} ({s.duration_minutes} min)" for s in professional.services
            )
            table.add_row(professional.id, professional.name, str(step), services or "-")

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def availability(
    professional: str = typer.Argument(..., help="Professional id or name"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Show the weekly working windows of a professional.
    """
    try:
        config = _load_config(config_file)
        pro = config.resolve_professional(professional)

        table = Table(
            title=f"Weekly availability · {pro.name}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Day", style="bold")
        table.add_column("Windows")

        for weekday in Weekday:
            schedule = pro.availability.schedule_for(weekday)
            windows = schedule.active_windows()
            if windows:
                table.add_row(weekday.value, ", ".join(str(w) for w in windows))
            else:
                table.add_row(weekday.value, "[dim]closed[/dim]")

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
