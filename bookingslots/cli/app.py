"""
Main CLI application using Typer.
"""

import asyncio
import logging
from datetime import date as Date
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.api_client import SchedulingAPIClient
from ..adapters.mock_api_client import MockSchedulingClient
from ..config import AppConfig, get_default_config_path
from ..domain.booking_list import BookingTab
from ..domain.conflict_filter import ConflictFilter
from ..domain.days import DAY_LABELS, TIMEZONE_LABELS, NativeDay, native_day_of
from ..domain.exceptions import SchedulingError
from ..domain.models import AvailabilitySet
from ..domain.schedule import schedule_from_availability, summarize
from ..domain.slot_generator import SlotGenerator, parse_clock
from ..services.booking_manager import BookingManager
from ..services.slot_finder import SlotFinderService

app = typer.Typer(
    name="bookingslots",
    help="Look up bookable time slots of scheduling event types",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data instead of the API.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the config file.

    An explicit ``--config`` path must exist; without one, built-in defaults
    are used when no config.yaml is found.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if not default_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(default_path)


def _build_client(config: AppConfig, mock: bool):
    if mock:
        return MockSchedulingClient()
    return SchedulingAPIClient(base_url=config.api_url, timeout=config.request_timeout)


def _build_manager(config: AppConfig, mock: bool) -> BookingManager:
    return BookingManager(client=_build_client(config, mock), timezone=config.timezone)


def _build_service(config: AppConfig, mock: bool) -> SlotFinderService:
    defaults = config.defaults
    return SlotFinderService(
        client=_build_client(config, mock),
        slot_generator=SlotGenerator(
            booking_buffer_minutes=defaults.booking_buffer_minutes,
            fallback_duration_minutes=defaults.fallback_duration_minutes,
        ),
        conflict_filter=ConflictFilter(
            timezone=config.timezone,
            fallback_duration_minutes=defaults.fallback_duration_minutes,
        ),
        timezone=config.timezone,
        default_duration_minutes=defaults.duration_minutes,
        booking_window_days=defaults.booking_window_days,
    )


def _parse_date(value: Optional[str], tz: str) -> Date:
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_clock_option(value: str) -> str:
    """Normalise a user-entered clock such as ``9:00`` to ``HH:MM``."""
    parsed = parse_clock(value.strip())
    if parsed is None or parsed[0] == 24:
        raise ValueError(f"Could not parse time '{value}', expected HH:MM")
    hour, minute = parsed
    return f"{hour:02d}:{minute:02d}"


def _parse_range(value: str) -> Tuple[str, str]:
    start, separator, end = value.partition("-")
    if not separator:
        raise ValueError(f"Time range must look like HH:MM-HH:MM, got '{value}'")
    return _parse_clock_option(start), _parse_clock_option(end)


def _parse_day(value: str) -> NativeDay:
    wanted = value.strip().lower()
    for day, label in DAY_LABELS.items():
        if wanted in (label.lower(), label[:3].lower()):
            return day
    raise ValueError(f"Unknown weekday: {value}")


def _availability_ref(value: str) -> Optional[str]:
    return None if value == "default" else value


def _print_schedule(availability: AvailabilitySet) -> None:
    lines = summarize(schedule_from_availability(availability))
    console.print(Panel.fit(
        "\n".join(lines),
        title=f"{availability.name or availability.id} · {availability.timezone}"
    ))


def _format_instant(value: Optional[str], tz: str) -> str:
    if not value:
        return "-"
    try:
        parsed = pendulum.parse(value, tz=tz)
    except ValueError:
        return value
    if not isinstance(parsed, DateTime):
        return value
    return parsed.in_timezone(tz).format("YYYY-MM-DD HH:mm")


def format_slot(slot: DateTime, duration_minutes: int, time_format: str = "12h") -> str:
    """
    Format a slot for display.

    Format: ``9:00 am – 9:30 am`` (12h) or ``09:00 – 09:30`` (24h)
    """
    end = slot.add(minutes=duration_minutes)
    pattern = "h:mm A" if time_format == "12h" else "HH:mm"
    return f"{slot.format(pattern).lower()} – {end.format(pattern).lower()}"


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


@app.command()
def slots(
    slug: Annotated[str, typer.Argument(help="Event type slug, e.g. '30min'")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    time_format: Annotated[str, typer.Option("--format", "-f", help="Time format: 12h or 24h")] = "12h",
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List the bookable slots of an event type on one date.

    Examples:

        bookingslots slots 30min --date 2026-11-02

        bookingslots slots 30min --mock --format 24h
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        selected = _parse_date(date, config.timezone)

        if mock:
            console.print("[yellow]⚠  MOCK MODE: using bundled test data[/yellow]\n")

        async def _lookup():
            event_type = await service.get_event_type(slug)
            result = await service.find_slots(event_type=event_type, date=selected)
            return event_type, result

        event_type, result = asyncio.run(_lookup())
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    duration = service.duration_for(event_type)
    weekday = DAY_LABELS[native_day_of(selected)]
    console.print(
        f"[bold cyan]{event_type.name or event_type.slug}[/bold cyan] "
        f"({duration} min) · {weekday}, {selected.isoformat()} · "
        f"{TIMEZONE_LABELS.get(config.timezone, config.timezone)}\n"
    )

    for skipped in result.skipped:
        console.print(f"[yellow]Skipped {skipped.kind}: {skipped.reason}[/yellow]")

    if not result.slots:
        console.print("[yellow]No available time slots for this date.[/yellow]\n")
        return

    console.print(f"[bold green]✓ {len(result.slots)} available slot(s):[/bold green]\n")
    for slot in result.slots:
        console.print(f"  {format_slot(slot, duration, time_format)}")
    console.print()


@app.command()
def days(
    slug: Annotated[str, typer.Argument(help="Event type slug")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List the dates in the booking window that have availability.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)

        async def _lookup():
            event_type = await service.get_event_type(slug)
            return event_type, await service.resolve_availability(event_type)

        event_type, availability = asyncio.run(_lookup())
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    today = pendulum.today(config.timezone).date()
    dates = service.bookable_dates(availability, today)

    if not dates:
        console.print("[yellow]No availability in the booking window.[/yellow]")
        return

    table = Table(
        title=f"Bookable dates · {event_type.name or event_type.slug}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Weekday", style="dim")

    for day in dates:
        table.add_row(day.isoformat(), DAY_LABELS[native_day_of(day)])

    console.print()
    console.print(table)
    console.print()


@app.command()
def schedule(
    availability_id: Annotated[str, typer.Argument(help="Availability id, or 'default'")] = "default",
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show a weekly availability summary.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)

        if availability_id == "default":
            availability = asyncio.run(service.get_availability(None))
        else:
            availability = asyncio.run(service.get_availability(availability_id))
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    if availability is None:
        console.print("[yellow]No default availability configured.[/yellow]")
        return

    _print_schedule(availability)


@app.command()
def hours(
    day: Annotated[str, typer.Argument(help="Weekday, e.g. 'monday' or 'mon'")],
    time_ranges: Annotated[
        Optional[List[str]],
        typer.Option("--range", "-r", help="Time range HH:MM-HH:MM. Repeat for split shifts.")
    ] = None,
    off: Annotated[bool, typer.Option("--off", help="Mark the day as unavailable.")] = False,
    availability_id: Annotated[str, typer.Option("--availability", "-a", help="Availability id, or 'default'")] = "default",
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Set the hours of one weekday in an availability set.

    Examples:

        bookingslots hours monday --range 09:00-12:00 --range 13:00-17:00

        bookingslots hours saturday --off --availability 2
    """
    _configure_logging(verbose)

    if off == bool(time_ranges):
        _fail("Give either one or more --range options or --off")

    try:
        config = _load_config(config_file)
        manager = _build_manager(config, mock)
        weekday = _parse_day(day)
        ranges = [] if off else [_parse_range(value) for value in time_ranges]

        saved = asyncio.run(manager.set_day_hours(_availability_ref(availability_id), weekday, ranges))
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(f"[bold green]✓ Saved {DAY_LABELS[weekday]}[/bold green]\n")
    _print_schedule(saved)


@app.command("create-availability")
def create_availability(
    name: Annotated[str, typer.Argument(help="Name of the new availability set")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-z", help="IANA time zone. Defaults to the configured one.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Create an availability set with the default Monday to Friday hours.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        manager = _build_manager(config, mock)
        created = asyncio.run(manager.create_availability(name, timezone))
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(f"[bold green]✓ Created availability {created.id}[/bold green]\n")
    _print_schedule(created)


@app.command()
def bookings(
    status: Annotated[BookingTab, typer.Option("--status", "-s", help="Which bookings to list")] = BookingTab.UPCOMING,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List upcoming, past or cancelled bookings.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        manager = _build_manager(config, mock)
        found = asyncio.run(manager.list_bookings(status))
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    if not found:
        console.print(f"[yellow]No {status.value} bookings.[/yellow]")
        return

    table = Table(
        title=f"{status.value.capitalize()} bookings",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="dim")
    table.add_column("Start", style="bold yellow")
    table.add_column("Name")
    table.add_column("Email")

    for booking in found:
        table.add_row(
            str(booking.id),
            _format_instant(booking.start_time, config.timezone),
            booking.name,
            booking.client_email,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def cancel(
    booking_id: Annotated[str, typer.Argument(help="Booking id")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Cancel a booking.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        manager = _build_manager(config, mock)
        booking = asyncio.run(manager.cancel_booking(booking_id))
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(f"[bold green]✓ Booking {booking.id} cancelled[/bold green]")


@app.command()
def book(
    slug: Annotated[str, typer.Argument(help="Event type slug")],
    date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Option("--time", "-t", help="Slot start (HH:MM)")],
    name: Annotated[str, typer.Option("--name", help="Attendee name")],
    email: Annotated[str, typer.Option("--email", help="Attendee email")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Additional notes")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Book one of the available slots.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        selected = _parse_date(date, config.timezone)
        clock = _parse_clock_option(start)

        async def _book():
            event_type = await service.get_event_type(slug)
            result = await service.find_slots(event_type=event_type, date=selected)
            wanted = next((s for s in result.slots if s.format("HH:mm") == clock), None)
            if wanted is None:
                raise SchedulingError(f"{clock} on {selected.isoformat()} is not an available slot")
            return await service.book_slot(
                event_type=event_type,
                slot=wanted,
                name=name,
                email=email,
                notes=notes,
            )

        booking = asyncio.run(_book())
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(Panel.fit(
        f"[bold green]✓ Booking confirmed[/bold green]\n\n"
        f"[bold]Id:[/bold] {booking.id}\n"
        f"[bold]Start:[/bold] {booking.start_time}\n"
        f"[bold]End:[/bold] {booking.end_time}",
        title="Booking"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
