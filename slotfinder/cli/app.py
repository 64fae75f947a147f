"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import SlotFinderConfig, get_default_config_path
from ..domain.exceptions import SlotFinderError
from ..domain.shift_merger import merge_shifts
from ..services.slot_finder import find_available_slots, validate_configuration

app = typer.Typer(
    name="slotfinder",
    help="Find bookable appointment slots from a weekly availability schedule",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = {
    1: "Montag",
    2: "Dienstag",
    3: "Mittwoch",
    4: "Donnerstag",
    5: "Freitag",
    6: "Samstag",
    7: "Sonntag"
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> SlotFinderConfig:
    config_path = config_file or get_default_config_path()
    return SlotFinderConfig.load_from_yaml(config_path)


def _determine_time_range(
    *,
    tz: str,
    now,
    this_week: bool,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the desired time window based on shortcut flags or explicit dates.
    Returns (start_date, end_date).
    """
    if this_week and next_week:
        console.print("[red]Fehler: --this-week und --next-week können nicht gleichzeitig verwendet werden.[/red]")
        raise typer.Exit(1)

    local_now = now.in_timezone(tz)

    if this_week:
        return local_now, local_now.end_of("week")

    if next_week:
        next_monday = local_now.next(pendulum.MONDAY).start_of("day")
        return next_monday, next_monday.add(days=7)

    if start_option:
        try:
            start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
        except ValueError as e:
            console.print(f"[red]Fehler beim Parsen des Startdatums: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        start_date = local_now.start_of("day")

    if end_option:
        try:
            end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz=tz).add(days=1).start_of("day")
        except ValueError as e:
            console.print(f"[red]Fehler beim Parsen des Enddatums: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        end_date = start_date.add(days=7)

    return start_date, end_date


def _parse_now(now_option: Optional[str], tz: str):
    if not now_option:
        return pendulum.now(tz)
    try:
        parsed = pendulum.parse(now_option, tz=tz)
    except ValueError as e:
        console.print(f"[red]Fehler beim Parsen von --now: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    if not isinstance(parsed, pendulum.DateTime):
        console.print(f"[red]Fehler: --now muss ein Zeitpunkt sein, nicht {now_option!r}[/red]")
        raise typer.Exit(1)
    return parsed


@app.command()
def find(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./slotfinder.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date, inclusive (YYYY-MM-DD)")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Suche von jetzt bis Ende der aktuellen Woche.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Suche in der kommenden Woche (Montag–Sonntag).")] = False,
    now: Annotated[Optional[str], typer.Option("--now", help="Fixed current time (ISO 8601), for reproducible results")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """
    Find bookable slots.

    Examples:

        # Next 7 days
        slotfinder find

        # Quick time shortcuts
        slotfinder find --this-week
        slotfinder find --next-week

        # Custom date range
        slotfinder find --start 2024-01-15 --end 2024-01-19
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone
        current = _parse_now(now, tz)

        time_start, time_end = _determine_time_range(
            tz=tz,
            now=current,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        console.print("\n" + "="*60)
        console.print("[bold cyan]🗓️  Slotfinder - Freie Termine finden[/bold cyan]")
        console.print("="*60 + "\n")
        console.print(f"   Zeitraum: {time_start.format('DD.MM.YYYY HH:mm')} - {time_end.format('DD.MM.YYYY HH:mm')}")
        console.print(f"   Termindauer: {config.slot_duration_minutes} Minuten")
        console.print()

        slots = find_available_slots(config, time_start, time_end, now=current)

        if not slots:
            console.print(
                "[yellow]⚠ Keine freien Termine gefunden.[/yellow]\n"
                "Versuchen Sie einen längeren Zeitraum."
            )
        else:
            console.print(f"[bold green]✓ {len(slots)} freie(r) Termin(e) gefunden:[/bold green]\n")
            for slot in slots:
                console.print(f"  {slot.format_display()}")

        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except SlotFinderError as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def validate(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Validate the configuration file and show the merged weekly schedule.
    """
    try:
        config = _load_config(config_file)
        validate_configuration(config)
    except FileNotFoundError as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    except SlotFinderError as e:
        console.print(f"[bold red]✗ Ungültige Konfiguration:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(
        title="Wöchentliche Verfügbarkeit",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Wochentag", style="bold yellow")
    table.add_column("Schichten", style="dim")

    for availability in sorted(config.weekday_availabilities(), key=lambda a: a.iso_weekday):
        shifts = merge_shifts(availability.shifts)
        table.add_row(
            WEEKDAY_NAMES[availability.iso_weekday],
            ", ".join(str(shift) for shift in shifts) or "-"
        )

    console.print()
    console.print(table)
    console.print(f"\n[green]✓ Konfiguration gültig[/green] ({len(config.unavailable_periods)} Sperrzeit(en), Zeitzone {config.timezone})\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
