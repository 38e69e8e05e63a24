"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pendulum import DateTime
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..adapters import HttpStateStore, JsonFileStateStore, LocalCacheStore
from ..config import AppConfig, get_default_config_path
from ..domain.calendar import current_week_start, resolve_week_start, week_label
from ..domain.exceptions import MeetingPlannerError
from ..domain.models import SelectionState, Slot
from ..domain.selection import density_rgb, serialize
from ..domain.slot_catalog import SlotCatalog
from ..services.planner import MeetingPlannerService, StateStoreProtocol

app = typer.Typer(
    name="meetingplanner",
    help="Mark weekly availability on a shared day × hour grid",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
WeekOption = Annotated[
    Optional[str],
    typer.Option("--week", "-w", help="Week number (e.g. 6) or a date in it (e.g. 3.2.2025)")
]
MeetingOption = Annotated[
    Optional[str],
    typer.Option("--meeting", "-m", help="Meeting ID. Defaults to meeting_id from the config")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Weekly meeting availability planner.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the explicit config file, or the default one when it exists.

    Without an explicit --config and without a config.yaml the built-in
    defaults are used.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _build_store(config: AppConfig) -> StateStoreProtocol:
    store_config = config.store

    if store_config.backend == "http":
        return HttpStateStore(
            base_url=store_config.base_url,
            timeout=store_config.timeout_seconds
        )
    if store_config.backend == "cache":
        return LocalCacheStore(cache_dir=store_config.cache_dir, per_meeting=True)
    return JsonFileStateStore(data_file=store_config.data_file)


def _resolve_week(week: Optional[str]) -> DateTime:
    """
    Week start for the --week option.

    Unparseable input keeps the current week and prints a warning.
    """
    if week is None:
        return current_week_start()

    resolved = resolve_week_start(week)
    if resolved is None:
        console.print(f"[yellow]Warning: '{week}' is not a valid week, using the current week[/yellow]")
        return current_week_start()
    return resolved


def _parse_day(value: str, config: AppConfig) -> int:
    """Day by configured short name (e.g. "E") or number 0-6."""
    for index, name in enumerate(config.day_names):
        if name.lower() == value.strip().lower():
            return index

    if value.strip().isdigit() and 0 <= int(value) <= 6:
        return int(value)

    raise ValueError(
        f"Unknown day: '{value}'. Use one of {', '.join(config.day_names)} or 0-6."
    )


def _parse_slot_ref(value: str, config: AppConfig, catalog: SlotCatalog) -> int:
    """
    Catalog index from "DAY:HOUR" (e.g. "T:14") or a plain catalog index.
    """
    if ":" in value:
        day_part, hour_part = value.split(":", 1)
        if not hour_part.strip().isdigit():
            raise ValueError(f"Invalid hour in slot '{value}'")
        return catalog.index_of(_parse_day(day_part, config), int(hour_part))

    if value.strip().isdigit():
        return int(value)

    raise ValueError(f"Invalid slot '{value}'. Use DAY:HOUR or a slot index.")


def _render_grid(
    config: AppConfig,
    catalog: SlotCatalog,
    state: SelectionState,
    week_start: DateTime,
    day: Optional[int] = None
) -> Table:
    """Participants as rows, slots as columns, cells shaded by density."""
    slots = [slot for slot in catalog.build_slots() if day is None or slot.day == day]

    table = Table(
        title=week_label(week_start),
        show_header=True,
        header_style="bold cyan",
        pad_edge=False
    )
    table.add_column("Name", style="bold yellow", no_wrap=True)

    for slot in slots:
        if catalog.is_first_hour_of_day(slot):
            header = f"{config.day_names[slot.day]}\n{slot.hour_label}"
            style = "bold"
        else:
            header = f"\n{slot.hour_label}"
            style = None
        table.add_column(header, justify="center", no_wrap=True, min_width=2, style=style)

    for participant, name in enumerate(config.participants):
        cells = []
        for slot in slots:
            members = state.members(slot)
            if participant in members:
                cells.append(Text("■", style=f"on {density_rgb(len(members))}"))
            else:
                cells.append(Text("·", style="dim"))
        table.add_row(name, *cells)

    table.add_section()
    table.add_row(
        "Σ",
        *[str(len(state.members(slot))) if state.members(slot) else "" for slot in slots]
    )
    return table


@app.command()
def week(
    text: Annotated[Optional[str], typer.Argument(help="Week number or date, e.g. '6' or '3.2.2025'")] = None,
):
    """
    Show the label of a week (the current week without input).
    """
    week_start = _resolve_week(text)
    console.print(week_label(week_start))


@app.command()
def show(
    config_file: ConfigOption = None,
    week: WeekOption = None,
    meeting: MeetingOption = None,
    day: Annotated[Optional[str], typer.Option("--day", "-d", help="Only show one day (name or 0-6)")] = None,
):
    """
    Show the availability grid of a week.
    """
    try:
        config = _load_config(config_file)
        catalog = config.build_catalog()
        service = MeetingPlannerService(store=_build_store(config), catalog=catalog)
        week_start = _resolve_week(week)
        day_index = _parse_day(day, config) if day is not None else None

        state = service.load_state(
            meeting_id=meeting or config.meeting_id,
            week_start=week_start
        )

        console.print()
        console.print(_render_grid(config, catalog, state, week_start, day=day_index))
        console.print(
            f"[dim]{len(state.participants())} of {len(config.participants)} "
            f"participant(s) marked time this week[/dim]"
        )
        console.print()

    except (FileNotFoundError, MeetingPlannerError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def toggle(
    person: Annotated[str, typer.Argument(help="Participant name or number")],
    day: Annotated[str, typer.Argument(help="Day name (e.g. E) or 0-6")],
    hour: Annotated[int, typer.Argument(help="Hour of the slot")],
    config_file: ConfigOption = None,
    week: WeekOption = None,
    meeting: MeetingOption = None,
):
    """
    Toggle one participant's availability for one slot.
    """
    try:
        config = _load_config(config_file)
        service = MeetingPlannerService(store=_build_store(config), catalog=config.build_catalog())
        week_start = _resolve_week(week)
        participant = config.resolve_participant(person)
        day_index = _parse_day(day, config)

        state = service.toggle_slot(
            meeting_id=meeting or config.meeting_id,
            week_start=week_start,
            day=day_index,
            hour=hour,
            participant=participant
        )

        slot_label = f"{config.day_names[day_index]} {hour}:00"
        members = state.members(Slot(day=day_index, hour=hour))
        if participant in members:
            console.print(f"[green]✓ {config.participants[participant]} available: {slot_label}[/green]")
        else:
            console.print(f"[yellow]⊘ {config.participants[participant]} not available: {slot_label}[/yellow]")
        console.print(f"   {len(members)} participant(s) in this slot")

    except (FileNotFoundError, MeetingPlannerError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def paint(
    person: Annotated[str, typer.Argument(help="Participant name or number")],
    start: Annotated[str, typer.Argument(help="First slot, DAY:HOUR (e.g. T:12) or slot index")],
    end: Annotated[str, typer.Argument(help="Last slot, DAY:HOUR or slot index")],
    select: Annotated[bool, typer.Option("--select", help="Select every slot in the range.")] = False,
    clear: Annotated[bool, typer.Option("--clear", help="Clear every slot in the range.")] = False,
    config_file: ConfigOption = None,
    week: WeekOption = None,
    meeting: MeetingOption = None,
):
    """
    Select or clear a participant on a run of consecutive slots.

    Without --select or --clear the range takes the opposite of the first
    slot's current state, like dragging across the grid.
    """
    if select and clear:
        console.print("[red]Error: --select and --clear cannot be used together.[/red]")
        raise typer.Exit(1)

    try:
        config = _load_config(config_file)
        catalog = config.build_catalog()
        service = MeetingPlannerService(store=_build_store(config), catalog=catalog)
        week_start = _resolve_week(week)
        participant = config.resolve_participant(person)
        meeting_id = meeting or config.meeting_id

        index_from = _parse_slot_ref(start, config, catalog)
        index_to = _parse_slot_ref(end, config, catalog)

        if select or clear:
            paint_value = select
        else:
            paint_value = service.start_paint(
                meeting_id=meeting_id,
                week_start=week_start,
                participant=participant,
                slot=catalog.slot_at(index_from)
            )

        service.paint_range(
            meeting_id=meeting_id,
            week_start=week_start,
            participant=participant,
            index_from=index_from,
            index_to=index_to,
            selected=paint_value
        )

        count = abs(index_to - index_from) + 1
        verb = "selected" if paint_value else "cleared"
        console.print(f"[green]✓ {count} slot(s) {verb} for {config.participants[participant]}[/green]")

    except (FileNotFoundError, MeetingPlannerError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def export(
    config_file: ConfigOption = None,
    week: WeekOption = None,
    meeting: MeetingOption = None,
):
    """
    Print the stored state of a week as JSON.
    """
    try:
        config = _load_config(config_file)
        service = MeetingPlannerService(store=_build_store(config), catalog=config.build_catalog())
        state = service.load_state(
            meeting_id=meeting or config.meeting_id,
            week_start=_resolve_week(week)
        )
        typer.echo(json.dumps(serialize(state), indent=2))

    except (FileNotFoundError, MeetingPlannerError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def participants(
    config_file: ConfigOption = None,
):
    """
    List all configured participants.
    """
    try:
        config = _load_config(config_file)

        table = Table(
            title="Participants",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("No.", style="dim", justify="right")
        table.add_column("Name", style="bold yellow")

        for number, name in enumerate(config.participants, 1):
            table.add_row(str(number), name)

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
    console.print(f"\n[bold cyan]meetingplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
