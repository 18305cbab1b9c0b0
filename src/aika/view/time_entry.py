# SPDX-License-Identifier: MIT

from typing import Callable, Optional, TypeAlias

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from aika.model.time_entry import TimeEntry
from aika.repository.id_map import ID_MAP_REPO
from aika.time import datetime_to_display_str, elapsed_to_str, entry_duration_to_str
from aika.view.header import header

ColumnRenderer: TypeAlias = Callable[[TimeEntry, str], str]


def creator_name(entry: TimeEntry, current_user: str) -> str:
    if entry["created_by"] == current_user:
        return "You"
    return entry["created_by"]


def synthetic_id(entry: TimeEntry) -> str:
    return str(ID_MAP_REPO.associate_id("time_entries", entry["id"]))


COLUMNS: dict[str, ColumnRenderer] = {
    "id": lambda entry, _: synthetic_id(entry),
    "description": lambda entry, _: entry["description"],
    "created_by": creator_name,
    "start": lambda entry, _: datetime_to_display_str(entry["start_time"]),
    "end": lambda entry, _: datetime_to_display_str(entry["end_time"]),
    "duration": lambda entry, _: entry_duration_to_str(
        entry["start_time"], entry["end_time"]
    ),
}


def time_entries_report(
    scope_owner: str,
    report_name: str,
    time_entries: list[TimeEntry],
    current_user: str,
    columns: list[str] = ["id", "description", "start", "end", "duration"],
) -> None:
    header(scope_owner, report_name)

    console = Console()
    if len(time_entries) == 0:
        console.print("[italic]No work logs yet. Start tracking your time![/italic]")
        return

    table = Table(box=box.SIMPLE)
    for column in columns:
        table.add_column(column)
    for entry in time_entries:
        # The running entry is underlined
        style = "underline" if entry["end_time"] is None else None
        table.add_row(
            *(COLUMNS[column](entry, current_user) for column in columns),
            style=style,
        )
    console.print(table)


def single_time_entry_report(
    scope_owner: str,
    time_entry: TimeEntry,
    current_user: str,
    title: str = "time entry",
) -> None:
    header(scope_owner, title)

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    for column in ["id", "description", "start", "end", "duration"]:
        table.add_row(column, COLUMNS[column](time_entry, current_user))
    table.add_row("created by", creator_name(time_entry, current_user))
    table.add_row("created", datetime_to_display_str(time_entry["created_at"]))

    Console().print(table)


def timer_panel(description: str, elapsed: int) -> Panel:
    text = Text()
    text.append(f"{description}\n", style="bold")
    text.append(elapsed_to_str(elapsed), style="bold bright_white")
    return Panel(text, title="running", border_style="dark_orange", expand=False)


def active_timer_report(
    scope_owner: str,
    time_entry: Optional[TimeEntry],
    elapsed: int,
) -> None:
    header(scope_owner, "active timer")

    console = Console()
    if time_entry is None:
        console.print("no active timer")
        return
    console.print(timer_panel(time_entry["description"], elapsed))
