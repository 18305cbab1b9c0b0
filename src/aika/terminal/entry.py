# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from aika import state as app_state
from aika.error import ValidationError
from aika.model.time_entry import EntityId, TimeEntry, TimeEntryUpdate
from aika.repository.id_map import ID_MAP_REPO
from aika.service import datetime_text
from aika.service.reconcile import EntryReconciliationController
from aika.service.session import current_user
from aika.terminal.custom_typer import AliasedTyperGroup
from aika.terminal.parse import apply_edit_text, parse_id_list, validate_edit_text
from aika.terminal.runner import run_with_controller
from aika.view.time_entry import single_time_entry_report, time_entries_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

EDIT_TEXT_HELP = "valid input: MM/DD/YYYY h:mm AM/PM, e.g. 03/05/2024 3:04 PM"


def _resolve_ids(id_param: str) -> list[EntityId]:
    real_ids: list[EntityId] = []
    for synthetic_id in parse_id_list(id_param):
        try:
            real_ids.append(ID_MAP_REPO.get_real_id("time_entries", synthetic_id))
        except KeyError:
            raise typer.BadParameter(
                f"Unknown id {synthetic_id}, run 'aika entry list' to see ids"
            )
    return real_ids


def _find_entry(
    controller: EntryReconciliationController, id: EntityId
) -> TimeEntry:
    for entry in controller.entries:
        if entry["id"] == id:
            return entry
    raise ValidationError(
        f"Time entry {id} does not belong to {controller.scope_owner}"
    )


@app.command("list, ls")
def list_entries() -> None:
    """
    list the time entries of the active scope, newest first
    """

    async def operation(
        controller: EntryReconciliationController,
    ) -> tuple[str, list[TimeEntry]]:
        return controller.scope_owner, controller.entries

    scope_owner, entries = run_with_controller(operation)
    if app_state.get_clear_ids():
        ID_MAP_REPO.clear_ids()
    time_entries_report(
        scope_owner,
        "work logs",
        entries,
        current_user(),
        columns=["id", "description", "created_by", "start", "end", "duration"],
    )


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: str,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    start: Annotated[
        Optional[str],
        typer.Option(
            "--start", "-s", callback=validate_edit_text, help=EDIT_TEXT_HELP
        ),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", "-e", callback=validate_edit_text, help=EDIT_TEXT_HELP),
    ] = None,
    remove_end: Annotated[
        bool, typer.Option("--remove-end", "-re", help="reopen the entry")
    ] = False,
) -> None:
    """
    modify one or more time entries
    """
    real_ids = _resolve_ids(id)

    async def operation(
        controller: EntryReconciliationController,
    ) -> tuple[str, list[TimeEntry]]:
        # Every id is checked before the first update is written
        entries = [_find_entry(controller, real_id) for real_id in real_ids]
        for real_id, entry in zip(real_ids, entries):
            fields: TimeEntryUpdate = {}
            if description is not None:
                fields["description"] = description
            start_time = apply_edit_text(start, entry["start_time"])
            if start_time is not None:
                fields["start_time"] = start_time
            end_time = apply_edit_text(
                end,
                entry["end_time"]
                if entry["end_time"] is not None
                else entry["start_time"],
            )
            if end_time is not None:
                fields["end_time"] = end_time
            if remove_end:
                fields["end_time"] = None

            if fields:
                await controller.update_entry(real_id, fields)

        modified = [_find_entry(controller, real_id) for real_id in real_ids]
        return controller.scope_owner, modified

    scope_owner, modified_entries = run_with_controller(operation)
    for entry in modified_entries:
        single_time_entry_report(scope_owner, entry, current_user())


@app.command("edit, ed", no_args_is_help=True)
def edit(id: int) -> None:
    """
    edit a time entry interactively
    """
    real_id = _resolve_ids(str(id))[0]
    console = Console()

    async def operation(
        controller: EntryReconciliationController,
    ) -> tuple[str, TimeEntry]:
        entry = _find_entry(controller, real_id)

        fields: TimeEntryUpdate = {}
        fields["description"] = typer.prompt("Description", default=entry["description"])

        start_text = typer.prompt(
            "Start time", default=datetime_text.format(entry["start_time"])
        )
        if not datetime_text.is_well_formed(start_text):
            console.print("[yellow]Could not read start time, keeping it.[/yellow]")
        fields["start_time"] = datetime_text.parse(start_text, entry["start_time"])

        # Open entries keep running, only closed ones get an end time prompt
        if entry["end_time"] is not None:
            end_text = typer.prompt(
                "End time", default=datetime_text.format(entry["end_time"])
            )
            if not datetime_text.is_well_formed(end_text):
                console.print("[yellow]Could not read end time, keeping it.[/yellow]")
            fields["end_time"] = datetime_text.parse(end_text, entry["end_time"])

        await controller.update_entry(real_id, fields)
        return controller.scope_owner, _find_entry(controller, real_id)

    scope_owner, entry = run_with_controller(operation)
    single_time_entry_report(scope_owner, entry, current_user(), title="edited entry")


@app.command("delete, d", no_args_is_help=True)
def delete(id: str) -> None:
    """
    delete one or more time entries
    """
    real_ids = _resolve_ids(id)

    async def operation(controller: EntryReconciliationController) -> list[TimeEntry]:
        deleted = [_find_entry(controller, real_id) for real_id in real_ids]
        for real_id in real_ids:
            await controller.delete_entry(real_id)
        return deleted

    deleted_entries = run_with_controller(operation)
    console = Console()
    for entry in deleted_entries:
        console.print(f"[red]deleted[/red] {entry['description']}")
