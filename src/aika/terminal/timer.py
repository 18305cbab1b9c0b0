# SPDX-License-Identifier: MIT

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.live import Live

from aika.model.time_entry import TimeEntry
from aika.service.reconcile import EntryReconciliationController
from aika.service.session import current_user
from aika.terminal.runner import run_with_controller
from aika.view.header import header
from aika.view.time_entry import (
    active_timer_report,
    single_time_entry_report,
    timer_panel,
)


def start(description: str) -> None:
    """
    start a timer for what you are working on
    """

    async def operation(controller: EntryReconciliationController) -> TimeEntry:
        return await controller.start_timer(description)

    entry = run_with_controller(operation)
    single_time_entry_report(
        entry["scope_owner"], entry, current_user(), title="started timer"
    )


def stop() -> None:
    """
    if there is a running timer, stop it
    """

    async def operation(
        controller: EntryReconciliationController,
    ) -> tuple[str, Optional[TimeEntry]]:
        entry_id = await controller.stop_timer()
        if entry_id is None:
            return controller.scope_owner, None
        stopped = [entry for entry in controller.entries if entry["id"] == entry_id]
        return controller.scope_owner, stopped[0] if stopped else None

    scope_owner, entry = run_with_controller(operation)
    if entry is None:
        print("No timer running")
        return
    single_time_entry_report(scope_owner, entry, current_user(), title="stopped timer")


def status(
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="keep counting until interrupted"),
    ] = False,
    seconds: Annotated[
        Optional[float],
        typer.Option("--seconds", "-s", help="stop watching after this many seconds"),
    ] = None,
) -> None:
    """
    show the running timer
    """

    async def operation(controller: EntryReconciliationController) -> None:
        entry = controller.get_current_entry()
        if not watch or entry is None:
            active_timer_report(controller.scope_owner, entry, controller.elapsed)
            return

        header(controller.scope_owner, "active timer")
        with Live(
            timer_panel(controller.description, controller.elapsed),
            console=Console(),
            refresh_per_second=4,
        ) as live:
            unsubscribe = controller.engine.subscribe(
                lambda elapsed: live.update(timer_panel(controller.description, elapsed))
            )
            try:
                if seconds is None:
                    await asyncio.Event().wait()
                else:
                    await asyncio.sleep(seconds)
            finally:
                unsubscribe()

    try:
        run_with_controller(operation)
    except KeyboardInterrupt:
        raise typer.Exit(0)
