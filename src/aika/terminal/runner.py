# SPDX-License-Identifier: MIT

import asyncio
from typing import Awaitable, Callable, TypeVar

import typer

from aika.error import AikaError
from aika.service.reconcile import EntryReconciliationController
from aika.service.session import build_controller

T = TypeVar("T")


def run_with_controller(
    operation: Callable[[EntryReconciliationController], Awaitable[T]],
) -> T:
    """
    Reconcile a fresh controller for the active scope, then run `operation`.

    Errors raised by the controller are reported on stderr and end the
    command with exit code 1.
    """

    async def run() -> T:
        async with build_controller() as controller:
            await controller.reconcile()
            return await operation(controller)

    try:
        return asyncio.run(run())
    except AikaError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
