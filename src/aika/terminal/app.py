# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from aika import state as app_state
from aika.log import configure_logging
from aika.terminal import configuration, entry, timer
from aika.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="Aika - work timer in the CLI",
    no_args_is_help=True,
)
app.command(name="start, st", no_args_is_help=True)(timer.start)
app.command(name="stop, sp")(timer.stop)
app.command(name="status, s")(timer.status)
app.add_typer(entry.app, name="entry, e")
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    scope: Annotated[
        Optional[str],
        typer.Option(
            "--scope",
            "-sc",
            help="user or organization whose entries to use",
        ),
    ] = None,
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    clear_ids: Annotated[
        Optional[bool],
        typer.Option(
            "--clear-ids/--no-clear-ids",
            help="Renumber ids when listing entries",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-vb", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """
    Aika - work timer in the CLI

    Global options that apply to all commands.
    """
    if scope is not None:
        app_state.set_scope_owner(scope)
    if no_header:
        app_state.set_show_header(False)
    if clear_ids is not None:
        app_state.set_clear_ids(clear_ids)
    if verbose:
        configure_logging("DEBUG")


def run() -> None:
    app()
