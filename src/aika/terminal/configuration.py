# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from aika import configuration
from aika.repository.configuration import CONFIGURATION_REPO
from aika.service.session import active_scope_owner, current_user
from aika.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def validate_log_level(log_level: Optional[str]) -> Optional[str]:
    if log_level is None:
        return None
    if not isinstance(logging.getLevelName(log_level.upper()), int):
        raise typer.BadParameter(
            "Log level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return log_level.upper()


def validate_tick_interval(tick_interval_ms: Optional[int]) -> Optional[int]:
    if tick_interval_ms is None:
        return None
    if tick_interval_ms < 10:
        raise typer.BadParameter("Tick interval must be at least 10 ms")
    return tick_interval_ms


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("user", config["user"] or f"{current_user()} (login name)")
    table.add_row("scope_owner", config["scope_owner"] or "None")
    table.add_row("active scope", active_scope_owner())
    table.add_row("tick_interval_ms", str(config["tick_interval_ms"]))
    table.add_row("log_level", config["log_level"])
    table.add_row(
        "show_header", "✓ Enabled" if config["show_header"] else "✗ Disabled"
    )
    table.add_row(
        "clear_ids_on_view",
        "✓ Enabled" if config["clear_ids_on_view"] else "✗ Disabled",
    )
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("config_path", str(configuration.APP_CONFIG_PATH))

    console.print(table)


@app.command("set", no_args_is_help=True)
def set_config(
    user: Annotated[
        Optional[str], typer.Option("--user", "-u", help="identity recorded on new entries")
    ] = None,
    remove_user: Annotated[bool, typer.Option("--remove-user", "-ru")] = False,
    scope_owner: Annotated[
        Optional[str],
        typer.Option("--scope-owner", "-so", help="user or organization to track for"),
    ] = None,
    remove_scope_owner: Annotated[
        bool, typer.Option("--remove-scope-owner", "-rso")
    ] = False,
    tick_interval_ms: Annotated[
        Optional[int],
        typer.Option("--tick-interval-ms", "-ti", callback=validate_tick_interval),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", "-ll", callback=validate_log_level),
    ] = None,
    show_header: Annotated[
        Optional[bool], typer.Option("--show-header/--hide-header")
    ] = None,
    clear_ids_on_view: Annotated[
        Optional[bool], typer.Option("--clear-ids-on-view/--keep-ids-on-view")
    ] = None,
    data_path: Annotated[
        Optional[str], typer.Option("--data-path", "-dp", help="directory for entries")
    ] = None,
    remove_data_path: Annotated[bool, typer.Option("--remove-data-path", "-rdp")] = False,
) -> None:
    """Update configuration settings."""
    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        scope_owner=scope_owner,
        remove_scope_owner=remove_scope_owner,
        user=user,
        remove_user=remove_user,
        tick_interval_ms=tick_interval_ms,
        log_level=log_level,
        show_header=show_header,
        clear_ids_on_view=clear_ids_on_view,
    )
    CONFIGURATION_REPO.flush()

    console = Console()
    console.print("[green]Configuration updated.[/green]")
