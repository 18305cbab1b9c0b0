# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core

COMMAND_ORDER = [
    "start, st",
    "stop, sp",
    "status, s",
    "entry, e",
    "config, c",
    "list, ls",
    "modify, m",
    "edit, ed",
    "delete, d",
    "view, v",
    "set",
]


class AliasedTyperGroup(typer.core.TyperGroup):
    """
    TyperGroup whose command names are comma-separated alias lists.

    A command registered as "modify, m" is invoked as either `modify` or `m`
    and listed once in help.
    """

    _ALIAS_SEPARATOR = re.compile(r"\s*,\s*")

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.__registered_name(cmd_name))

    def list_commands(self, ctx: click.Context) -> list[str]:
        # Typer registers commands in an arbitrary order
        commands = super().list_commands(ctx)
        known = [name for name in COMMAND_ORDER if name in commands]
        return known + sorted(name for name in commands if name not in known)

    def __registered_name(self, alias: str) -> str:
        for name in self.commands:
            if alias in self._ALIAS_SEPARATOR.split(name):
                return name
        return alias
