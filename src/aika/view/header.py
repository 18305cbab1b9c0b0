# SPDX-License-Identifier: MIT

from typing import Optional

from rich.console import Console
from rich.padding import Padding
from rich.text import Text

from aika.state import get_show_header


def header(scope_owner: str, sub_header: Optional[str] = None) -> None:
    """Print the report title line, e.g. "aika  alice  work logs".

    Suppressed by --no-header or the show_header setting.
    """
    if not get_show_header():
        return

    title = Text("aika", style="bold dark_orange")
    title.append(f"  {scope_owner}", style="plum1")
    if sub_header is not None:
        title.append(f"  {sub_header}", style="sandy_brown")
    Console().print(Padding(title, (1, 0, 0, 1)))
