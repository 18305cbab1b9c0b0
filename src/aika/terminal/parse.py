# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
import typer

from aika.service import datetime_text


def parse_id_list(id_param: str) -> list[int]:
    """
    Parse listing ids given as "3", "1,4", "2-5" or any mix like "1,3-5,8".

    Returns the ids sorted and deduplicated. Raises typer.BadParameter on
    anything that is not a positive id or an ascending range.
    """
    ids: set[int] = set()
    for part in id_param.split(","):
        part = part.strip()
        if not part:
            continue

        first, separator, last = part.partition("-")
        if not first.strip().isdecimal() or (
            separator and not last.strip().isdecimal()
        ):
            raise typer.BadParameter(
                f"Invalid id '{part}', expected a number or a range like 2-5"
            )
        if not separator:
            ids.add(int(first))
            continue

        start, end = int(first), int(last)
        if start > end:
            raise typer.BadParameter(f"Invalid range '{part}', start must be <= end")
        ids.update(range(start, end + 1))

    if not ids:
        raise typer.BadParameter("No valid ids provided")
    return sorted(ids)


def validate_edit_text(text: Optional[str]) -> Optional[str]:
    """Reject date-time text that would not be applied by the edit codec."""
    if text is None:
        return None
    if not datetime_text.is_well_formed(text):
        raise typer.BadParameter(
            f"Expected MM/DD/YYYY h:mm AM/PM (e.g. 03/05/2024 3:04 PM), got '{text}'"
        )
    return text


def apply_edit_text(
    text: Optional[str], fallback: pendulum.DateTime
) -> Optional[pendulum.DateTime]:
    if text is None:
        return None
    return datetime_text.parse(text, fallback)
