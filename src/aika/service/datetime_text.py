# SPDX-License-Identifier: MIT

"""
Conversion between instants and the editable `MM/DD/YYYY h:mm AM/PM` text.

Parsing is lenient: text that cannot be applied as a whole leaves the
previous value untouched, so a field can be edited character by character
without ever raising.

The text has no UTC offset, so during a daylight saving fall-back the
repeated wall-clock hour is ambiguous. Parsing resolves it to the first
occurrence; format then parse only returns the original instant for wall
times that occur once.
"""

from typing import NamedTuple, Optional, TypeAlias, Union, cast

import pendulum

EDIT_FORMAT = "MM/DD/YYYY h:mm A"

TimezoneLike: TypeAlias = Union[str, pendulum.Timezone, pendulum.FixedTimezone]


class _Fields(NamedTuple):
    year: int
    month: int
    day: int
    hour: int
    minute: int


def format(instant: pendulum.DateTime, tz: TimezoneLike = "local") -> str:
    return instant.in_tz(tz).format(EDIT_FORMAT)


def parse(
    text: str, fallback: pendulum.DateTime, tz: TimezoneLike = "local"
) -> pendulum.DateTime:
    """
    Apply the date and time in `text` onto a copy of `fallback`.

    Seconds and microseconds of `fallback` are kept and the result is
    returned in the timezone of `fallback`. Malformed text returns
    `fallback` itself.
    """
    fields = _parse_fields(text)
    if fields is None:
        return fallback

    local = fallback.in_tz(tz)
    try:
        updated = local.set(
            year=fields.year,
            month=fields.month,
            day=fields.day,
            hour=fields.hour,
            minute=fields.minute,
        )
    except ValueError:
        return fallback
    return updated.in_tz(fallback.tzinfo)


def is_well_formed(text: str) -> bool:
    """Whether `parse` would apply `text` rather than fall back."""
    return _parse_fields(text) is not None


def _parse_fields(text: str) -> Optional[_Fields]:
    date_part, separator, time_part = text.strip().partition(" ")
    if not separator:
        return None

    date_fields = date_part.split("/")
    if len(date_fields) != 3:
        return None

    time_part = time_part.strip().upper()
    meridiem: Optional[str] = None
    for marker in ("AM", "PM"):
        if time_part.endswith(marker):
            meridiem = marker
            time_part = time_part[: -len(marker)].strip()
            break

    time_fields = time_part.split(":")
    if len(time_fields) != 2:
        return None

    numbers = [_to_int(value) for value in (*date_fields, *time_fields)]
    if None in numbers:
        return None
    month, day, year, hour, minute = cast(list[int], numbers)

    if not 0 <= minute <= 59:
        return None
    if meridiem is None:
        if not 0 <= hour <= 23:
            return None
    else:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "AM" and hour == 12:
            hour = 0
        elif meridiem == "PM" and hour != 12:
            hour += 12

    # Rejects impossible calendar dates such as 02/30
    try:
        pendulum.date(year, month, day)
    except ValueError:
        return None

    return _Fields(year, month, day, hour, minute)


def _to_int(value: str) -> Optional[int]:
    value = value.strip()
    if not value.isdecimal():
        return None
    return int(value)
