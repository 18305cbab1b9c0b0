# SPDX-License-Identifier: MIT

import math
from typing import Optional, cast

import pendulum


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    return cast(pendulum.DateTime, pendulum.parse(datetime)).in_tz("UTC")


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def datetime_to_display_str(datetime: Optional[pendulum.DateTime]) -> str:
    """Local wall time for tables, empty for a missing end time."""
    if datetime is None:
        return ""
    return datetime.in_tz("local").format("ddd MMM D, h:mm A")


def elapsed_seconds(anchor: pendulum.DateTime, now: pendulum.DateTime) -> int:
    """Whole seconds from anchor to now, never negative."""
    return max(0, math.floor((now - anchor).total_seconds()))


def elapsed_to_str(seconds: int) -> str:
    """Render elapsed seconds as HH:MM:SS."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def entry_duration_to_str(
    start: pendulum.DateTime, end: Optional[pendulum.DateTime]
) -> str:
    if end is None:
        return "In progress"
    total_minutes = math.floor((end - start).total_seconds() / 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h{minutes}m"
