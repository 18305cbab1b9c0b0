# SPDX-License-Identifier: MIT

import uuid

import pendulum

from aika.model.time_entry import TimeEntry
from aika.time import now_utc


def get_time_entry_template(
    scope_owner: str,
    description: str,
    start_time: pendulum.DateTime,
    created_by: str,
) -> TimeEntry:
    return {
        "id": str(uuid.uuid4()),
        "scope_owner": scope_owner,
        "description": description,
        "start_time": start_time,
        "end_time": None,
        "created_at": now_utc(),
        "created_by": created_by,
    }
