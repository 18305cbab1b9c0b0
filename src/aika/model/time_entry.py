# SPDX-License-Identifier: MIT

from typing import Optional, TypeAlias, TypedDict

import pendulum

EntityId: TypeAlias = str


class TimeEntry(TypedDict):
    id: EntityId
    scope_owner: str  # user or organization the entry belongs to
    description: str
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]  # None while the interval is open
    created_at: pendulum.DateTime
    created_by: str


class TimeEntryUpdate(TypedDict, total=False):
    description: str
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]


UPDATABLE_FIELDS = frozenset(TimeEntryUpdate.__annotations__)
