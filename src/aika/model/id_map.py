# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

from aika.model.time_entry import EntityId

EntityType = Literal["time_entries"]


class IdMapMapping(TypedDict):
    synthetic_to_real: dict[int, EntityId]
    real_to_synthetic: dict[EntityId, int]


class IdMap(TypedDict):
    """
    Listings show short integer ids instead of entry uuids. The map is
    renumbered on every `entry list` unless clear_ids_on_view is off.

        id_map["time_entries"]["synthetic_to_real"][7]  # "3f0c..."
    """

    time_entries: IdMapMapping


def empty_id_map() -> IdMap:
    return {"time_entries": {"synthetic_to_real": {}, "real_to_synthetic": {}}}
