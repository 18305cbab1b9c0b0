# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Protocol, cast

import pendulum
from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from aika import time
from aika.error import PersistenceError
from aika.model.time_entry import (
    UPDATABLE_FIELDS,
    EntityId,
    TimeEntry,
    TimeEntryUpdate,
)
from aika.template.time_entry import get_time_entry_template

logger = logging.getLogger(__name__)


class EntryStore(Protocol):
    """
    Persistence boundary for time entries.

    Every failure is reported as PersistenceError.
    """

    async def list_entries(self, scope_owner: str) -> list[TimeEntry]:
        """All entries of a scope, newest start_time first."""
        ...

    async def insert(
        self, scope_owner: str, description: str, start_time: pendulum.DateTime
    ) -> TimeEntry: ...

    async def update(self, id: EntityId, fields: TimeEntryUpdate) -> None: ...

    async def delete(self, id: EntityId) -> None: ...


class YamlEntryStore:
    """
    EntryStore keeping one YAML document per entry in a directory.

    Every call goes to disk, so a list issued after a successful write always
    observes that write.
    """

    def __init__(self, entries_dir: Path, created_by: str) -> None:
        self._entries_dir = entries_dir
        self._created_by = created_by

    async def list_entries(self, scope_owner: str) -> list[TimeEntry]:
        entries = [
            entry
            for entry in self.__load_all()
            if entry["scope_owner"] == scope_owner
        ]
        entries.sort(key=lambda entry: entry["start_time"], reverse=True)
        return entries

    async def insert(
        self, scope_owner: str, description: str, start_time: pendulum.DateTime
    ) -> TimeEntry:
        entry = get_time_entry_template(
            scope_owner, description, start_time, self._created_by
        )
        self.__write(entry)
        logger.debug("inserted time entry %s for %s", entry["id"], scope_owner)
        return deepcopy(entry)

    async def update(self, id: EntityId, fields: TimeEntryUpdate) -> None:
        unknown_fields = set(fields) - UPDATABLE_FIELDS
        if unknown_fields:
            raise PersistenceError(
                f"Cannot update field(s) {', '.join(sorted(unknown_fields))} of time entry {id}"
            )

        entry = self.__read(id)
        if "description" in fields:
            entry["description"] = fields["description"]
        if "start_time" in fields:
            entry["start_time"] = fields["start_time"]
        if "end_time" in fields:
            entry["end_time"] = fields["end_time"]
        self.__write(entry)
        logger.debug("updated time entry %s: %s", id, ", ".join(fields))

    async def delete(self, id: EntityId) -> None:
        file_path = self.__file_path(id)
        if not file_path.is_file():
            raise PersistenceError(f"No time entry with id {id}")
        try:
            file_path.unlink()
        except OSError as e:
            raise PersistenceError(f"Could not delete time entry {id}: {e}") from e
        logger.debug("deleted time entry %s", id)

    def __file_path(self, id: EntityId) -> Path:
        return self._entries_dir / f"{id}.yaml"

    def __load_all(self) -> list[TimeEntry]:
        entries: list[TimeEntry] = []
        try:
            file_paths = sorted(self._entries_dir.iterdir())
        except OSError as e:
            raise PersistenceError(f"Could not list time entries: {e}") from e
        for file_path in file_paths:
            if file_path.suffix != ".yaml":
                continue
            entries.append(self.__read_file(file_path))
        return entries

    def __read(self, id: EntityId) -> TimeEntry:
        file_path = self.__file_path(id)
        if not file_path.is_file():
            raise PersistenceError(f"No time entry with id {id}")
        return self.__read_file(file_path)

    def __read_file(self, file_path: Path) -> TimeEntry:
        try:
            raw_entry = load(file_path.read_text(), Loader=Loader)
            return self.__convert_entry_for_deserialization(raw_entry)
        except (OSError, YAMLError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(
                f"Could not read time entry {file_path.name}: {e}"
            ) from e

    def __write(self, entry: TimeEntry) -> None:
        serializable_entry = self.__convert_entry_for_serialization(deepcopy(entry))
        try:
            self._entries_dir.mkdir(parents=True, exist_ok=True)
            self.__file_path(entry["id"]).write_text(
                dump(serializable_entry, Dumper=Dumper)
            )
        except OSError as e:
            raise PersistenceError(
                f"Could not write time entry {entry['id']}: {e}"
            ) from e

    def __convert_entry_for_serialization(self, entry: TimeEntry) -> dict[str, Any]:
        serializable_entry = cast(dict[str, Any], entry)
        serializable_entry["start_time"] = time.datetime_to_iso_str(
            serializable_entry["start_time"]
        )
        serializable_entry["end_time"] = time.datetime_to_iso_str_optional(
            serializable_entry["end_time"]
        )
        serializable_entry["created_at"] = time.datetime_to_iso_str(
            serializable_entry["created_at"]
        )
        return serializable_entry

    def __convert_entry_for_deserialization(self, entry: dict[str, Any]) -> TimeEntry:
        deserializable_entry = entry
        deserializable_entry["start_time"] = time.datetime_from_str(
            deserializable_entry["start_time"]
        )
        deserializable_entry["end_time"] = time.datetime_from_str_optional(
            deserializable_entry["end_time"]
        )
        deserializable_entry["created_at"] = time.datetime_from_str(
            deserializable_entry["created_at"]
        )
        return cast(TimeEntry, deserializable_entry)
