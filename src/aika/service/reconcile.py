# SPDX-License-Identifier: MIT

import itertools
import logging
from copy import deepcopy
from types import TracebackType
from typing import Optional

from aika.error import PersistenceError, ValidationError
from aika.model.time_entry import (
    UPDATABLE_FIELDS,
    EntityId,
    TimeEntry,
    TimeEntryUpdate,
)
from aika.repository.time_entry import EntryStore
from aika.service.timer import Clock, TimerEngine
from aika.time import now_utc

logger = logging.getLogger(__name__)


class EntryReconciliationController:
    """
    Keeps a TimerEngine consistent with the time entries of one scope.

    Local state (`current_entry_id`, `description`, the engine and the cached
    entry list) only changes after the matching store call has succeeded.
    Store errors propagate unchanged to the caller and are never retried.
    The reload following a successful start or stop is best effort: when it
    fails the call still succeeds and the cached list is patched locally.

    Calls are not serialized. Each store-touching call takes a sequencing
    token; a response completing after a newer call was issued is logged and
    counted in `stale_responses`.
    """

    def __init__(
        self,
        store: EntryStore,
        scope_owner: str,
        engine: Optional[TimerEngine] = None,
        clock: Clock = now_utc,
    ) -> None:
        self._store = store
        self._scope_owner = scope_owner
        self._clock = clock
        self._engine = engine if engine is not None else TimerEngine(clock=clock)
        self._entries: list[TimeEntry] = []
        self._current_entry_id: Optional[EntityId] = None
        self._description = ""
        self._stranded_entry_ids: list[EntityId] = []
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self.stale_responses = 0

    @property
    def scope_owner(self) -> str:
        return self._scope_owner

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def entries(self) -> list[TimeEntry]:
        return deepcopy(self._entries)

    @property
    def current_entry_id(self) -> Optional[EntityId]:
        return self._current_entry_id

    @property
    def description(self) -> str:
        return self._description

    @property
    def elapsed(self) -> int:
        return self._engine.elapsed

    @property
    def is_running(self) -> bool:
        return self._engine.is_running

    @property
    def stranded_entry_ids(self) -> list[EntityId]:
        """Open entries that lost the tie-break in the last reconcile."""
        return list(self._stranded_entry_ids)

    def get_current_entry(self) -> Optional[TimeEntry]:
        for entry in self._entries:
            if entry["id"] == self._current_entry_id:
                return deepcopy(entry)
        return None

    async def reconcile(self) -> None:
        """
        Rebuild timer state from the open entry of the scope, if any.

        When more than one entry is open the one with the latest start_time
        wins and the others are left untouched.
        """
        token = self.__issue_token()
        entries = await self._store.list_entries(self._scope_owner)
        self.__check_token(token, "reconcile")
        self.__apply_entries(entries)

    async def refresh(self) -> None:
        await self.reconcile()

    async def start_timer(self, description: str) -> TimeEntry:
        description = description.strip()
        if not description:
            raise ValidationError("Please enter what you are working on")
        if self._current_entry_id is not None:
            raise ValidationError(
                f"A timer is already running: {self._description}"
            )

        token = self.__issue_token()
        start_time = self._clock()
        entry = await self._store.insert(self._scope_owner, description, start_time)
        self.__check_token(token, "start")

        self._current_entry_id = entry["id"]
        self._description = entry["description"]
        self._engine.start(entry["start_time"])
        self._entries.insert(0, deepcopy(entry))
        logger.info("started timer %s: %s", entry["id"], description)

        await self.__refresh_after("start")
        return entry

    async def stop_timer(self) -> Optional[EntityId]:
        """
        Close the open entry. Returns its id, or None when nothing was running.
        """
        entry_id = self._current_entry_id
        if entry_id is None:
            return None

        token = self.__issue_token()
        end_time = self._clock()
        await self._store.update(entry_id, {"end_time": end_time})
        self.__check_token(token, "stop")

        if self._current_entry_id == entry_id:
            self._engine.stop()
            self._current_entry_id = None
            self._description = ""
            logger.info("stopped timer %s", entry_id)
        else:
            logger.warning(
                "stop of %s completed after timer %s was started, keeping the newer timer",
                entry_id,
                self._current_entry_id,
            )
        for entry in self._entries:
            if entry["id"] == entry_id:
                entry["end_time"] = end_time

        await self.__refresh_after("stop")
        return entry_id

    async def update_entry(self, id: EntityId, fields: TimeEntryUpdate) -> None:
        unknown_fields = set(fields) - UPDATABLE_FIELDS
        if unknown_fields:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown_fields))}"
            )

        await self._store.update(id, fields)
        logger.info("updated time entry %s", id)
        await self.refresh()

    async def delete_entry(self, id: EntityId) -> None:
        await self._store.delete(id)
        logger.info("deleted time entry %s", id)
        await self.refresh()

    def close(self) -> None:
        self._engine.close()

    async def __aenter__(self) -> "EntryReconciliationController":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def __apply_entries(self, entries: list[TimeEntry]) -> None:
        self._entries = deepcopy(entries)

        open_entries = [entry for entry in entries if entry["end_time"] is None]
        if len(open_entries) == 0:
            self._stranded_entry_ids = []
            if self._current_entry_id is not None:
                self._description = ""
            self._current_entry_id = None
            self._engine.stop()
            return

        open_entries.sort(key=lambda entry: entry["start_time"], reverse=True)
        active_entry = open_entries[0]
        self._stranded_entry_ids = [entry["id"] for entry in open_entries[1:]]
        if self._stranded_entry_ids:
            logger.warning(
                "found %d open time entries for %s, using %s and ignoring %s",
                len(open_entries),
                self._scope_owner,
                active_entry["id"],
                ", ".join(self._stranded_entry_ids),
            )

        self._current_entry_id = active_entry["id"]
        self._description = active_entry["description"]
        if self._engine.anchor != active_entry["start_time"]:
            self._engine.start(active_entry["start_time"])

    async def __refresh_after(self, operation: str) -> None:
        # The write already succeeded, a failed reload keeps the cached list
        try:
            await self.refresh()
        except PersistenceError as e:
            logger.warning("could not reload entries after %s: %s", operation, e)

    def __issue_token(self) -> int:
        token = next(self._tokens)
        self._latest_token = token
        return token

    def __check_token(self, token: int, operation: str) -> None:
        if token == self._latest_token:
            return
        self.stale_responses += 1
        logger.warning(
            "%s response is stale (token %d, latest %d)",
            operation,
            token,
            self._latest_token,
        )

