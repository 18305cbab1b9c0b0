# SPDX-License-Identifier: MIT

import getpass

from aika import configuration
from aika import state as app_state
from aika.repository.configuration import CONFIGURATION_REPO
from aika.repository.time_entry import YamlEntryStore
from aika.service.reconcile import EntryReconciliationController
from aika.service.timer import TimerEngine


def current_user() -> str:
    """The identity recorded as created_by on new entries."""
    user = CONFIGURATION_REPO.get_config()["user"]
    if user is not None:
        return user
    return getpass.getuser()


def active_scope_owner() -> str:
    """
    The scope whose entries are shown and timed.

    Precedence: the --scope option, the configured scope_owner, the current
    user.
    """
    scope_override = app_state.get_scope_owner()
    if scope_override is not None:
        return scope_override
    scope_owner = CONFIGURATION_REPO.get_config()["scope_owner"]
    if scope_owner is not None:
        return scope_owner
    return current_user()


def build_controller() -> EntryReconciliationController:
    config = CONFIGURATION_REPO.get_config()
    store = YamlEntryStore(configuration.DATA_TIME_ENTRIES_DIR, current_user())
    engine = TimerEngine(tick_interval=config["tick_interval_ms"] / 1000)
    return EntryReconciliationController(store, active_scope_owner(), engine)
