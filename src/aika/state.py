# SPDX-License-Identifier: MIT

"""Per-invocation options set by the global CLI flags."""

from contextvars import ContextVar
from typing import Optional

_scope_owner: ContextVar[Optional[str]] = ContextVar("scope_owner", default=None)
_clear_ids: ContextVar[bool] = ContextVar("clear_ids", default=True)
_show_header: ContextVar[bool] = ContextVar("show_header", default=True)


def set_scope_owner(value: Optional[str]) -> None:
    _scope_owner.set(value)


def get_scope_owner() -> Optional[str]:
    return _scope_owner.get()


def set_clear_ids(value: bool) -> None:
    _clear_ids.set(value)


def get_clear_ids() -> bool:
    return _clear_ids.get()


def set_show_header(value: bool) -> None:
    _show_header.set(value)


def get_show_header() -> bool:
    return _show_header.get()
