# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YamlDocumentRepository(Generic[T]):
    """
    A single YAML document loaded on first access and written back by flush().

    The path is resolved on every load and save, so it follows data_path
    changes made after the repository was created.
    """

    def __init__(self, get_path: Callable[[], Path], get_default: Callable[[], T]) -> None:
        self._get_path = get_path
        self._get_default = get_default
        self._document: Optional[T] = None
        self.is_dirty = False

    @property
    def path(self) -> Path:
        return self._get_path()

    @property
    def document(self) -> T:
        if self._document is None:
            self._document = self._load()
        return self._document

    def ensure_file(self) -> None:
        """Write the default document if the file does not exist yet."""
        if not self.path.is_file():
            self.path.write_text(dump(self._get_default(), Dumper=Dumper))

    def flush(self) -> bool:
        if self._document is None or not self.is_dirty:
            return False
        self.path.write_text(dump(self._document, Dumper=Dumper))
        self.is_dirty = False
        logger.debug("wrote %s", self.path)
        return True

    def reset(self) -> None:
        self._document = None
        self.is_dirty = False

    def _load(self) -> T:
        document = load(self.path.read_text(), Loader=Loader)
        if document is None:
            return self._get_default()
        return self._migrate(document)

    def _migrate(self, document: T) -> T:
        return document

    def _replace(self, document: T) -> None:
        self._document = deepcopy(document)
        self.is_dirty = True
