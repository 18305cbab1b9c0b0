# SPDX-License-Identifier: MIT

import atexit
import logging

from aika.repository.configuration import CONFIGURATION_REPO
from aika.repository.id_map import ID_MAP_REPO

logger = logging.getLogger(__name__)


def flush() -> None:
    """Write back the documents changed during this command."""
    for repository in (CONFIGURATION_REPO, ID_MAP_REPO):
        try:
            repository.flush()
        except OSError as e:
            logger.error("could not write %s: %s", repository.path, e)


def register_cleanup() -> None:
    atexit.register(flush)
