# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "aika"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"
DATA_TIME_ENTRIES_DIR: Path = DATA_PATH / "time_entries"

DEFAULT_TICK_INTERVAL_MS = 500
DEFAULT_LOG_LEVEL = "WARNING"


class Configuration(TypedDict):
    data_path: Optional[str]
    scope_owner: Optional[str]
    user: Optional[str]
    tick_interval_ms: int
    log_level: str
    show_header: bool
    clear_ids_on_view: bool


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "scope_owner": None,
        "user": None,
        "tick_interval_ms": DEFAULT_TICK_INTERVAL_MS,
        "log_level": DEFAULT_LOG_LEVEL,
        "show_header": True,
        "clear_ids_on_view": True,
    }


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_ID_MAP_PATH, DATA_TIME_ENTRIES_DIR

    DATA_PATH = data_path
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"
    DATA_TIME_ENTRIES_DIR = DATA_PATH / "time_entries"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called before any repositories are used.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return

    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))
