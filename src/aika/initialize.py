# SPDX-License-Identifier: MIT

from aika import configuration
from aika import state as app_state
from aika.log import configure_logging
from aika.repository.configuration import CONFIGURATION_REPO
from aika.repository.id_map import ID_MAP_REPO


def initialize() -> None:
    """
    Create the config and data directories on first run, then apply the
    configured defaults for this invocation.

    The data path comes from the config file, so the config has to exist
    before any data file is touched.
    """
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    CONFIGURATION_REPO.ensure_file()

    configuration.load_data_path_configuration()
    configuration.DATA_TIME_ENTRIES_DIR.mkdir(parents=True, exist_ok=True)
    ID_MAP_REPO.ensure_file()

    config = CONFIGURATION_REPO.get_config()
    configure_logging(config["log_level"])
    app_state.set_show_header(config["show_header"])
    app_state.set_clear_ids(config["clear_ids_on_view"])
