# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from aika import configuration
from aika.repository.document import YamlDocumentRepository


class ConfigurationRepository(YamlDocumentRepository[configuration.Configuration]):
    def __init__(self) -> None:
        super().__init__(
            lambda: configuration.APP_CONFIG_PATH,
            configuration.get_default_configuration,
        )

    def _migrate(
        self, document: configuration.Configuration
    ) -> configuration.Configuration:
        # Files written by older versions lack settings added since
        for key, value in configuration.get_default_configuration().items():
            document.setdefault(key, value)  # type: ignore[misc]
        return document

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.document)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        scope_owner: Optional[str] = None,
        remove_scope_owner: bool = False,
        user: Optional[str] = None,
        remove_user: bool = False,
        tick_interval_ms: Optional[int] = None,
        log_level: Optional[str] = None,
        show_header: Optional[bool] = None,
        clear_ids_on_view: Optional[bool] = None,
    ) -> None:
        config = self.get_config()

        if data_path is not None or remove_data_path:
            config["data_path"] = None if remove_data_path else data_path
        if scope_owner is not None or remove_scope_owner:
            config["scope_owner"] = None if remove_scope_owner else scope_owner
        if user is not None or remove_user:
            config["user"] = None if remove_user else user
        if tick_interval_ms is not None:
            config["tick_interval_ms"] = tick_interval_ms
        if log_level is not None:
            config["log_level"] = log_level
        if show_header is not None:
            config["show_header"] = show_header
        if clear_ids_on_view is not None:
            config["clear_ids_on_view"] = clear_ids_on_view

        self._replace(config)


CONFIGURATION_REPO = ConfigurationRepository()
