# SPDX-License-Identifier: MIT

from typing import get_args

from aika import configuration
from aika.model.id_map import EntityType, IdMap, IdMapMapping, empty_id_map
from aika.model.time_entry import EntityId
from aika.repository.document import YamlDocumentRepository

ENTITY_TYPES = get_args(EntityType)


class IdMapRepository(YamlDocumentRepository[IdMap]):
    def __init__(self) -> None:
        super().__init__(lambda: configuration.DATA_ID_MAP_PATH, empty_id_map)

    def clear_ids(self) -> None:
        self._replace(empty_id_map())

    def associate_id(self, entity_type: EntityType, entity_id: EntityId) -> int:
        """
        Return the synthetic id of an entity, numbering it if it has none yet.
        """
        mapping = self.__mapping(entity_type)
        synthetic_id = mapping["real_to_synthetic"].get(entity_id)
        if synthetic_id is not None:
            return synthetic_id

        synthetic_id = len(mapping["real_to_synthetic"]) + 1
        mapping["real_to_synthetic"][entity_id] = synthetic_id
        mapping["synthetic_to_real"][synthetic_id] = entity_id
        self.is_dirty = True
        return synthetic_id

    def get_real_id(self, entity_type: EntityType, synthetic_id: int) -> EntityId:
        """Raises KeyError for ids not handed out by the last listing."""
        return self.__mapping(entity_type)["synthetic_to_real"][synthetic_id]

    def __mapping(self, entity_type: str) -> IdMapMapping:
        if entity_type not in ENTITY_TYPES:
            raise TypeError(
                f"{IdMapRepository.__name__}: expected one of {', '.join(ENTITY_TYPES)}, got {entity_type}"
            )
        return self.document[entity_type]  # type: ignore[literal-required]


ID_MAP_REPO = IdMapRepository()
