"""In-memory repository implementations.

Volatile storage backed by insertion-ordered dicts. Stored objects are the
caller's own instances, so relationships between entities are plain Python
references. Construction never seeds data; use zoo_registry.db.seed for that.
"""

import logging
from typing import Dict, Generic, List, Optional, TypeVar

from zoo_registry.domain.entities import Attraction, Guest, Instructor
from zoo_registry.domain.interfaces import (
    IAttractionRepository,
    IGuestRepository,
    IInstructorRepository,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", Guest, Instructor, Attraction)


class InMemoryRepository(Generic[E]):
    """Shared CRUD behaviour for the three entity kinds."""

    entity_name = "entity"

    def __init__(self) -> None:
        self._items: Dict[str, E] = {}

    def add(self, entity: E) -> bool:
        if entity.id in self._items:
            logger.warning(
                f"{self.entity_name} with this id already exists",
                extra={"context": {"id": entity.id}},
            )
            return False
        self._items[entity.id] = entity
        return True

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def update(self, entity_id: str, entity: E) -> bool:
        stored = self._items.get(entity_id)
        if stored is None:
            return False
        stored.merge_from(entity)
        return True

    def find_by_id(self, entity_id: str) -> Optional[E]:
        return self._items.get(entity_id)

    def list_all(self) -> List[E]:
        return list(self._items.values())

    def count(self) -> int:
        return len(self._items)


class InMemoryGuestRepository(InMemoryRepository[Guest], IGuestRepository):
    entity_name = "Guest"


class InMemoryInstructorRepository(
    InMemoryRepository[Instructor], IInstructorRepository
):
    entity_name = "Instructor"


class InMemoryAttractionRepository(
    InMemoryRepository[Attraction], IAttractionRepository
):
    entity_name = "Attraction"
