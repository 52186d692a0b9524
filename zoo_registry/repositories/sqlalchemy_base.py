"""Shared behaviour for the SQLAlchemy repositories.

Each public call is one transaction: the database is written and committed
first, and only then is the identity map changed. A failed write is rolled
back, logged and re-raised, leaving the in-memory graph untouched.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generic, Iterator, List, Optional, Sequence, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from zoo_registry.db.base import EnrollmentModel
from zoo_registry.db.session import SessionLocal
from zoo_registry.domain.entities import Attraction, Guest, Instructor

from .identity_map import IdentityMap, get_identity_map

logger = logging.getLogger(__name__)

E = TypeVar("E", Guest, Instructor, Attraction)


class SqlAlchemyRepository(Generic[E]):
    model = None
    entity_name = "entity"

    def __init__(self, db_session: Optional[Session] = None) -> None:
        self.db = db_session or SessionLocal()

    # -- hooks -------------------------------------------------------------

    def _objects(self, identity_map: IdentityMap) -> Dict[str, E]:
        raise NotImplementedError

    def _new_row(self, entity: E):
        raise NotImplementedError

    def _apply_to_row(self, row, entity: E) -> None:
        raise NotImplementedError

    def _sync_links(self, entity_id: str, entity: E) -> None:
        """Write the relationships of ``entity`` (default: none)."""

    def _delete_links(self, entity_id: str) -> None:
        """Remove rows that reference ``entity_id`` (default: none)."""

    # -- contract ----------------------------------------------------------

    @property
    def identity_map(self) -> IdentityMap:
        return get_identity_map(self.db)

    def find_by_id(self, entity_id: str) -> Optional[E]:
        return self._objects(self.identity_map).get(entity_id)

    def list_all(self) -> List[E]:
        return list(self._objects(self.identity_map).values())

    def count(self) -> int:
        return len(self._objects(self.identity_map))

    def add(self, entity: E) -> bool:
        objects = self._objects(self.identity_map)
        if entity.id in objects:
            logger.warning(
                f"{self.entity_name} with this id already exists",
                extra={"context": {"id": entity.id}},
            )
            return False
        with self._transaction("add", entity.id):
            row = self._new_row(entity)
            row.sequence = self._next_sequence()
            self.db.add(row)
            self.db.flush()
            self._sync_links(entity.id, entity)
        objects[entity.id] = entity
        return True

    def update(self, entity_id: str, entity: E) -> bool:
        objects = self._objects(self.identity_map)
        stored = objects.get(entity_id)
        if stored is None:
            return False
        with self._transaction("update", entity_id):
            row = self.db.get(self.model, entity_id)
            self._apply_to_row(row, entity)
            self.db.flush()
            self._sync_links(entity_id, entity)
        stored.merge_from(entity)
        return True

    def delete(self, entity_id: str) -> bool:
        objects = self._objects(self.identity_map)
        if entity_id not in objects:
            return False
        with self._transaction("delete", entity_id):
            self._delete_links(entity_id)
            self.db.execute(sa_delete(self.model).where(self.model.id == entity_id))
        objects.pop(entity_id)
        return True

    # -- helpers -----------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str, entity_id: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(
                f"{self.entity_name} {operation} failed, transaction rolled back",
                extra={"context": {"id": entity_id, "operation": operation}},
                exc_info=True,
            )
            raise

    def _next_sequence(self) -> int:
        current = self.db.scalar(select(func.max(self.model.sequence)))
        return (current or 0) + 1

    def _sync_enrollments(
        self, column, entity_id: str, other_column, wanted_ids: Sequence[str]
    ) -> None:
        """Diff-sync enrollment rows for one side, keeping existing rows (and order)."""
        existing = {
            other_id: link_id
            for link_id, other_id in self.db.execute(
                select(EnrollmentModel.id, other_column).where(column == entity_id)
            )
        }
        wanted = list(dict.fromkeys(wanted_ids))
        stale = [link_id for other_id, link_id in existing.items() if other_id not in wanted]
        if stale:
            self.db.execute(sa_delete(EnrollmentModel).where(EnrollmentModel.id.in_(stale)))
        for other_id in wanted:
            if other_id in existing:
                continue
            link = EnrollmentModel()
            setattr(link, column.key, entity_id)
            setattr(link, other_column.key, other_id)
            self.db.add(link)
        self.db.flush()
