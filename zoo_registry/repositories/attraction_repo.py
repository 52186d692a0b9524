"""Attraction repository implementation backed by SQLAlchemy."""

from typing import Dict

from zoo_registry.db.base import AttractionModel, EnrollmentModel
from zoo_registry.domain.entities import Attraction
from zoo_registry.domain.interfaces import IAttractionRepository

from .identity_map import IdentityMap
from .sqlalchemy_base import SqlAlchemyRepository


class AttractionRepository(SqlAlchemyRepository[Attraction], IAttractionRepository):
    """Repository for Attraction persistence operations."""

    model = AttractionModel
    entity_name = "Attraction"

    def _objects(self, identity_map: IdentityMap) -> Dict[str, Attraction]:
        return identity_map.attractions

    def _new_row(self, attraction: Attraction) -> AttractionModel:
        row = AttractionModel(id=attraction.id)
        self._apply_to_row(row, attraction)
        return row

    def _apply_to_row(self, row: AttractionModel, attraction: Attraction) -> None:
        if attraction.instructor is None:
            raise ValueError(f"Attraction {attraction.id} has no instructor")
        row.name = attraction.name
        row.capacity = attraction.capacity
        row.price = attraction.price
        row.location = attraction.location
        row.weekday = attraction.weekday.name
        row.instructor_id = attraction.instructor.id

    def _sync_links(self, attraction_id: str, attraction: Attraction) -> None:
        self._sync_enrollments(
            EnrollmentModel.attraction_id,
            attraction_id,
            EnrollmentModel.guest_id,
            [g.id for g in attraction.guests],
        )

    def _delete_links(self, attraction_id: str) -> None:
        self._sync_enrollments(
            EnrollmentModel.attraction_id, attraction_id, EnrollmentModel.guest_id, []
        )
