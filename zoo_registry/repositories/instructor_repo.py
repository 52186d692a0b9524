"""Instructor repository implementation backed by SQLAlchemy."""

from typing import Dict

from sqlalchemy import update as sa_update

from zoo_registry.db.base import AttractionModel, InstructorModel
from zoo_registry.domain.entities import Instructor
from zoo_registry.domain.interfaces import IInstructorRepository

from .identity_map import IdentityMap
from .sqlalchemy_base import SqlAlchemyRepository


class InstructorRepository(SqlAlchemyRepository[Instructor], IInstructorRepository):
    """Repository for Instructor persistence operations."""

    model = InstructorModel
    entity_name = "Instructor"

    def _objects(self, identity_map: IdentityMap) -> Dict[str, Instructor]:
        return identity_map.instructors

    def _new_row(self, instructor: Instructor) -> InstructorModel:
        row = InstructorModel(id=instructor.id)
        self._apply_to_row(row, instructor)
        return row

    def _apply_to_row(self, row: InstructorModel, instructor: Instructor) -> None:
        row.first_name = instructor.first_name
        row.last_name = instructor.last_name
        row.password = instructor.password
        row.final_sum = instructor.final_sum

    def _sync_links(self, instructor_id: str, instructor: Instructor) -> None:
        # Ownership lives on attractions.instructor_id
        held_ids = [a.id for a in instructor.attractions]
        if held_ids:
            self.db.execute(
                sa_update(AttractionModel)
                .where(AttractionModel.id.in_(held_ids))
                .values(instructor_id=instructor_id)
            )
