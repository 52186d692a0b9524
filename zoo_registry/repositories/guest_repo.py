"""Guest repository implementation backed by SQLAlchemy."""

from typing import Dict

from zoo_registry.db.base import EnrollmentModel, GuestModel
from zoo_registry.domain.entities import Guest
from zoo_registry.domain.interfaces import IGuestRepository

from .identity_map import IdentityMap
from .sqlalchemy_base import SqlAlchemyRepository


class GuestRepository(SqlAlchemyRepository[Guest], IGuestRepository):
    """Repository for Guest persistence operations."""

    model = GuestModel
    entity_name = "Guest"

    def _objects(self, identity_map: IdentityMap) -> Dict[str, Guest]:
        return identity_map.guests

    def _new_row(self, guest: Guest) -> GuestModel:
        row = GuestModel(id=guest.id)
        self._apply_to_row(row, guest)
        return row

    def _apply_to_row(self, row: GuestModel, guest: Guest) -> None:
        row.first_name = guest.first_name
        row.last_name = guest.last_name
        row.password = guest.password
        row.birthdate = guest.birthdate
        row.final_sum = guest.final_sum

    def _sync_links(self, guest_id: str, guest: Guest) -> None:
        self._sync_enrollments(
            EnrollmentModel.guest_id,
            guest_id,
            EnrollmentModel.attraction_id,
            [a.id for a in guest.attractions],
        )

    def _delete_links(self, guest_id: str) -> None:
        self._sync_enrollments(
            EnrollmentModel.guest_id, guest_id, EnrollmentModel.attraction_id, []
        )
