"""Identity map shared by the SQLAlchemy repositories of one session.

The registration service relies on reference semantics: a guest enrolled in
an attraction must see that attraction's new instructor as soon as it is
reassigned. The map guarantees that, within one Session, an id always
resolves to the same domain object. It is stored in ``Session.info`` so the
three repositories built on the same session share it, and it is hydrated
from the database on first use.
"""

import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from zoo_registry.db.base import (
    AttractionModel,
    EnrollmentModel,
    GuestModel,
    InstructorModel,
)
from zoo_registry.domain.entities import Attraction, Guest, Instructor, Weekday

logger = logging.getLogger(__name__)

IDENTITY_MAP_KEY = "zoo_registry.identity_map"


class IdentityMap:
    def __init__(self) -> None:
        self.instructors: Dict[str, Instructor] = {}
        self.guests: Dict[str, Guest] = {}
        self.attractions: Dict[str, Attraction] = {}
        self.loaded = False


def get_identity_map(db: Session) -> IdentityMap:
    """Return the session's identity map, hydrating it on first access."""
    identity_map = db.info.get(IDENTITY_MAP_KEY)
    if identity_map is None:
        identity_map = IdentityMap()
        db.info[IDENTITY_MAP_KEY] = identity_map
    if not identity_map.loaded:
        hydrate(db, identity_map)
    return identity_map


def reset_identity_map(db: Session) -> None:
    """Forget every loaded object; the next access reloads from the database."""
    db.info.pop(IDENTITY_MAP_KEY, None)


def hydrate(db: Session, identity_map: IdentityMap) -> None:
    """Rebuild the whole object graph from the database."""
    for row in db.scalars(select(InstructorModel).order_by(InstructorModel.sequence)):
        identity_map.instructors[row.id] = Instructor(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            password=row.password,
        )

    for row in db.scalars(select(AttractionModel).order_by(AttractionModel.sequence)):
        instructor = identity_map.instructors.get(row.instructor_id)
        attraction = Attraction(
            name=row.name,
            capacity=row.capacity,
            price=row.price,
            location=row.location,
            weekday=Weekday[row.weekday],
            instructor=instructor,
        )
        # The stored id wins: it was derived from the fields at creation time
        attraction.id = row.id
        identity_map.attractions[row.id] = attraction
        if instructor is not None:
            instructor.attractions.append(attraction)
        else:
            logger.warning(
                "Attraction references an unknown instructor",
                extra={
                    "context": {
                        "attraction_id": row.id,
                        "instructor_id": row.instructor_id,
                    }
                },
            )

    for row in db.scalars(select(GuestModel).order_by(GuestModel.sequence)):
        identity_map.guests[row.id] = Guest(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            password=row.password,
            birthdate=row.birthdate,
        )

    for row in db.scalars(select(EnrollmentModel).order_by(EnrollmentModel.id)):
        attraction = identity_map.attractions.get(row.attraction_id)
        guest = identity_map.guests.get(row.guest_id)
        if attraction is None or guest is None:
            continue
        attraction.guests.append(guest)
        guest.attractions.append(attraction)

    # Ages move on between runs, so stored sums are recomputed rather than trusted
    for guest in identity_map.guests.values():
        guest.calculate_sum()
    for instructor in identity_map.instructors.values():
        instructor.calculate_sum()

    identity_map.loaded = True
    logger.debug(
        "Identity map hydrated",
        extra={
            "context": {
                "instructors": len(identity_map.instructors),
                "attractions": len(identity_map.attractions),
                "guests": len(identity_map.guests),
            }
        },
    )
