"""
Registration service - the only place where business rules span more than
one entity kind.

This service:
- Depends on the repository abstractions, not on a storage backend
- Keeps the Guest <-> Attraction <-> Instructor links in agreement
- Recomputes every affected derived sum after each mutation
- Converts business rule violations into OperationResult values, so no
  RegistrationError ever reaches the caller
- Puts the touched entities back when a storage write fails, then re-raises

Read queries return new lists holding the same entity references.
An empty query result is a normal outcome, only logged for visibility.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from zoo_registry.core.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    DuplicateError,
    InvalidInputError,
    NotEnrolledError,
    NotFoundError,
    OperationResult,
    RegistrationError,
    UnauthorizedError,
)
from zoo_registry.core.validation import (
    validate_attraction,
    validate_guest,
    validate_person,
)
from zoo_registry.domain.entities import ZERO, Attraction, Guest, Instructor, Weekday
from zoo_registry.domain.interfaces import (
    IAttractionRepository,
    IGuestRepository,
    IInstructorRepository,
)

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]


class RegistrationService:
    """Application service for the attraction program."""

    def __init__(
        self,
        attraction_repo: IAttractionRepository,
        guest_repo: IGuestRepository,
        instructor_repo: IInstructorRepository,
    ) -> None:
        self.attraction_repo = attraction_repo
        self.guest_repo = guest_repo
        self.instructor_repo = instructor_repo

    # =====================================================
    # LISTING AND LOOKUP
    # =====================================================

    def list_attractions(self) -> List[Attraction]:
        return self.attraction_repo.list_all()

    def list_guests(self) -> List[Guest]:
        return self.guest_repo.list_all()

    def list_instructors(self) -> List[Instructor]:
        return self.instructor_repo.list_all()

    def find_attraction(self, attraction_id: str) -> Optional[Attraction]:
        return self.attraction_repo.find_by_id(attraction_id)

    def find_guest(self, guest_id: str) -> Optional[Guest]:
        return self.guest_repo.find_by_id(guest_id)

    def find_instructor(self, instructor_id: str) -> Optional[Instructor]:
        return self.instructor_repo.find_by_id(instructor_id)

    # =====================================================
    # REGISTRATION
    # =====================================================

    def add_guest(self, guest: Guest) -> OperationResult:
        """Store a new guest. Fails with DUPLICATE when the id is taken."""
        try:
            if not self.guest_repo.add(guest):
                raise DuplicateError(f"A guest with id '{guest.id}' already exists")
        except RegistrationError as exc:
            return self._failure("add_guest", exc, guest_id=guest.id)
        logger.info("Guest added", extra={"context": {"guest_id": guest.id}})
        return OperationResult.ok(guest)

    def add_instructor(self, instructor: Instructor) -> OperationResult:
        """Store a new instructor. Fails with DUPLICATE when the id is taken."""
        try:
            if not self.instructor_repo.add(instructor):
                raise DuplicateError(
                    f"An instructor with id '{instructor.id}' already exists"
                )
        except RegistrationError as exc:
            return self._failure("add_instructor", exc, instructor_id=instructor.id)
        logger.info(
            "Instructor added", extra={"context": {"instructor_id": instructor.id}}
        )
        return OperationResult.ok(instructor)

    def register_guest(
        self,
        username: str,
        first_name: str,
        last_name: str,
        password: str,
        birthdate: Any,
    ) -> OperationResult:
        """Validate raw input, build a Guest and add it."""
        validation = validate_guest(
            {
                "username": username,
                "first_name": first_name,
                "last_name": last_name,
                "password": password,
                "birthdate": birthdate,
            }
        )
        if not validation.is_valid:
            return self._failure(
                "register_guest",
                InvalidInputError("Invalid guest data", validation.errors),
                guest_id=username,
            )
        data = validation.cleaned_data
        guest = Guest(
            id=data["username"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            password=data["password"],
            birthdate=data["birthdate"],
        )
        return self.add_guest(guest)

    def register_instructor(
        self, username: str, first_name: str, last_name: str, password: str
    ) -> OperationResult:
        """Validate raw input, build an Instructor and add it."""
        validation = validate_person(
            {
                "username": username,
                "first_name": first_name,
                "last_name": last_name,
                "password": password,
            }
        )
        if not validation.is_valid:
            return self._failure(
                "register_instructor",
                InvalidInputError("Invalid instructor data", validation.errors),
                instructor_id=username,
            )
        data = validation.cleaned_data
        instructor = Instructor(
            id=data["username"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            password=data["password"],
        )
        return self.add_instructor(instructor)

    def authenticate_guest(self, guest_id: str, password: str) -> OperationResult:
        return self._authenticate(
            "authenticate_guest", self._require_guest, guest_id, password
        )

    def authenticate_instructor(
        self, instructor_id: str, password: str
    ) -> OperationResult:
        return self._authenticate(
            "authenticate_instructor", self._require_instructor, instructor_id, password
        )

    # =====================================================
    # ATTRACTION LIFECYCLE
    # =====================================================

    def add_attraction(
        self, attraction: Optional[Attraction], instructor_id: str
    ) -> OperationResult:
        """Bind ``attraction`` to the instructor and store it.

        The attraction id is derived from name, location and weekday and can
        collide; the first stored attraction wins and later ones get DUPLICATE.
        """
        try:
            instructor = self._require_instructor(instructor_id)
            if attraction is None:
                raise InvalidInputError("No attraction given")
            if self.attraction_repo.find_by_id(attraction.id) is not None:
                raise DuplicateError(
                    f"An attraction with id '{attraction.id}' already exists"
                )
            with self._undo_on_failure(
                (self.instructor_repo, instructor), (self.attraction_repo, attraction)
            ):
                attraction.instructor = instructor
                instructor.add_attraction(attraction)
                self.instructor_repo.update(instructor.id, instructor)
                if not self.attraction_repo.add(attraction):
                    raise DuplicateError(
                        f"An attraction with id '{attraction.id}' already exists"
                    )
        except RegistrationError as exc:
            return self._failure(
                "add_attraction",
                exc,
                instructor_id=instructor_id,
                attraction_id=getattr(attraction, "id", None),
            )
        logger.info(
            "Attraction added",
            extra={
                "context": {"attraction_id": attraction.id, "instructor_id": instructor.id}
            },
        )
        return OperationResult.ok(attraction)

    def create_attraction(
        self,
        instructor_id: str,
        name: str,
        capacity: Any,
        price: Any,
        location: str,
        weekday: Any,
    ) -> OperationResult:
        """Validate raw input, build an Attraction and add it for the instructor."""
        validation = validate_attraction(
            {
                "name": name,
                "capacity": capacity,
                "price": price,
                "location": location,
                "weekday": weekday,
            }
        )
        if not validation.is_valid:
            return self._failure(
                "create_attraction",
                InvalidInputError("Invalid attraction data", validation.errors),
                instructor_id=instructor_id,
            )
        data = validation.cleaned_data
        attraction = Attraction(
            name=data["name"],
            capacity=data["capacity"],
            price=data["price"],
            location=data["location"],
            weekday=data["weekday"],
        )
        return self.add_attraction(attraction, instructor_id)

    def delete_attraction(self, instructor_id: str, attraction_id: str) -> OperationResult:
        """Cancel an attraction. Only its current instructor may do so.

        Cascades: the attraction leaves the instructor's list, every guest in
        the system drops it and gets its sum recomputed, then it leaves the store.
        """
        try:
            attraction = self._require_attraction(attraction_id)
            instructor = attraction.instructor
            if instructor is None or instructor.id != instructor_id:
                raise UnauthorizedError(
                    f"Instructor '{instructor_id}' does not hold attraction '{attraction_id}'"
                )
            # Full scan: a guest may hold the reference even if the attraction's
            # own guest list was out of step
            guests = self.guest_repo.list_all()
            enrolled = [g for g in guests if g.is_enrolled_in(attraction)]
            affected = len(enrolled)

            # The row itself goes last so earlier writes can still be undone
            with self._undo_on_failure(
                (self.instructor_repo, instructor),
                (self.attraction_repo, attraction),
                *[(self.guest_repo, g) for g in enrolled],
            ):
                instructor.remove_attraction(attraction)
                self.instructor_repo.update(instructor.id, instructor)
                for guest in guests:
                    was_enrolled = guest.is_enrolled_in(attraction)
                    guest.remove_attraction(attraction)
                    if was_enrolled:
                        self.guest_repo.update(guest.id, guest)
                attraction.guests.clear()
                self.attraction_repo.delete(attraction.id)
        except RegistrationError as exc:
            return self._failure(
                "delete_attraction",
                exc,
                instructor_id=instructor_id,
                attraction_id=attraction_id,
            )
        logger.info(
            "Attraction deleted",
            extra={
                "context": {
                    "attraction_id": attraction_id,
                    "instructor_id": instructor_id,
                    "guests_affected": affected,
                }
            },
        )
        return OperationResult.ok(attraction)

    def change_instructor_of_attraction(
        self,
        attraction_id: str,
        new_instructor_id: str,
        requesting_instructor_id: Optional[str] = None,
    ) -> OperationResult:
        """Move an attraction to another instructor.

        When ``requesting_instructor_id`` is given it must be the current
        holder. Guests keep referencing the same attraction object, so they
        see the new instructor immediately.
        """
        try:
            attraction = self._require_attraction(attraction_id)
            new_instructor = self._require_instructor(new_instructor_id)
            old_instructor = attraction.instructor
            if requesting_instructor_id is not None and (
                old_instructor is None or old_instructor.id != requesting_instructor_id
            ):
                raise UnauthorizedError(
                    f"Instructor '{requesting_instructor_id}' does not hold attraction '{attraction_id}'"
                )
            if old_instructor is new_instructor:
                return OperationResult.ok(attraction, message="Instructor unchanged")

            with self._undo_on_failure(
                (self.attraction_repo, attraction),
                (self.instructor_repo, old_instructor),
                (self.instructor_repo, new_instructor),
            ):
                if old_instructor is not None:
                    old_instructor.remove_attraction(attraction)
                attraction.instructor = new_instructor
                new_instructor.add_attraction(attraction)

                self.attraction_repo.update(attraction.id, attraction)
                if old_instructor is not None:
                    self.instructor_repo.update(old_instructor.id, old_instructor)
                self.instructor_repo.update(new_instructor.id, new_instructor)
        except RegistrationError as exc:
            return self._failure(
                "change_instructor_of_attraction",
                exc,
                attraction_id=attraction_id,
                instructor_id=new_instructor_id,
            )
        logger.info(
            "Attraction reassigned",
            extra={
                "context": {
                    "attraction_id": attraction_id,
                    "old_instructor_id": getattr(old_instructor, "id", None),
                    "new_instructor_id": new_instructor_id,
                }
            },
        )
        return OperationResult.ok(attraction)

    # =====================================================
    # ENROLLMENT
    # =====================================================

    def sign_up_for_attraction(self, guest_id: str, attraction_id: str) -> OperationResult:
        """Enroll a guest.

        Checked in order: attraction exists, has a free place, guest exists,
        guest not yet enrolled.
        """
        try:
            attraction = self._require_attraction(attraction_id)
            if not attraction.has_free_places:
                raise CapacityExceededError(
                    f"Attraction '{attraction_id}' has no free places left"
                )
            guest = self._require_guest(guest_id)
            if attraction.has_guest(guest) or guest.is_enrolled_in(attraction):
                raise AlreadyEnrolledError(
                    f"Guest '{guest_id}' is already signed up for '{attraction_id}'"
                )

            with self._undo_on_enrollment_failure(guest, attraction):
                attraction.add_guest(guest)
                guest.add_attraction(attraction)
                self._persist_enrollment_change(guest, attraction)
        except RegistrationError as exc:
            return self._failure(
                "sign_up_for_attraction",
                exc,
                guest_id=guest_id,
                attraction_id=attraction_id,
            )
        logger.info(
            "Guest signed up",
            extra={"context": {"guest_id": guest_id, "attraction_id": attraction_id}},
        )
        return OperationResult.ok(attraction)

    def cancel_sign_up(self, guest_id: str, attraction_id: str) -> OperationResult:
        """Undo a sign-up, restoring the guest's and instructor's sums."""
        try:
            attraction = self._require_attraction(attraction_id)
            guest = self._require_guest(guest_id)
            if not (attraction.has_guest(guest) or guest.is_enrolled_in(attraction)):
                raise NotEnrolledError(
                    f"Guest '{guest_id}' is not signed up for '{attraction_id}'"
                )

            with self._undo_on_enrollment_failure(guest, attraction):
                attraction.remove_guest(guest)
                guest.remove_attraction(attraction)
                self._persist_enrollment_change(guest, attraction)
        except RegistrationError as exc:
            return self._failure(
                "cancel_sign_up", exc, guest_id=guest_id, attraction_id=attraction_id
            )
        logger.info(
            "Sign-up cancelled",
            extra={"context": {"guest_id": guest_id, "attraction_id": attraction_id}},
        )
        return OperationResult.ok(attraction)

    # =====================================================
    # FILTERS AND SORTS
    # =====================================================

    def attractions_with_free_places(self) -> List[Attraction]:
        return self._matching(
            "attractions with free places",
            [a for a in self.list_attractions() if a.has_free_places],
        )

    def attractions_from_weekday(self, weekday: Optional[Weekday]) -> List[Attraction]:
        """Attractions held on ``weekday`` or any later day of the week."""
        if weekday is None:
            return self._matching("attractions from weekday", [])
        return self._matching(
            "attractions from weekday",
            [a for a in self.list_attractions() if a.weekday.number >= weekday.number],
        )

    def attractions_up_to_price(self, max_price: Number) -> List[Attraction]:
        limit = Decimal(str(max_price))
        return self._matching(
            "attractions up to price",
            [a for a in self.list_attractions() if a.price <= limit],
        )

    def attractions_sorted_by_name(self) -> List[Attraction]:
        return sorted(self.list_attractions(), key=lambda a: a.name)

    def attractions_sorted_by_price(self) -> List[Attraction]:
        return sorted(self.list_attractions(), key=lambda a: a.price)

    def attractions_sorted_by_guest_count(self) -> List[Attraction]:
        return sorted(self.list_attractions(), key=lambda a: a.guest_count)

    def guests_sorted_by_sum_desc(self) -> List[Guest]:
        return sorted(self.list_guests(), key=lambda g: g.final_sum, reverse=True)

    # =====================================================
    # PER-ENTITY QUERIES
    # =====================================================

    def guests_of_attraction(self, attraction_id: str) -> OperationResult:
        return self._lookup(
            "guests_of_attraction",
            lambda: list(self._require_attraction(attraction_id).guests),
            attraction_id=attraction_id,
        )

    def attractions_of_guest(self, guest_id: str) -> OperationResult:
        return self._lookup(
            "attractions_of_guest",
            lambda: list(self._require_guest(guest_id).attractions),
            guest_id=guest_id,
        )

    def attractions_of_instructor(self, instructor_id: str) -> OperationResult:
        return self._lookup(
            "attractions_of_instructor",
            lambda: list(self._require_instructor(instructor_id).attractions),
            instructor_id=instructor_id,
        )

    def final_sum_of_guest(self, guest_id: str) -> OperationResult:
        return self._lookup(
            "final_sum_of_guest",
            lambda: self._require_guest(guest_id).final_sum,
            guest_id=guest_id,
        )

    def income_of_instructor(self, instructor_id: str) -> OperationResult:
        return self._lookup(
            "income_of_instructor",
            lambda: self._require_instructor(instructor_id).final_sum,
            instructor_id=instructor_id,
        )

    # =====================================================
    # AGGREGATES
    # =====================================================

    def total_income(self) -> Decimal:
        """Sum of every instructor's income."""
        return sum((i.final_sum for i in self.list_instructors()), ZERO)

    def average_instructor_income(self) -> Decimal:
        instructors = self.list_instructors()
        if not instructors:
            return ZERO
        return self.total_income() / len(instructors)

    def instructors_above_average_income(self) -> List[Instructor]:
        average = self.average_instructor_income()
        return self._matching(
            "instructors above average income",
            [i for i in self.list_instructors() if i.final_sum > average],
        )

    # =====================================================
    # INTERNALS
    # =====================================================

    def _require_attraction(self, attraction_id: str) -> Attraction:
        attraction = self.attraction_repo.find_by_id(attraction_id)
        if attraction is None:
            raise NotFoundError(f"Attraction '{attraction_id}' not found")
        return attraction

    def _require_guest(self, guest_id: str) -> Guest:
        guest = self.guest_repo.find_by_id(guest_id)
        if guest is None:
            raise NotFoundError(f"Guest '{guest_id}' not found")
        return guest

    def _require_instructor(self, instructor_id: str) -> Instructor:
        instructor = self.instructor_repo.find_by_id(instructor_id)
        if instructor is None:
            raise NotFoundError(f"Instructor '{instructor_id}' not found")
        return instructor

    def _persist_enrollment_change(self, guest: Guest, attraction: Attraction) -> None:
        """Recompute the instructor's income and write all three entities."""
        instructor = attraction.instructor
        if instructor is not None:
            instructor.calculate_sum()
        self.guest_repo.update(guest.id, guest)
        self.attraction_repo.update(attraction.id, attraction)
        if instructor is not None:
            self.instructor_repo.update(instructor.id, instructor)

    def _undo_on_enrollment_failure(self, guest: Guest, attraction: Attraction):
        return self._undo_on_failure(
            (self.guest_repo, guest),
            (self.attraction_repo, attraction),
            (self.instructor_repo, attraction.instructor),
        )

    @contextmanager
    def _undo_on_failure(self, *tracked: Tuple[Any, Any]) -> Iterator[None]:
        """Restore the tracked entities if anything in the block raises.

        ``tracked`` holds (repository, entity) pairs; None entities are
        skipped. After restoring, every entity its repository still stores is
        written again, so rows committed before the failure match the graph.
        The original exception is always re-raised.
        """
        snapshots = [
            (repo, entity, _snapshot(entity))
            for repo, entity in tracked
            if entity is not None
        ]
        try:
            yield
        except Exception:
            for _, entity, state in snapshots:
                _restore(entity, state)
            for repo, entity, _ in snapshots:
                if repo.find_by_id(entity.id) is not entity:
                    continue
                try:
                    repo.update(entity.id, entity)
                except Exception:
                    logger.error(
                        "Could not write back restored state",
                        extra={"context": {"id": entity.id}},
                        exc_info=True,
                    )
            raise

    def _authenticate(
        self,
        operation: str,
        require: Callable[[str], Any],
        person_id: str,
        password: str,
    ) -> OperationResult:
        try:
            person = require(person_id)
            if not person.matches_password(password):
                raise UnauthorizedError("Wrong password")
        except RegistrationError as exc:
            return self._failure(operation, exc, person_id=person_id)
        return OperationResult.ok(person)

    def _lookup(self, operation: str, fetch: Callable[[], Any], **context) -> OperationResult:
        try:
            value = fetch()
        except RegistrationError as exc:
            return self._failure(operation, exc, **context)
        if isinstance(value, list) and not value:
            logger.info(
                "No matching data", extra={"context": {"query": operation, **context}}
            )
        return OperationResult.ok(value)

    @staticmethod
    def _matching(query: str, items: list) -> list:
        if not items:
            logger.info("No matching data", extra={"context": {"query": query}})
        return items

    @staticmethod
    def _failure(operation: str, exc: RegistrationError, **context) -> OperationResult:
        logger.warning(
            f"{operation} rejected: {exc.message}",
            extra={
                "context": {"operation": operation, "error": exc.kind.value, **context}
            },
        )
        return OperationResult.failure(exc)


def _snapshot(entity: Any) -> Dict[str, Any]:
    """Field values of ``entity``, with list fields copied."""
    return {
        name: list(value) if isinstance(value, list) else value
        for name, value in vars(entity).items()
    }


def _restore(entity: Any, state: Dict[str, Any]) -> None:
    # Lists are refilled in place; other objects may hold references to them
    for name, value in state.items():
        if isinstance(value, list):
            getattr(entity, name)[:] = value
        else:
            setattr(entity, name, value)
