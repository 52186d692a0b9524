"""
Unit tests for RegistrationService attraction lifecycle and registration.

This module tests:
- Adding attractions, including id collisions
- Deleting attractions with the cascade over every guest
- Reassigning attractions between instructors
- Input-driven registration and authentication
"""

from decimal import Decimal

import pytest

from tests.conftest import make_attraction, make_guest, make_instructor
from zoo_registry.core.exceptions import ErrorKind
from zoo_registry.domain.entities import Weekday


@pytest.fixture
def two_instructors(service):
    old = make_instructor("i1")
    new = make_instructor("i2")
    service.add_instructor(old)
    service.add_instructor(new)
    return old, new


@pytest.mark.unit
@pytest.mark.services
class TestAddAttraction:
    def test_binds_instructor(self, service):
        instructor = make_instructor("i1")
        service.add_instructor(instructor)
        attraction = make_attraction()

        result = service.add_attraction(attraction, "i1")

        assert result
        assert attraction.instructor is instructor
        assert instructor.attractions == [attraction]
        assert service.find_attraction("ZA-MON") is attraction

    def test_unknown_instructor(self, service):
        result = service.add_attraction(make_attraction(), "ghost")

        assert result.error is ErrorKind.NOT_FOUND
        assert service.list_attractions() == []

    def test_missing_attraction(self, service):
        service.add_instructor(make_instructor("i1"))

        assert service.add_attraction(None, "i1").error is ErrorKind.INVALID_INPUT

    def test_colliding_id_keeps_first(self, service):
        instructor = make_instructor("i1")
        service.add_instructor(instructor)
        lion = make_attraction("White Lion", location="F1", weekday=Weekday.FRIDAY)
        lynx = make_attraction("Wild Lynx", location="F2", weekday=Weekday.FRIDAY)
        service.add_attraction(lion, "i1")

        result = service.add_attraction(lynx, "i1")

        assert result.error is ErrorKind.DUPLICATE
        assert service.find_attraction("WF-FRI") is lion
        assert instructor.attractions == [lion]
        assert lynx.instructor is None

    def test_adding_same_attraction_twice(self, service, instructor_with_attraction):
        _, attraction = instructor_with_attraction

        assert service.add_attraction(attraction, "i1").error is ErrorKind.DUPLICATE
        assert len(service.list_attractions()) == 1


@pytest.mark.unit
@pytest.mark.services
class TestDeleteAttraction:
    def test_cascade_removes_every_reference(self, service, instructor_with_attraction):
        instructor, attraction = instructor_with_attraction
        keep = make_attraction("Keep", price="10", location="K")
        service.add_attraction(keep, "i1")
        for guest_id in ("ana", "bob"):
            service.add_guest(make_guest(guest_id, age=30))
            service.sign_up_for_attraction(guest_id, attraction.id)
        service.sign_up_for_attraction("ana", keep.id)

        result = service.delete_attraction("i1", attraction.id)

        assert result
        assert service.find_attraction(attraction.id) is None
        assert instructor.attractions == [keep]
        assert instructor.final_sum == Decimal("10")
        ana = service.find_guest("ana")
        bob = service.find_guest("bob")
        assert ana.attractions == [keep]
        assert ana.final_sum == Decimal("10")
        assert bob.attractions == []
        assert bob.final_sum == Decimal("0")

    def test_wrong_instructor_is_unauthorized(self, service, two_instructors):
        old, _ = two_instructors
        attraction = make_attraction()
        service.add_attraction(attraction, "i1")
        guest = make_guest("ana")
        service.add_guest(guest)
        service.sign_up_for_attraction("ana", attraction.id)
        guest_sum = guest.final_sum
        income = old.final_sum

        result = service.delete_attraction("i2", attraction.id)

        assert result.error is ErrorKind.UNAUTHORIZED
        assert service.find_attraction(attraction.id) is attraction
        assert old.attractions == [attraction]
        assert guest.attractions == [attraction]
        assert attraction.guests == [guest]
        assert guest.final_sum == guest_sum
        assert old.final_sum == income

    def test_unknown_attraction(self, service, two_instructors):
        assert service.delete_attraction("i1", "XX-MON").error is ErrorKind.NOT_FOUND


@pytest.mark.unit
@pytest.mark.services
class TestChangeInstructor:
    def test_reassign_moves_attraction(self, service, two_instructors):
        old, new = two_instructors
        attraction = make_attraction(price="50")
        service.add_attraction(attraction, "i1")
        guest = make_guest("ana", age=30)
        service.add_guest(guest)
        service.sign_up_for_attraction("ana", attraction.id)

        result = service.change_instructor_of_attraction(attraction.id, "i2")

        assert result
        assert not old.holds(attraction)
        assert new.holds(attraction)
        assert old.final_sum == Decimal("0")
        assert new.final_sum == Decimal("50")
        # The guest holds the same object, so it sees the new owner
        assert guest.attractions[0].instructor is new

    def test_requester_must_be_current_owner(self, service, two_instructors):
        old, new = two_instructors
        attraction = make_attraction()
        service.add_attraction(attraction, "i1")

        result = service.change_instructor_of_attraction(attraction.id, "i2", "i2")

        assert result.error is ErrorKind.UNAUTHORIZED
        assert attraction.instructor is old
        assert new.attractions == []

    def test_owner_can_hand_over(self, service, two_instructors):
        _, new = two_instructors
        attraction = make_attraction()
        service.add_attraction(attraction, "i1")

        assert service.change_instructor_of_attraction(attraction.id, "i2", "i1")
        assert attraction.instructor is new

    def test_reassign_to_current_owner_is_noop(self, service, two_instructors):
        old, _ = two_instructors
        attraction = make_attraction()
        service.add_attraction(attraction, "i1")

        result = service.change_instructor_of_attraction(attraction.id, "i1")

        assert result
        assert old.attractions == [attraction]

    def test_unknown_ids(self, service, two_instructors):
        attraction = make_attraction()
        service.add_attraction(attraction, "i1")

        assert (
            service.change_instructor_of_attraction("XX-MON", "i2").error
            is ErrorKind.NOT_FOUND
        )
        assert (
            service.change_instructor_of_attraction(attraction.id, "ghost").error
            is ErrorKind.NOT_FOUND
        )


@pytest.mark.unit
@pytest.mark.services
class TestRegistration:
    def test_register_guest(self, service):
        result = service.register_guest("maria01", "Maria", "Kis", "KM01", "2002-02-01")

        assert result
        assert service.find_guest("maria01") is result.value
        assert result.value.birthdate.year == 2002

    def test_register_guest_invalid_input(self, service):
        result = service.register_guest("Maria", "M4ria", "Kis", "x", "yesterday")

        assert result.error is ErrorKind.INVALID_INPUT
        assert len(result.errors) == 4
        assert service.list_guests() == []

    def test_register_duplicate_guest(self, service):
        service.register_guest("maria01", "Maria", "Kis", "KM01", "2002-02-01")

        result = service.register_guest("maria01", "Other", "Kis", "KM01", "2002-02-01")

        assert result.error is ErrorKind.DUPLICATE
        assert service.find_guest("maria01").first_name == "Maria"
        assert len(service.list_guests()) == 1

    def test_register_instructor(self, service):
        assert service.register_instructor("lucy", "Lucy", "Misterious", "abc123")
        assert (
            service.register_instructor("lucy", "Lucy", "M", "abc123").error
            is ErrorKind.DUPLICATE
        )
        assert (
            service.register_instructor("", "Lucy", "M", "abc123").error
            is ErrorKind.INVALID_INPUT
        )

    def test_create_attraction_from_text(self, service):
        service.add_instructor(make_instructor("i1"))

        result = service.create_attraction("i1", "Zoo time", "100", "180.99", "A456", "Monday")

        assert result
        assert result.value.id == "ZA-MON"
        assert result.value.price == Decimal("180.99")
        assert result.value.capacity == 100

    def test_create_attraction_invalid_text(self, service):
        service.add_instructor(make_instructor("i1"))

        result = service.create_attraction("i1", "Zoo time", "0", "abc", "A456", "Moonday")

        assert result.error is ErrorKind.INVALID_INPUT
        assert len(result.errors) == 3

    def test_create_attraction_non_text_input(self, service):
        service.add_instructor(make_instructor("i1"))

        result = service.create_attraction("i1", "Zoo time", "10", "100", "A1", 3)

        assert result.error is ErrorKind.INVALID_INPUT
        assert result.errors[0].startswith("weekday")
        assert service.list_attractions() == []

    def test_create_attraction_sub_cent_price(self, service):
        service.add_instructor(make_instructor("i1"))

        result = service.create_attraction("i1", "Zoo time", "10", "10.005", "A1", "Monday")

        assert result.error is ErrorKind.INVALID_INPUT
        assert service.list_attractions() == []

    def test_register_non_text_input(self, service):
        assert (
            service.register_instructor("ina", 123, "Doe", "secret").error
            is ErrorKind.INVALID_INPUT
        )
        assert (
            service.register_guest(123, "Ana", "Pop", "secret", "1990-01-01").error
            is ErrorKind.INVALID_INPUT
        )
        assert service.list_instructors() == []
        assert service.list_guests() == []

    def test_authenticate(self, service):
        service.add_guest(make_guest("ana", password="pw1"))
        service.add_instructor(make_instructor("i1", password="pw2"))

        assert service.authenticate_guest("ana", "pw1").value.id == "ana"
        assert service.authenticate_guest("ana", "nope").error is ErrorKind.UNAUTHORIZED
        assert service.authenticate_guest("bob", "pw1").error is ErrorKind.NOT_FOUND
        assert service.authenticate_instructor("i1", "pw2")
        assert (
            service.authenticate_instructor("i1", "pw1").error is ErrorKind.UNAUTHORIZED
        )
