"""
Unit tests for the domain entities.

This module tests:
- Constructor validation and id derivation
- Age and discount rules for guests
- Instructor income weighting
- Field-wise merge used by repository updates
"""

from datetime import date
from decimal import Decimal

import pytest

from tests.conftest import make_attraction, make_guest, make_instructor
from zoo_registry.domain.entities import (
    Attraction,
    Guest,
    Instructor,
    Weekday,
    generate_attraction_id,
)


@pytest.mark.unit
class TestWeekday:
    def test_from_text_is_case_insensitive(self):
        assert Weekday.from_text("monday") is Weekday.MONDAY
        assert Weekday.from_text("  SunDay ") is Weekday.SUNDAY

    def test_from_text_unknown_day(self):
        assert Weekday.from_text("Funday") is None
        assert Weekday.from_text("") is None
        assert Weekday.from_text(None) is None
        assert Weekday.from_text(3) is None

    def test_numbers_follow_week_order(self):
        assert [d.number for d in Weekday] == [1, 2, 3, 4, 5, 6, 7]
        assert Weekday.THURSDAY.abbreviation == "THU"


@pytest.mark.unit
class TestAttraction:
    def test_id_is_derived_from_name_location_and_weekday(self):
        attraction = make_attraction("Zoo time", location="A456", weekday=Weekday.MONDAY)

        assert attraction.id == "ZA-MON"
        assert generate_attraction_id("VIP zoo show", "BRT60", Weekday.WEDNESDAY) == "VB-WED"

    def test_different_attractions_can_share_an_id(self):
        lion = make_attraction("White Lion", location="F1", weekday=Weekday.FRIDAY)
        lynx = make_attraction("Wild Lynx", location="F2", weekday=Weekday.FRIDAY)

        assert lion.id == lynx.id

    def test_price_is_kept_exact(self):
        attraction = Attraction(
            name="Zoo time", capacity=5, price=180.99, location="A1", weekday=Weekday.MONDAY
        )

        assert attraction.price == Decimal("180.99")

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"name": ""}, "name is required"),
            ({"location": ""}, "location is required"),
            ({"capacity": 0}, "Capacity must be positive"),
            ({"price": "-1"}, "Price cannot be negative"),
            ({"price": "10.005"}, "at most 2 decimal places"),
        ],
    )
    def test_invalid_attraction_rejected(self, overrides, message):
        data = {"name": "Zoo time", "capacity": 10, "price": "10", "location": "A1"}
        data.update(overrides)

        with pytest.raises(ValueError, match=message):
            make_attraction(**data)

    def test_free_places(self):
        attraction = make_attraction(capacity=2)
        attraction.add_guest(make_guest("ana"))

        assert attraction.free_places == 1
        assert attraction.has_free_places

        attraction.add_guest(make_guest("bob"))
        assert not attraction.has_free_places

    def test_add_guest_ignores_same_reference(self):
        attraction = make_attraction()
        guest = make_guest("ana")

        attraction.add_guest(guest)
        attraction.add_guest(guest)

        assert attraction.guest_count == 1

    def test_guests_compared_by_identity(self):
        attraction = make_attraction()
        attraction.add_guest(make_guest("ana"))

        # Same field values, different object
        assert not attraction.has_guest(make_guest("ana"))

    def test_merge_keeps_id(self):
        attraction = make_attraction("Zoo time", location="A456")
        other = make_attraction("Other", capacity=3, price="5", location="B1")

        attraction.merge_from(other)

        assert attraction.id == "ZA-MON"
        assert attraction.name == "Other"
        assert attraction.capacity == 3


@pytest.mark.unit
class TestGuest:
    def test_birthdate_required(self):
        with pytest.raises(ValueError, match="Birthdate is required"):
            Guest(id="ana", first_name="Ana", password="x")

    def test_id_required(self):
        with pytest.raises(ValueError, match="Id is required"):
            Guest(first_name="Ana", birthdate=date(2000, 1, 1))

    def test_age_on_counts_whole_years(self):
        guest = make_guest("ana", birthdate=date(2000, 3, 10))

        assert guest.age_on(date(2020, 3, 9)) == 19
        assert guest.age_on(date(2020, 3, 10)) == 20

    @pytest.mark.parametrize(
        "age, multiplier",
        [(15, "0.5"), (17, "0.5"), (18, "1"), (40, "1"), (60, "1"), (61, "0.8"), (75, "0.8")],
    )
    def test_discount_multiplier(self, age, multiplier):
        assert make_guest("ana", age=age).discount_multiplier == Decimal(multiplier)

    def test_minor_pays_half_of_all_tickets(self):
        guest = make_guest("teen", age=15)

        guest.add_attraction(make_attraction("A", price="100", location="X"))
        guest.add_attraction(make_attraction("B", price="50", location="Y"))

        assert guest.final_sum == Decimal("75")

    def test_remove_attraction_recomputes(self):
        guest = make_guest("ana", age=30)
        cheap = make_attraction("A", price="10", location="X")
        dear = make_attraction("B", price="90", location="Y")
        guest.add_attraction(cheap)
        guest.add_attraction(dear)

        guest.remove_attraction(dear)

        assert guest.final_sum == Decimal("10")
        assert guest.attractions == [cheap]

    def test_remove_absent_attraction_is_noop(self):
        guest = make_guest("ana")
        guest.add_attraction(make_attraction())

        guest.remove_attraction(make_attraction())

        assert len(guest.attractions) == 1

    def test_password_check(self):
        guest = make_guest("ana", password="abc")

        assert guest.matches_password("abc")
        assert not guest.matches_password("abd")

    def test_merge_from_copies_fields_but_not_id(self):
        guest = make_guest("ana")
        other = make_guest("other", first_name="Anna", last_name="New", password="pw")

        guest.merge_from(other)

        assert guest.id == "ana"
        assert guest.full_name == "Anna New"
        assert guest.password == "pw"


@pytest.mark.unit
class TestInstructor:
    def test_income_weights_minors_and_seniors(self):
        instructor = make_instructor("i1")
        attraction = make_attraction(price="100", instructor=instructor)
        for guest_id, age in (("kid1", 10), ("kid2", 10), ("senior", 70)):
            attraction.add_guest(make_guest(guest_id, age=age))

        instructor.add_attraction(attraction)

        assert instructor.final_sum == Decimal("180")

    def test_income_sums_every_attraction(self):
        instructor = make_instructor("i1")
        first = make_attraction("A", price="20", location="X")
        second = make_attraction("B", price="30", location="Y")
        first.add_guest(make_guest("ana"))
        second.add_guest(make_guest("bob"))
        second.add_guest(make_guest("cid"))

        instructor.add_attraction(first)
        instructor.add_attraction(second)

        assert instructor.final_sum == Decimal("80")

    def test_remove_attraction_recomputes(self):
        instructor = make_instructor("i1")
        attraction = make_attraction(price="20")
        attraction.add_guest(make_guest("ana"))
        instructor.add_attraction(attraction)

        instructor.remove_attraction(attraction)

        assert instructor.final_sum == Decimal("0")
        assert not instructor.holds(attraction)

    def test_first_name_required(self):
        with pytest.raises(ValueError, match="First name is required"):
            Instructor(id="i1", first_name="")
