"""
Unit tests for the demo population.
"""

import pytest

from zoo_registry.db.seed import (
    DEMO_ATTRACTIONS,
    DEMO_GUESTS,
    DEMO_INSTRUCTORS,
    seed_demo_population,
)


@pytest.mark.unit
class TestSeedDemoPopulation:
    def test_population_sizes(self, seeded_service):
        assert len(seeded_service.list_instructors()) == len(DEMO_INSTRUCTORS) == 6
        assert len(seeded_service.list_attractions()) == len(DEMO_ATTRACTIONS) == 8
        assert len(seeded_service.list_guests()) == len(DEMO_GUESTS) == 18

    def test_enrollments(self, seeded_service):
        vip = seeded_service.find_attraction("VB-WED")
        lion = seeded_service.find_attraction("WF-FRI")

        assert vip.guest_count == vip.capacity == 10
        assert [g.id for g in lion.guests] == [
            "maria01",
            "ioana.petru",
            "comsa_ana",
            "pop.oti",
        ]

    def test_links_are_consistent(self, seeded_service):
        for attraction in seeded_service.list_attractions():
            assert attraction.guest_count <= attraction.capacity
            assert attraction.instructor.holds(attraction)
            for guest in attraction.guests:
                assert guest.is_enrolled_in(attraction)
        for guest in seeded_service.list_guests():
            for attraction in guest.attractions:
                assert attraction.has_guest(guest)

    def test_seeding_twice_is_skipped(self, seeded_service):
        assert seed_demo_population(seeded_service) is False
        assert len(seeded_service.list_guests()) == 18

    def test_fresh_service_is_empty(self, service):
        assert service.list_instructors() == []
        assert service.list_guests() == []
