"""
Demo population for the registration system.

Everything goes through the public RegistrationService API, so the seeded
state obeys the same rules as live data: sums are computed by the entities,
duplicate ids are rejected, and full attractions refuse extra guests.
"""

import logging
from datetime import date
from decimal import Decimal

from zoo_registry.domain.entities import Attraction, Guest, Instructor, Weekday

logger = logging.getLogger(__name__)

DEMO_INSTRUCTORS = [
    ("i1", "James", "Parker", "123456"),
    ("i2", "James", "John", "qwerty"),
    ("i3", "Lucy", "Misterious", "abc123"),
    ("i4", "Katy", "Gal", "123321"),
    ("i5", "Camila", "Pop", "password1"),
    ("i6", "Mircea", "Miron", "abcd1234"),
]

# (name, capacity, instructor id, price, location, weekday)
DEMO_ATTRACTIONS = [
    ("Zoo time", 100, "i1", "180.99", "A456", Weekday.MONDAY),
    ("Elephantastic", 200, "i2", "99.99", "B456", Weekday.TUESDAY),
    ("Fluffy Animals", 10, "i3", "55.00", "A456", Weekday.WEDNESDAY),
    ("Angry Panda", 17, "i4", "70.00", "X588", Weekday.THURSDAY),
    ("White Lion", 8, "i5", "250.00", "F444", Weekday.FRIDAY),
    ("White Lion", 80, "i2", "170.89", "T545", Weekday.SATURDAY),
    ("White Lion", 55, "i4", "60.50", "RQ67", Weekday.SUNDAY),
    ("VIP zoo show", 10, "i6", "300.87", "BRT60", Weekday.WEDNESDAY),
]

DEMO_GUESTS = [
    ("maria01", "Maria", "Kis", "KM01", date(2002, 2, 1)),
    ("ioana.petru", "Ioana", "Petru", "1b38TC1li", date(1997, 2, 1)),
    ("comsa_ana", "Ana", "Comsa", "abcd123", date(1967, 3, 1)),
    ("pop.oti", "Otilia", "Pop", "animals", date(2002, 4, 11)),
    ("ion123", "Ion", "Ionut", "zoo", date(1989, 8, 12)),
    ("timi11", "Timea", "Gal", "gtig", date(2009, 2, 1)),
    ("g.emese", "Emese", "Gal", "bcn10", date(2010, 7, 16)),
    ("ecaterinaa", "Ecaterina", "Popa", "password123", date(2021, 11, 18)),
    ("katy99", "Katy", "Perry", "1234", date(2018, 3, 3)),
    ("gomez.s", "Selena", "Gomez", "selenaa", date(2001, 5, 28)),
    ("bieber_justin", "Justin", "Bieber", "success", date(2000, 3, 23)),
    ("celined", "Céline", "Dion", "titanic", date(1970, 12, 24)),
    ("leo_dicaprio", "Leonardo", "DiCaprio", "titanic", date(1956, 8, 8)),
    ("roberts.julia", "Julia", "Roberts", "sunshine", date(1999, 7, 7)),
    ("tom_hanks", "Tom", "Hanks", "summer", date(1999, 11, 12)),
    ("gibson_mel", "Mel", "Gibson", "abc123", date(1988, 2, 1)),
    ("jackie23", "Jackie", "Chan", "passw0rd", date(1995, 3, 16)),
    ("terence_hill", "Terence", "Hill", "111111", date(1988, 9, 29)),
]

# Indexes into DEMO_ATTRACTIONS / DEMO_GUESTS
VIP_SHOW_GUESTS = (0, 2, 4, 6, 8, 10, 12, 14, 16, 17)
WHITE_LION_FRIDAY_GUESTS = (0, 1, 2, 3)
DEMO_ENROLLMENTS = [(7, VIP_SHOW_GUESTS), (4, WHITE_LION_FRIDAY_GUESTS)]


def seed_demo_population(service) -> bool:
    """
    Populate ``service`` with the demo instructors, attractions and guests.

    Idempotent: returns False without touching anything when instructors
    already exist (e.g. a persistent database seeded on a previous run).
    """
    if service.list_instructors():
        logger.info("Demo data already present, skipping seed")
        return False

    for instructor_id, first_name, last_name, password in DEMO_INSTRUCTORS:
        service.add_instructor(
            Instructor(
                id=instructor_id,
                first_name=first_name,
                last_name=last_name,
                password=password,
            )
        )

    attraction_ids = []
    for name, capacity, instructor_id, price, location, weekday in DEMO_ATTRACTIONS:
        attraction = Attraction(
            name=name,
            capacity=capacity,
            price=Decimal(price),
            location=location,
            weekday=weekday,
        )
        service.add_attraction(attraction, instructor_id)
        attraction_ids.append(attraction.id)

    guest_ids = []
    for username, first_name, last_name, password, birthdate in DEMO_GUESTS:
        service.add_guest(
            Guest(
                id=username,
                first_name=first_name,
                last_name=last_name,
                password=password,
                birthdate=birthdate,
            )
        )
        guest_ids.append(username)

    for attraction_index, guest_indexes in DEMO_ENROLLMENTS:
        for guest_index in guest_indexes:
            service.sign_up_for_attraction(
                guest_ids[guest_index], attraction_ids[attraction_index]
            )

    logger.info(
        "Demo data seeded",
        extra={
            "context": {
                "instructors": len(DEMO_INSTRUCTORS),
                "attractions": len(attraction_ids),
                "guests": len(guest_ids),
            }
        },
    )
    return True
