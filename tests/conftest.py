"""
Central pytest configuration for the zoo registration system tests.

This file provides common fixtures shared by unit and integration tests:
- entity builders with deterministic ages
- services over the in-memory backend, empty or seeded with demo data
- an in-memory SQLite database for the SQLAlchemy backend
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from zoo_registry.db.seed import seed_demo_population
from zoo_registry.db.session import build_engine, create_tables
from zoo_registry.domain.entities import Attraction, Guest, Instructor, Weekday
from zoo_registry.repositories import create_repositories
from zoo_registry.services.registration_service import RegistrationService

TEST_DATABASE_URL = "sqlite:///:memory:"


def birthdate_for_age(age: int) -> date:
    """Birthdate that makes a guest exactly ``age`` years old today."""
    return date(date.today().year - age, 1, 1)


def make_guest(guest_id: str, age: int = 30, **overrides) -> Guest:
    data = {
        "id": guest_id,
        "first_name": guest_id.capitalize(),
        "last_name": "Tester",
        "password": "secret",
        "birthdate": birthdate_for_age(age),
    }
    data.update(overrides)
    return Guest(**data)


def make_instructor(instructor_id: str, **overrides) -> Instructor:
    data = {
        "id": instructor_id,
        "first_name": "Ina",
        "last_name": instructor_id.upper(),
        "password": "secret",
    }
    data.update(overrides)
    return Instructor(**data)


def make_attraction(
    name: str = "Zoo time",
    capacity: int = 10,
    price="100",
    location: str = "A456",
    weekday: Weekday = Weekday.MONDAY,
    **overrides,
) -> Attraction:
    return Attraction(
        name=name,
        capacity=capacity,
        price=Decimal(str(price)),
        location=location,
        weekday=weekday,
        **overrides,
    )


def build_service(repos) -> RegistrationService:
    return RegistrationService(repos.attractions, repos.guests, repos.instructors)


# =====================================================
# SERVICES
# =====================================================


@pytest.fixture
def memory_repos():
    """Fresh in-memory repositories."""
    return create_repositories("memory")


@pytest.fixture
def service(memory_repos) -> RegistrationService:
    """Empty service over the in-memory backend."""
    return build_service(memory_repos)


@pytest.fixture
def seeded_service(service) -> RegistrationService:
    """In-memory service populated with the demo data."""
    seed_demo_population(service)
    return service


@pytest.fixture
def instructor_with_attraction(service):
    """One instructor "i1" holding a capacity-10 attraction priced 100."""
    instructor = make_instructor("i1")
    service.add_instructor(instructor)
    attraction = make_attraction()
    service.add_attraction(attraction, "i1")
    return instructor, attraction


# =====================================================
# DATABASE
# =====================================================


@pytest.fixture
def sqlite_engine():
    """Private in-memory SQLite database with all tables created."""
    engine = build_engine(TEST_DATABASE_URL)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sql_repos(db_session):
    return create_repositories("sql", db_session)


@pytest.fixture
def sql_service(sql_repos) -> RegistrationService:
    """Service over the SQLAlchemy backend."""
    return build_service(sql_repos)
