"""Repository backends.

Both backends implement the contracts in zoo_registry.domain.interfaces:
- in_memory: volatile dict storage
- guest_repo / instructor_repo / attraction_repo: SQLAlchemy storage sharing
  an identity map per session
"""

from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from zoo_registry.core.config import BACKEND_MEMORY, BACKEND_SQL
from zoo_registry.domain.interfaces import (
    IAttractionRepository,
    IGuestRepository,
    IInstructorRepository,
)

from .attraction_repo import AttractionRepository
from .guest_repo import GuestRepository
from .in_memory import (
    InMemoryAttractionRepository,
    InMemoryGuestRepository,
    InMemoryInstructorRepository,
)
from .instructor_repo import InstructorRepository


class RepositoryBundle(NamedTuple):
    attractions: IAttractionRepository
    guests: IGuestRepository
    instructors: IInstructorRepository


def create_repositories(
    backend: str = BACKEND_MEMORY, db_session: Optional[Session] = None
) -> RepositoryBundle:
    """Build the three repositories for ``backend`` ("memory" or "sql")."""
    if backend == BACKEND_MEMORY:
        return RepositoryBundle(
            attractions=InMemoryAttractionRepository(),
            guests=InMemoryGuestRepository(),
            instructors=InMemoryInstructorRepository(),
        )
    if backend == BACKEND_SQL:
        if db_session is None:
            raise ValueError("The sql backend needs a database session")
        return RepositoryBundle(
            attractions=AttractionRepository(db_session),
            guests=GuestRepository(db_session),
            instructors=InstructorRepository(db_session),
        )
    raise ValueError(f"Unknown repository backend: {backend}")


__all__ = [
    "AttractionRepository",
    "GuestRepository",
    "InstructorRepository",
    "InMemoryAttractionRepository",
    "InMemoryGuestRepository",
    "InMemoryInstructorRepository",
    "RepositoryBundle",
    "create_repositories",
]
