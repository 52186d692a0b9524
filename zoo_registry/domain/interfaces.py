"""
Abstract interfaces for repositories following Interface Segregation Principle.

Both the in-memory backend and the SQLAlchemy backend implement these
contracts with identical, synchronous semantics:

- add(entity): rejects a duplicate id by returning False (store unchanged)
- delete(id): returns False when the id is unknown
- update(id, entity): field-wise merge into the stored instance, so every
  holder of a reference to that instance observes the change
- find_by_id(id): the stored instance or None
- list_all(): stored instances in insertion order
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from .entities import Attraction, Guest, Instructor

E = TypeVar("E")


class ICrudReader(ABC, Generic[E]):
    """Interface for read operations."""

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[E]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def list_all(self) -> List[E]:
        """Get all entities in insertion order."""
        pass

    def count(self) -> int:
        return len(self.list_all())


class ICrudWriter(ABC, Generic[E]):
    """Interface for write operations."""

    @abstractmethod
    def add(self, entity: E) -> bool:
        """Store a new entity. False if the id is already taken."""
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Remove an entity. False if the id is unknown."""
        pass

    @abstractmethod
    def update(self, entity_id: str, entity: E) -> bool:
        """Merge ``entity`` field by field into the stored instance."""
        pass


class ICrudRepository(ICrudReader[E], ICrudWriter[E]):
    """Complete repository interface combining read/write operations."""

    pass


class IGuestRepository(ICrudRepository[Guest]):
    """Complete guest repository interface."""

    pass


class IInstructorRepository(ICrudRepository[Instructor]):
    """Complete instructor repository interface."""

    pass


class IAttractionRepository(ICrudRepository[Attraction]):
    """Complete attraction repository interface."""

    pass
