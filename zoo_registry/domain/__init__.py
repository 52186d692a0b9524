"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Guest, Instructor, Attraction and their derived sums
- interfaces.py: Repository contracts shared by every storage backend
"""

from .entities import (
    Attraction,
    Guest,
    Instructor,
    Person,
    Weekday,
    generate_attraction_id,
)
from .interfaces import (
    IAttractionRepository,
    ICrudReader,
    ICrudRepository,
    ICrudWriter,
    IGuestRepository,
    IInstructorRepository,
)

__all__ = [
    # Domain entities
    "Attraction",
    "Guest",
    "Instructor",
    "Person",
    "Weekday",
    "generate_attraction_id",
    # Repository interfaces
    "IAttractionRepository",
    "IGuestRepository",
    "IInstructorRepository",
    "ICrudRepository",
    # Segregated interfaces
    "ICrudReader",
    "ICrudWriter",
]
