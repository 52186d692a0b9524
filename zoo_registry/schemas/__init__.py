"""
Schemas package - Data Transfer Objects for the JSON API.
"""

from .dtos import (
    AttractionCreateRequest,
    AttractionResponse,
    GuestCreateRequest,
    GuestResponse,
    IncomeReportResponse,
    InstructorCreateRequest,
    InstructorResponse,
)

__all__ = [
    # Request DTOs
    "AttractionCreateRequest",
    "GuestCreateRequest",
    "InstructorCreateRequest",
    # Response DTOs
    "AttractionResponse",
    "GuestResponse",
    "InstructorResponse",
    "IncomeReportResponse",
]
