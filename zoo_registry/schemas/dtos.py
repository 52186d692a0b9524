"""
Data Transfer Objects (DTOs) for the JSON API.

Request DTOs carry raw client input; the registration service does the
validation. Response DTOs flatten the entity graph into ids so nothing
recursive ends up in a JSON payload.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


def _money(value) -> float:
    return float(value)


@dataclass
class GuestCreateRequest:
    """DTO for guest registration requests."""

    username: str
    first_name: str
    last_name: str
    password: str
    birthdate: str

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "GuestCreateRequest":
        return cls(
            username=payload.get("username", ""),
            first_name=payload.get("first_name", ""),
            last_name=payload.get("last_name", ""),
            password=payload.get("password", ""),
            birthdate=payload.get("birthdate", ""),
        )


@dataclass
class InstructorCreateRequest:
    """DTO for instructor registration requests."""

    username: str
    first_name: str
    last_name: str
    password: str

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "InstructorCreateRequest":
        return cls(
            username=payload.get("username", ""),
            first_name=payload.get("first_name", ""),
            last_name=payload.get("last_name", ""),
            password=payload.get("password", ""),
        )


@dataclass
class AttractionCreateRequest:
    """DTO for attraction creation requests.

    Capacity, price and weekday stay as text; the service parses them.
    """

    instructor_id: str
    name: str
    capacity: Any
    price: Any
    location: str
    weekday: str

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "AttractionCreateRequest":
        return cls(
            instructor_id=payload.get("instructor_id", ""),
            name=payload.get("name", ""),
            capacity=payload.get("capacity"),
            price=payload.get("price"),
            location=payload.get("location", ""),
            weekday=payload.get("weekday", ""),
        )


@dataclass
class AttractionResponse:
    """DTO for attraction API responses."""

    id: str
    name: str
    capacity: int
    price: float
    location: str
    weekday: str
    instructor_id: Optional[str]
    guest_count: int
    free_places: int
    guest_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_domain(cls, attraction) -> "AttractionResponse":
        """Create response from domain entity."""
        return cls(
            id=attraction.id,
            name=attraction.name,
            capacity=attraction.capacity,
            price=_money(attraction.price),
            location=attraction.location,
            weekday=attraction.weekday.name,
            instructor_id=attraction.instructor.id if attraction.instructor else None,
            guest_count=attraction.guest_count,
            free_places=attraction.free_places,
            guest_ids=[g.id for g in attraction.guests],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GuestResponse:
    """DTO for guest API responses. The password is never exposed."""

    id: str
    first_name: str
    last_name: str
    birthdate: str
    age: int
    final_sum: float
    attraction_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_domain(cls, guest) -> "GuestResponse":
        """Create response from domain entity."""
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            birthdate=guest.birthdate.isoformat(),
            age=guest.age,
            final_sum=_money(guest.final_sum),
            attraction_ids=[a.id for a in guest.attractions],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InstructorResponse:
    """DTO for instructor API responses."""

    id: str
    first_name: str
    last_name: str
    income: float
    attraction_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_domain(cls, instructor) -> "InstructorResponse":
        """Create response from domain entity."""
        return cls(
            id=instructor.id,
            first_name=instructor.first_name,
            last_name=instructor.last_name,
            income=_money(instructor.final_sum),
            attraction_ids=[a.id for a in instructor.attractions],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class IncomeReportResponse:
    """DTO for the income report."""

    total_income: float
    average_income: float
    above_average: List[InstructorResponse]

    @classmethod
    def create(cls, total, average, instructors) -> "IncomeReportResponse":
        return cls(
            total_income=_money(total),
            average_income=_money(average),
            above_average=[InstructorResponse.from_domain(i) for i in instructors],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
