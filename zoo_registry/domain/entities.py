"""
Domain entities - Pure business logic, no framework dependencies.

Guests, Instructors and Attractions reference each other directly:
- An Attraction holds exactly one Instructor and a list of enrolled Guests
- An Instructor holds the list of Attractions it presents
- A Guest holds the list of Attractions it is enrolled in

Each entity owns the recomputation of its own derived sum. Keeping the
two sides of a relationship in agreement is the job of the caller
(the registration service).
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

ZERO = Decimal("0")

# Guest side: flat multiplier on the whole bill
SENIOR_MULTIPLIER = Decimal("0.8")
MINOR_MULTIPLIER = Decimal("0.5")

# Instructor side: per-attendee weighting
MINOR_ATTENDEE_DISCOUNT = Decimal("0.5")
SENIOR_ATTENDEE_DISCOUNT = Decimal("0.2")

MINOR_AGE_LIMIT = 18
SENIOR_AGE_LIMIT = 60


def has_sub_cent_digits(amount: Decimal) -> bool:
    """True when a finite amount carries more than two decimal places."""
    return amount.is_finite() and amount.normalize().as_tuple().exponent < -2


class Weekday(Enum):
    """Day on which an attraction is held. The value is the day number."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def number(self) -> int:
        return self.value

    @property
    def abbreviation(self) -> str:
        return self.name[:3]

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["Weekday"]:
        """Case-insensitive lookup by name. Returns None when nothing matches."""
        if not isinstance(text, str) or not text:
            return None
        return cls.__members__.get(text.strip().upper())


def generate_attraction_id(name: str, location: str, weekday: Weekday) -> str:
    """Build the attraction id: first letters of name and location plus weekday.

    Two different attractions can end up with the same id
    (e.g. "White Lion" and "Wild Lynx" in "F1" on Friday), so callers must
    check for an existing id before storing.
    """
    return f"{name[:1]}{location[:1]}-{weekday.abbreviation}"


@dataclass(eq=False)
class Person:
    """Common state for guests and instructors. Compared by identity."""

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    password: str = ""
    final_sum: Decimal = ZERO

    def __post_init__(self):
        """Validate domain rules."""
        if not self.id:
            raise ValueError("Id is required")
        if not self.first_name:
            raise ValueError("First name is required")
        self.final_sum = Decimal(str(self.final_sum))

    @property
    def full_name(self) -> str:
        """Return full name."""
        return f"{self.first_name} {self.last_name}".strip()

    def matches_password(self, password: str) -> bool:
        return self.password == password

    def calculate_sum(self) -> Decimal:  # pragma: no cover - interface definition
        raise NotImplementedError("Subclasses must implement calculate_sum")

    def _merge_person_fields(self, other: "Person") -> None:
        self.first_name = other.first_name
        self.last_name = other.last_name
        self.password = other.password
        self.final_sum = other.final_sum


@dataclass(eq=False)
class Guest(Person):
    """Ticket holder enrolled in attractions.

    ``attractions`` is a back-reference list: the guest does not own the
    attractions it is enrolled in.
    """

    birthdate: Optional[date] = None
    attractions: List["Attraction"] = field(default_factory=list, repr=False)

    def __post_init__(self):
        super().__post_init__()
        if self.birthdate is None:
            raise ValueError("Birthdate is required")

    def age_on(self, day: date) -> int:
        """Whole years between birthdate and ``day``."""
        years = day.year - self.birthdate.year
        if (day.month, day.day) < (self.birthdate.month, self.birthdate.day):
            years -= 1
        return years

    @property
    def age(self) -> int:
        return self.age_on(date.today())

    @property
    def discount_multiplier(self) -> Decimal:
        age = self.age
        if age > SENIOR_AGE_LIMIT:
            return SENIOR_MULTIPLIER
        if age < MINOR_AGE_LIMIT:
            return MINOR_MULTIPLIER
        return Decimal("1")

    def is_enrolled_in(self, attraction: "Attraction") -> bool:
        return any(a is attraction for a in self.attractions)

    def add_attraction(self, attraction: "Attraction") -> None:
        if not self.is_enrolled_in(attraction):
            self.attractions.append(attraction)
        self.calculate_sum()

    def remove_attraction(self, attraction: "Attraction") -> None:
        self.attractions[:] = [a for a in self.attractions if a is not attraction]
        self.calculate_sum()

    def calculate_sum(self) -> Decimal:
        """Sum of enrolled ticket prices times the age multiplier."""
        total = sum((a.price for a in self.attractions), ZERO)
        self.final_sum = total * self.discount_multiplier
        return self.final_sum

    def merge_from(self, other: "Guest") -> None:
        """Copy every field except the id from ``other`` onto this instance."""
        if other is self:
            return
        self._merge_person_fields(other)
        self.birthdate = other.birthdate
        self.attractions[:] = list(other.attractions)


@dataclass(eq=False)
class Instructor(Person):
    """Staff member who owns attractions and earns from their attendees."""

    attractions: List["Attraction"] = field(default_factory=list, repr=False)

    def holds(self, attraction: "Attraction") -> bool:
        return any(a is attraction for a in self.attractions)

    def add_attraction(self, attraction: "Attraction") -> None:
        if not self.holds(attraction):
            self.attractions.append(attraction)
        self.calculate_sum()

    def remove_attraction(self, attraction: "Attraction") -> None:
        self.attractions[:] = [a for a in self.attractions if a is not attraction]
        self.calculate_sum()

    def calculate_sum(self) -> Decimal:
        """Income: price x (attendees - 0.5 x minors - 0.2 x seniors) per attraction."""
        income = ZERO
        for attraction in self.attractions:
            weighted_attendees = (
                attraction.guest_count
                - MINOR_ATTENDEE_DISCOUNT * attraction.count_guests_under(MINOR_AGE_LIMIT)
                - SENIOR_ATTENDEE_DISCOUNT * attraction.count_guests_over(SENIOR_AGE_LIMIT)
            )
            income += attraction.price * weighted_attendees
        self.final_sum = income
        return self.final_sum

    def merge_from(self, other: "Instructor") -> None:
        if other is self:
            return
        self._merge_person_fields(other)
        self.attractions[:] = list(other.attractions)


@dataclass(eq=False)
class Attraction:
    """Scheduled, capacity-limited show held by exactly one instructor."""

    name: str = ""
    capacity: int = 0
    price: Decimal = ZERO
    location: str = ""
    weekday: Weekday = Weekday.MONDAY
    instructor: Optional[Instructor] = field(default=None, repr=False)
    guests: List[Guest] = field(default_factory=list, repr=False)
    id: str = field(init=False, default="")

    def __post_init__(self):
        """Validate business rules and derive the id."""
        if not self.name:
            raise ValueError("Attraction name is required")
        if not self.location:
            raise ValueError("Attraction location is required")
        if self.capacity <= 0:
            raise ValueError("Capacity must be positive")
        self.price = Decimal(str(self.price))
        if self.price < 0:
            raise ValueError("Price cannot be negative")
        if has_sub_cent_digits(self.price):
            raise ValueError("Price can have at most 2 decimal places")
        self.id = generate_attraction_id(self.name, self.location, self.weekday)

    @property
    def guest_count(self) -> int:
        return len(self.guests)

    @property
    def free_places(self) -> int:
        return self.capacity - self.guest_count

    @property
    def has_free_places(self) -> bool:
        return self.free_places > 0

    def count_guests_under(self, age: int) -> int:
        return sum(1 for g in self.guests if g.age < age)

    def count_guests_over(self, age: int) -> int:
        return sum(1 for g in self.guests if g.age > age)

    def has_guest(self, guest: Guest) -> bool:
        return any(g is guest for g in self.guests)

    def add_guest(self, guest: Guest) -> None:
        if not self.has_guest(guest):
            self.guests.append(guest)

    def remove_guest(self, guest: Guest) -> None:
        self.guests[:] = [g for g in self.guests if g is not guest]

    def merge_from(self, other: "Attraction") -> None:
        """Field-wise update. The id stays the one derived at creation."""
        if other is self:
            return
        self.name = other.name
        self.capacity = other.capacity
        self.price = other.price
        self.location = other.location
        self.weekday = other.weekday
        self.instructor = other.instructor
        self.guests[:] = list(other.guests)
