from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .session import Base


class InstructorModel(Base):
    """Instructor row. Held attractions are linked via attractions.instructor_id"""

    __tablename__ = "instructors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    final_sum: Mapped[Decimal] = mapped_column(
        Numeric(14, 4), nullable=False, default=0
    )
    # Insertion order for list_all()
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class GuestModel(Base):
    """Guest row"""

    __tablename__ = "guests"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)
    final_sum: Mapped[Decimal] = mapped_column(
        Numeric(14, 4), nullable=False, default=0
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class AttractionModel(Base):
    """Attraction row, owned by exactly one instructor"""

    __tablename__ = "attractions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    weekday: Mapped[str] = mapped_column(String(9), nullable=False)
    instructor_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("instructors.id"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class EnrollmentModel(Base):
    """Guest <-> attraction link. Row id order is enrollment order."""

    __tablename__ = "attraction_guests"
    __table_args__ = (
        UniqueConstraint("attraction_id", "guest_id", name="uq_attraction_guest"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attraction_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("attractions.id"), nullable=False, index=True
    )
    guest_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("guests.id"), nullable=False, index=True
    )
