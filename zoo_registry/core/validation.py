"""
Input validation utilities for the registration system.

Turns raw text (as typed by a user or posted to the API) into typed values.
Parsers for price and capacity return 0 as the "invalid" sentinel, so callers
must check for it explicitly. Validators collect every problem into a
ValidationResult instead of stopping at the first one.
"""

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from zoo_registry.domain.entities import Weekday, has_sub_cent_digits

logger = logging.getLogger(__name__)

FORBIDDEN_NAME_CHARS = re.compile(r"[@#$%^&*0-9]")
MIN_PASSWORD_LENGTH = 3


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.info(f"Validation error: {error_msg}")


# ---------------------------------------------------------------------------
# Field-level checks and parsers
# ---------------------------------------------------------------------------


def validate_username(username: Optional[str]) -> bool:
    """Usernames must be non-empty and entirely lower case."""
    if not isinstance(username, str):
        return False
    return bool(username) and username.lower() == username


def validate_name(name: Optional[str]) -> bool:
    """Names may not contain digits or any of @#$%^&*."""
    if not isinstance(name, str):
        return False
    return FORBIDDEN_NAME_CHARS.search(name) is None


def validate_password(password: Optional[str]) -> bool:
    return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH


def parse_weekday(text: Optional[str]) -> Optional[Weekday]:
    """Case-insensitive weekday lookup. None when the text matches no day."""
    return Weekday.from_text(text)


def parse_price(text: Any) -> Decimal:
    """Parse a price. Unparsable, non-positive or sub-cent input yields Decimal(0)."""
    if text is None:
        return Decimal("0")
    try:
        value = Decimal(str(text).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not value.is_finite() or value <= 0:
        return Decimal("0")
    if has_sub_cent_digits(value):
        return Decimal("0")
    return value


def parse_capacity(text: Any) -> int:
    """Parse a capacity. Unparsable or non-positive input yields 0."""
    if text is None:
        return 0
    try:
        value = int(str(text).strip())
    except ValueError:
        return 0
    return value if value > 0 else 0


def parse_birthdate(text: Any) -> Optional[date]:
    """Parse an ISO date (YYYY-MM-DD)."""
    if isinstance(text, date):
        return text
    if not text:
        return None
    try:
        return datetime.strptime(str(text).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific entity type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if value is None or (isinstance(value, str) and value.strip() == ""):
            result.add_error("is required", field_name)
            return False
        return True


class PersonValidator(BaseValidator):
    """Validator for the fields shared by guests and instructors."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        username = data.get("username")
        if self.validate_required_field(username, "username", result):
            if validate_username(username):
                result.cleaned_data["username"] = username
            else:
                result.add_error("may only contain lower case letters", "username")

        for field_name in ("first_name", "last_name"):
            value = data.get(field_name)
            if not self.validate_required_field(value, field_name, result):
                continue
            if validate_name(value):
                result.cleaned_data[field_name] = value.strip()
            else:
                result.add_error("may only contain letters", field_name)

        password = data.get("password")
        if validate_password(password):
            result.cleaned_data["password"] = password
        else:
            result.add_error(
                f"must be at least {MIN_PASSWORD_LENGTH} characters long", "password"
            )

        return result


class GuestValidator(PersonValidator):
    """Person fields plus an ISO birthdate."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = super().validate(data)

        birthdate = parse_birthdate(data.get("birthdate"))
        if birthdate is None:
            result.add_error("use the format YYYY-MM-DD", "birthdate")
        elif birthdate > date.today():
            result.add_error("cannot be in the future", "birthdate")
        else:
            result.cleaned_data["birthdate"] = birthdate

        return result


class AttractionValidator(BaseValidator):
    """Validator for attraction input."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        for field_name in ("name", "location"):
            value = data.get(field_name)
            if not self.validate_required_field(value, field_name, result):
                continue
            if isinstance(value, str):
                result.cleaned_data[field_name] = value.strip()
            else:
                result.add_error("must be text", field_name)

        capacity = parse_capacity(data.get("capacity"))
        if capacity == 0:
            result.add_error("must be a positive whole number", "capacity")
        else:
            result.cleaned_data["capacity"] = capacity

        price = parse_price(data.get("price"))
        if price == 0:
            result.add_error(
                "must be a positive amount with at most 2 decimal places", "price"
            )
        else:
            result.cleaned_data["price"] = price

        weekday = parse_weekday(data.get("weekday"))
        if weekday is None:
            result.add_error(
                "must be one of " + ", ".join(d.name.capitalize() for d in Weekday),
                "weekday",
            )
        else:
            result.cleaned_data["weekday"] = weekday

        return result


def get_validator(entity_type: str) -> BaseValidator:
    """Get validator instance for entity type."""
    validators = {
        "person": PersonValidator(),
        "instructor": PersonValidator(),
        "guest": GuestValidator(),
        "attraction": AttractionValidator(),
    }

    validator = validators.get(entity_type.lower())
    if not validator:
        raise ValueError(f"No validator found for entity type: {entity_type}")

    return validator


# Convenience functions for common validations
def validate_person(data: Dict[str, Any]) -> ValidationResult:
    return get_validator("person").validate(data)


def validate_guest(data: Dict[str, Any]) -> ValidationResult:
    return get_validator("guest").validate(data)


def validate_attraction(data: Dict[str, Any]) -> ValidationResult:
    return get_validator("attraction").validate(data)
