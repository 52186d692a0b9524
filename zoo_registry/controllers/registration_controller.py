"""
Registration controller - JSON endpoints over RegistrationService.

This controller:
- Handles HTTP concerns only (parsing requests, shaping responses)
- Gets the service from the application, never builds repositories itself
- Holds no business rules; every decision is the service's
"""

import logging

from flask import Blueprint, current_app, request
from sqlalchemy.exc import SQLAlchemyError

from zoo_registry.core.api_utils import api_response, result_response
from zoo_registry.core.validation import parse_price, parse_weekday
from zoo_registry.schemas.dtos import (
    AttractionCreateRequest,
    AttractionResponse,
    GuestCreateRequest,
    GuestResponse,
    IncomeReportResponse,
    InstructorCreateRequest,
    InstructorResponse,
)
from zoo_registry.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

registration_bp = Blueprint("registration", __name__, url_prefix="/api")

SERVICE_EXTENSION_KEY = "registration_service"

ATTRACTION_SORTS = {
    "name": RegistrationService.attractions_sorted_by_name,
    "price": RegistrationService.attractions_sorted_by_price,
    "guests": RegistrationService.attractions_sorted_by_guest_count,
}


def _service() -> RegistrationService:
    return current_app.extensions[SERVICE_EXTENSION_KEY]


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _attractions(items):
    return [AttractionResponse.from_domain(a).to_dict() for a in items]


def _guests(items):
    return [GuestResponse.from_domain(g).to_dict() for g in items]


def _instructors(items):
    return [InstructorResponse.from_domain(i).to_dict() for i in items]


@registration_bp.errorhandler(SQLAlchemyError)
def handle_storage_error(error):
    logger.error(
        "Storage failure while handling request",
        extra={"context": {"path": request.path, "error": str(error)}},
    )
    return api_response(False, "Internal storage error", None, 500)


# =====================================================
# ATTRACTIONS
# =====================================================


@registration_bp.route("/attractions", methods=["GET"])
def list_attractions():
    """List attractions.

    Query parameters (applied in this order, all optional):
    ``free=1`` keeps attractions with free places, ``weekday=<day>`` keeps
    that day and later ones, ``max_price=<amount>`` keeps cheaper ones,
    ``sort=name|price|guests`` orders the result.
    """
    service = _service()
    args = request.args

    sort_key = args.get("sort")
    if sort_key is not None and sort_key not in ATTRACTION_SORTS:
        return api_response(
            False, f"Unknown sort '{sort_key}'", {"error": "invalid_input"}, 400
        )
    attractions = (
        ATTRACTION_SORTS[sort_key](service) if sort_key else service.list_attractions()
    )

    if args.get("free") in ("1", "true", "yes"):
        allowed = {id(a) for a in service.attractions_with_free_places()}
        attractions = [a for a in attractions if id(a) in allowed]

    if "weekday" in args:
        weekday = parse_weekday(args["weekday"])
        if weekday is None:
            return api_response(
                False, "Unknown weekday", {"error": "invalid_input"}, 400
            )
        allowed = {id(a) for a in service.attractions_from_weekday(weekday)}
        attractions = [a for a in attractions if id(a) in allowed]

    if "max_price" in args:
        max_price = parse_price(args["max_price"])
        if max_price == 0:
            return api_response(
                False, "max_price must be a positive number", {"error": "invalid_input"}, 400
            )
        allowed = {id(a) for a in service.attractions_up_to_price(max_price)}
        attractions = [a for a in attractions if id(a) in allowed]

    return api_response(True, "Attractions retrieved", _attractions(attractions))


@registration_bp.route("/attractions", methods=["POST"])
def create_attraction():
    data = AttractionCreateRequest.from_json(_payload())
    result = _service().create_attraction(
        data.instructor_id,
        data.name,
        data.capacity,
        data.price,
        data.location,
        data.weekday,
    )
    return result_response(
        result,
        "Attraction created",
        lambda a: AttractionResponse.from_domain(a).to_dict(),
        201,
    )


@registration_bp.route("/attractions/<attraction_id>", methods=["DELETE"])
def delete_attraction(attraction_id: str):
    """Delete an attraction. The caller names itself as ``instructor_id``."""
    instructor_id = _payload().get("instructor_id") or request.args.get(
        "instructor_id", ""
    )
    result = _service().delete_attraction(instructor_id, attraction_id)
    return result_response(result, "Attraction deleted")


@registration_bp.route("/attractions/<attraction_id>/instructor", methods=["PUT"])
def change_instructor(attraction_id: str):
    payload = _payload()
    result = _service().change_instructor_of_attraction(
        attraction_id,
        payload.get("instructor_id", ""),
        payload.get("requesting_instructor_id"),
    )
    return result_response(
        result,
        "Instructor changed",
        lambda a: AttractionResponse.from_domain(a).to_dict(),
    )


@registration_bp.route("/attractions/<attraction_id>/guests", methods=["GET"])
def guests_of_attraction(attraction_id: str):
    result = _service().guests_of_attraction(attraction_id)
    return result_response(result, "Guests retrieved", _guests)


@registration_bp.route("/attractions/<attraction_id>/guests", methods=["POST"])
def sign_up(attraction_id: str):
    guest_id = _payload().get("guest_id", "")
    result = _service().sign_up_for_attraction(guest_id, attraction_id)
    return result_response(
        result,
        "Guest signed up",
        lambda a: AttractionResponse.from_domain(a).to_dict(),
        201,
    )


@registration_bp.route(
    "/attractions/<attraction_id>/guests/<guest_id>", methods=["DELETE"]
)
def cancel_sign_up(attraction_id: str, guest_id: str):
    result = _service().cancel_sign_up(guest_id, attraction_id)
    return result_response(
        result,
        "Sign-up cancelled",
        lambda a: AttractionResponse.from_domain(a).to_dict(),
    )


# =====================================================
# GUESTS
# =====================================================


@registration_bp.route("/guests", methods=["GET"])
def list_guests():
    """List guests; ``sort=sum`` orders them by final sum, highest first."""
    service = _service()
    if request.args.get("sort") == "sum":
        guests = service.guests_sorted_by_sum_desc()
    else:
        guests = service.list_guests()
    return api_response(True, "Guests retrieved", _guests(guests))


@registration_bp.route("/guests", methods=["POST"])
def register_guest():
    data = GuestCreateRequest.from_json(_payload())
    result = _service().register_guest(
        data.username, data.first_name, data.last_name, data.password, data.birthdate
    )
    return result_response(
        result,
        "Guest registered",
        lambda g: GuestResponse.from_domain(g).to_dict(),
        201,
    )


@registration_bp.route("/guests/<guest_id>/attractions", methods=["GET"])
def attractions_of_guest(guest_id: str):
    result = _service().attractions_of_guest(guest_id)
    return result_response(result, "Attractions retrieved", _attractions)


@registration_bp.route("/guests/<guest_id>/sum", methods=["GET"])
def final_sum_of_guest(guest_id: str):
    result = _service().final_sum_of_guest(guest_id)
    return result_response(
        result, "Final sum retrieved", lambda s: {"guest_id": guest_id, "final_sum": float(s)}
    )


# =====================================================
# INSTRUCTORS
# =====================================================


@registration_bp.route("/instructors", methods=["GET"])
def list_instructors():
    return api_response(
        True, "Instructors retrieved", _instructors(_service().list_instructors())
    )


@registration_bp.route("/instructors", methods=["POST"])
def register_instructor():
    data = InstructorCreateRequest.from_json(_payload())
    result = _service().register_instructor(
        data.username, data.first_name, data.last_name, data.password
    )
    return result_response(
        result,
        "Instructor registered",
        lambda i: InstructorResponse.from_domain(i).to_dict(),
        201,
    )


@registration_bp.route("/instructors/<instructor_id>/attractions", methods=["GET"])
def attractions_of_instructor(instructor_id: str):
    result = _service().attractions_of_instructor(instructor_id)
    return result_response(result, "Attractions retrieved", _attractions)


@registration_bp.route("/instructors/<instructor_id>/income", methods=["GET"])
def income_of_instructor(instructor_id: str):
    result = _service().income_of_instructor(instructor_id)
    return result_response(
        result,
        "Income retrieved",
        lambda s: {"instructor_id": instructor_id, "income": float(s)},
    )


# =====================================================
# REPORTS
# =====================================================


@registration_bp.route("/reports/income", methods=["GET"])
def income_report():
    service = _service()
    report = IncomeReportResponse.create(
        service.total_income(),
        service.average_instructor_income(),
        service.instructors_above_average_income(),
    )
    return api_response(True, "Income report", report.to_dict())
