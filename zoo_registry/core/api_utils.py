"""
Common API utilities for consistent response formatting across all controllers.
"""

from typing import Any, Callable, Optional

from flask import jsonify

from zoo_registry.core.exceptions import ErrorKind, OperationResult

ERROR_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.CAPACITY_EXCEEDED: 409,
    ErrorKind.ALREADY_ENROLLED: 409,
    ErrorKind.NOT_ENROLLED: 409,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NO_MATCHING_DATA: 200,
}


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def status_for(kind: Optional[ErrorKind]) -> int:
    """HTTP status for a failed service result."""
    if kind is None:
        return 500
    return ERROR_STATUS_CODES.get(kind, 400)


def result_response(
    result: OperationResult,
    message: str,
    serialize: Optional[Callable[[Any], Any]] = None,
    status_code: int = 200,
) -> tuple:
    """Turn a service OperationResult into an API response.

    Failures carry the error kind and any validation messages in ``data``.
    """
    if not result:
        data = {"error": result.error.value if result.error else None}
        if result.errors:
            data["errors"] = list(result.errors)
        return api_response(False, result.message, data, status_for(result.error))

    data = serialize(result.value) if serialize else None
    return api_response(True, result.message or message, data, status_code)
