"""Error taxonomy and the uniform JSON error envelope.

Every error leaving the API is rendered as ``{"success": false, "message": ...,
"code": ...}``. Authentication failures additionally carry ``clearAuth: true``
so clients drop cached credentials.
"""

import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be processed."
    default_code = "error"


class ValidationFailed(ServiceError):
    """Malformed or missing input, detected before any write."""


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class ConflictError(ServiceError):
    """Well-formed request that conflicts with the current state."""

    default_code = "conflict"


class StorageError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "A storage error occurred; no changes were saved."
    default_code = "storage_error"


def _first_message(data) -> str:
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for field, value in data.items():
            message = _first_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def _error_code(exc) -> str:
    detail = getattr(exc, "detail", None)
    code = getattr(detail, "code", None)
    if isinstance(code, str):
        return code
    if isinstance(detail, dict) and isinstance(detail.get("code"), str):
        return detail["code"]
    return getattr(exc, "default_code", "error")


def api_exception_handler(exc, context):
    """DRF ``EXCEPTION_HANDLER`` producing the ``{success, message}`` envelope."""
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(
            "Storage failure while handling %s",
            view.__class__.__name__ if view is not None else "request",
        )
        exc = StorageError()

    response = exception_handler(exc, context)
    if response is None:
        return None

    payload = {
        "success": False,
        "message": _first_message(response.data),
        "code": _error_code(exc),
    }
    if isinstance(exc, exceptions.ValidationError):
        payload["errors"] = response.data
    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        payload["clearAuth"] = True
    response.data = payload
    return response
