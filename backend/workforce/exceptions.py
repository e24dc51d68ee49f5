# workforce/exceptions.py
"""
API error envelope.

Every error leaves the API as::

    {"success": false, "error": "<message>", "statusCode": <code>}

DRF exceptions keep their own status code. The AI-layer exceptions from
``insights.exceptions`` are mapped onto gateway-style codes so that clients
can tell a provider outage apart from a bug in this service.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from insights.exceptions import (
    GenerationError,
    GeneratorNotConfiguredError,
    MalformedCachedPayloadError,
)

logger = logging.getLogger(__name__)


class Conflict(APIException):
    """The resource already exists (duplicate email and the like)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = "conflict"


def _first_message(detail):
    """Pull a human-readable message out of a nested DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def _error_response(message, status_code, details=None):
    body = {"success": False, "error": message, "statusCode": status_code}
    if details is not None:
        body["details"] = details
    return Response(body, status=status_code)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            return _error_response(
                _first_message(response.data),
                response.status_code,
                details=response.data,
            )
        response.data = {
            "success": False,
            "error": _first_message(response.data),
            "statusCode": response.status_code,
        }
        return response

    if isinstance(exc, GeneratorNotConfiguredError):
        logger.warning(f"AI provider not configured: {exc}")
        return _error_response(
            "AI service is not configured", status.HTTP_503_SERVICE_UNAVAILABLE
        )

    if isinstance(exc, GenerationError):
        logger.error(f"AI generation failed [{exc.error_code}]: {exc}")
        return _error_response(str(exc), status.HTTP_502_BAD_GATEWAY)

    if isinstance(exc, MalformedCachedPayloadError):
        logger.error(f"Cached AI payload could not be decoded: {exc}")
        return _error_response(
            "Stored AI response is corrupted", status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # Anything else is a bug or an infrastructure failure: let Django
    # produce its 500 so the traceback reaches the logs.
    return None
