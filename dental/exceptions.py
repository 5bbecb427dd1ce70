"""
Domain errors and the unified API exception handler.

Services raise the ``ClinicError`` subclasses below; DRF routes every
exception raised inside a view through :func:`api_exception_handler`,
which renders the uniform ``{"error": "<message>"}`` body.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Base class for errors a service raises on purpose."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request failed'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ClinicError):
    """Malformed or out-of-range input."""
    default_message = 'Invalid input'


class AuthenticationError(ClinicError):
    """Bad credentials or missing/invalid token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Invalid credentials'


class AuthorizationError(ClinicError):
    """Role or ownership mismatch."""
    default_message = 'You do not have permission to perform this action'


class NotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'


class ConflictError(ClinicError):
    """Duplicate unique key, scheduling clash or a dependent-record block."""
    default_message = 'Conflict'


def _first_message(detail) -> str:
    """Flatten a DRF error detail (str, list or dict) to one readable line."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            msg = _first_message(value)
            return msg if field in ('detail', 'non_field_errors') else f"{field}: {msg}"
        return 'Invalid input'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid input'
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, ClinicError):
        return Response({'error': exc.message}, status=exc.status_code)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', getattr(view, '__class__', type(view)).__name__)
        return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # normalize response
    payload: dict[str, object] = {'error': _first_message(resp.data)}
    if isinstance(exc, drf_exceptions.ValidationError) and isinstance(resp.data, dict):
        payload['details'] = resp.data
    resp.data = payload
    return resp
