"""
Error taxonomy and the DRF exception handler for the Draco API.

Repositories and views raise the DracoError subclasses below. The exception
handler turns every failure, ours or DRF's, into the standard response
envelope so that clients only ever see a category and a message. Internal
detail (driver errors, lookups, validation errors) goes to the log.
"""

import logging

from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from .utils import envelope

logger = logging.getLogger(__name__)


class DracoError(Exception):
    """
    Base class for every error raised by the API layer.

    :param message: Client-facing message. When omitted the handler uses the
                    failure message of the action that was running.
    :param detail: Internal detail, logged but never sent to the client.
    :param status_code: Overrides the class default HTTP status.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = None

    def __init__(self, message=None, *, detail=None, status_code=None):
        self.message = message or self.default_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail or message or self.__class__.__name__)


class ValidationError(DracoError):
    """Malformed or missing input."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Could not process request"


class AuthError(DracoError):
    """Bad credentials, bad token or an ownership mismatch."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(DracoError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DracoError):
    """
    A unique key already exists. Surfaces as a 500 like any other storage
    failure; clients cannot tell a duplicate apart from a broken database.
    """
    # TODO: answer duplicates with 409 once the front-end handles it.
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(DracoError):
    """Any other persistence failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _describe(context):
    view = context.get('view')
    request = context.get('request')
    if view is not None and hasattr(view, 'describe_action') and request is not None:
        return view.describe_action(request.method)
    return "Request", "Request"


def envelope_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER. Returns None for anything it does not recognise so
    Django's own 500 handling takes over.
    """
    category, verb = _describe(context)
    headers = {}

    if isinstance(exc, DracoError):
        status_code = exc.status_code
        message = exc.message or f"{verb} failed"
    elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        status_code = exc.status_code
        message = "Access denied"
        auth_header = getattr(exc, 'auth_header', None)
        if auth_header:
            headers['WWW-Authenticate'] = auth_header
    elif isinstance(exc, (exceptions.ParseError, exceptions.ValidationError)):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        message = ValidationError.default_message
    elif isinstance(exc, exceptions.APIException):
        status_code = exc.status_code
        message = str(exc.detail)
        if isinstance(exc, exceptions.Throttled) and exc.wait:
            headers['Retry-After'] = str(int(exc.wait))
    elif isinstance(exc, Http404):
        status_code = status.HTTP_404_NOT_FOUND
        message = f"{verb} failed"
    elif isinstance(exc, DatabaseError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        message = f"{verb} failed"
    else:
        return None

    if status_code >= 500:
        logger.error("%s: %s (%s)", category, message, exc, exc_info=exc)
    else:
        logger.warning("%s: %s (%s)", category, message, getattr(exc, 'detail', None) or exc)

    return Response(envelope(category, message), status=status_code, headers=headers)
