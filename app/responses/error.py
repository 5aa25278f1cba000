import logging

from fastapi import status
from .base import build_response
from utils.errors import (
    ServiceError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthorizationDenied,
    StorageError,
)

logger = logging.getLogger(__name__)


def bad_request_error(error: str = "Bad request"):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        "failure",
        error="bad_request",
        message=error,
    )


def conflict_error(error: str = "Credentials already exists"):
    return build_response(
        status.HTTP_409_CONFLICT,
        "failure",
        error="conflict",
        message=error,
    )


def not_found_error(error: str = "Resource not found"):
    return build_response(
        status.HTTP_404_NOT_FOUND,
        "failure",
        error="not_found",
        message=error,
    )


def unauthorized_error(error: str = "Invalid credentials"):
    return build_response(
        status.HTTP_401_UNAUTHORIZED,
        "failure",
        error="unauthorized",
        message=error,
    )


def internal_server_error(error: str = "Internal server error"):
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failure",
        error="internal_server_error",
        message=error,
    )


def forbidden_error(error: str = "Access denied"):
    return build_response(
        status.HTTP_403_FORBIDDEN,
        "failure",
        error="forbidden",
        message=error,
    )


def service_error_response(exc: ServiceError):
    """Translate a domain error raised by a service into an error response"""
    if isinstance(exc, NotFoundError):
        return not_found_error(exc.message)
    if isinstance(exc, ConflictError):
        return conflict_error(exc.message)
    if isinstance(exc, AuthorizationDenied):
        return forbidden_error(exc.message)
    if isinstance(exc, ValidationError):
        return bad_request_error(exc.message)
    if isinstance(exc, StorageError):
        logger.error("Storage failure: %s", exc.message)
        return internal_server_error(exc.message)
    return bad_request_error(exc.message)
