"""Interface layer errors.

Maps domain errors onto HTTP responses. Every error body has the shape
{"detail": {"code": ..., "message": ...}} so clients can round-trip the
domain error code.
"""

import logfire
from fastapi import HTTPException, status

from forumcore.domain.error import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    StructuralInvariantError,
    ValidationError,
)


def status_for(error: DomainError) -> int:
    """HTTP status code for a domain error family."""
    if isinstance(error, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, StructuralInvariantError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_409_CONFLICT


def http_error(error: DomainError, operation: str) -> HTTPException:
    """Convert a domain error into an HTTPException, logging it.

    Args:
        error: The domain error raised by a use case
        operation: Operation name for the log event

    Returns:
        HTTPException to raise from the route
    """
    status_code = status_for(error)
    if isinstance(error, StructuralInvariantError):
        logfire.error(
            f"{operation} hit a structural invariant violation",
            code=error.code,
            error=error.message,
        )
    else:
        logfire.warn(
            f"{operation} rejected", code=error.code, error=error.message
        )
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message},
    )


def unauthenticated(message: str = "Authentication required") -> HTTPException:
    """401 with the same body shape as domain errors."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "not_authenticated", "message": message},
    )
