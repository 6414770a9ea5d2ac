"""Translate domain errors into HTTP responses at the route boundary."""

from fastapi import HTTPException

from havenly.domain.errors import (
    AuthorizationError,
    HavenlyError,
    NotFoundError,
    PaymentError,
    PaymentInProgressError,
    ValidationError,
)
from havenly.services.booking_state_machine import InvalidTransitionError

# Most specific first: PaymentInProgressError is also a ValidationError
_STATUS_CODES: list[tuple[type[HavenlyError], int]] = [
    (PaymentInProgressError, 409),
    (ValidationError, 400),
    (InvalidTransitionError, 400),
    (PaymentError, 402),
    (AuthorizationError, 403),
    (NotFoundError, 404),
]


def to_http(exc: HavenlyError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
