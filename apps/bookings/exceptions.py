"""Domain errors raised by the booking lifecycle.

These carry no HTTP machinery; ``shared.api.exceptions`` maps them to
responses using ``status_code`` and ``code``. ``context`` holds the ids an
operator needs to reconcile a failed transition by hand.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base class for booking lifecycle errors."""

    status_code = 400
    code = "booking_error"
    default_message = "Booking request failed."

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "detail": self.message}
        payload.update({key: value for key, value in self.context.items() if value is not None})
        return payload


class BookingValidationError(BookingError):
    """Malformed dates, amounts or references. ``field_errors`` maps field → messages."""

    code = "validation_error"
    default_message = "Invalid booking request."

    def __init__(self, message: str | None = None, *, field_errors: dict | None = None, **context: Any) -> None:
        super().__init__(message, **context)
        self.field_errors = field_errors or {}

    def as_payload(self) -> dict[str, Any]:
        payload = super().as_payload()
        if self.field_errors:
            payload["fields"] = self.field_errors
        return payload


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"
    default_message = "Requested object does not exist."


class UnavailableError(BookingError):
    code = "unavailable"
    default_message = "Equipment is not available for the requested dates."


class PaymentSessionError(BookingError):
    code = "payment_session_failed"
    default_message = "Payment session could not be created. Please start a new booking."


class InvalidSignatureError(BookingError):
    code = "invalid_signature"
    default_message = "Payment verification failed."


class InvalidTransitionError(BookingError):
    status_code = 409
    code = "invalid_transition"
    default_message = "Booking is not in a state that allows this operation."
