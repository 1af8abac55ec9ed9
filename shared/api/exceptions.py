"""DRF exception handling for domain errors.

Domain services raise plain exceptions that know nothing about HTTP. This
handler maps them to responses of the shape
``{"error": <code>, "detail": <message>, ...context}`` and leaves every
other exception to DRF's default handler.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from apps.bookings.exceptions import BookingError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):  # type: ignore
    if isinstance(exc, BookingError):
        view = context.get("view")
        logger.info(
            "Domain error %s in %s: %s",
            exc.code,
            view.__class__.__name__ if view is not None else "unknown view",
            exc,
            extra={"context": exc.context},
        )
        return Response(exc.as_payload(), status=exc.status_code)
    return exception_handler(exc, context)
