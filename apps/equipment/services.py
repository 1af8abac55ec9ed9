"""Equipment directory services: availability windows and nearby search."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from geopy.distance import geodesic  # type: ignore

from apps.bookings.exceptions import BookingValidationError

from .models import Equipment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityWindow:
    start_date: date
    end_date: date


def resolve_availability_window(
    start_date: date | None,
    end_date: date | None,
    *,
    today: date | None = None,
) -> AvailabilityWindow:
    """Resolve the date range used by the availability query.

    Start defaults to today and is never in the past. End defaults to the
    start plus ``AVAILABILITY_DEFAULT_WINDOW_DAYS`` and is reset to that
    default when it falls before the resolved start. An explicit end that
    precedes an explicit start is rejected.
    """

    today = today or timezone.localdate()
    window = timedelta(days=settings.AVAILABILITY_DEFAULT_WINDOW_DAYS)

    if start_date is not None and end_date is not None and end_date < start_date:
        raise BookingValidationError(
            "End date must not precede start date.",
            field_errors={"endDate": ["End date must not precede start date."]},
        )

    start = max(start_date or today, today)
    if end_date is None or end_date < start:
        try:
            end = start + window
        except OverflowError:
            raise BookingValidationError(
                "Start date is too far in the future.",
                field_errors={"startDate": ["Start date is too far in the future."]},
            ) from None
    else:
        end = end_date
    return AvailabilityWindow(start_date=start, end_date=end)


def distance_km(lat1, lng1, lat2, lng2) -> float:
    """Geodesic distance between two points in kilometres."""
    return geodesic((float(lat1), float(lng1)), (float(lat2), float(lng2))).km


def equipment_near(
    lat: float,
    lng: float,
    radius_km: float,
    queryset: Iterable[Equipment] | None = None,
) -> list[tuple[Equipment, float]]:
    """Listings with coordinates within ``radius_km``, nearest first."""

    if queryset is None:
        queryset = Equipment.objects.filter(latitude__isnull=False, longitude__isnull=False)

    found: list[tuple[Equipment, float]] = []
    for item in queryset:
        if not item.has_coordinates:
            continue
        distance = distance_km(lat, lng, item.latitude, item.longitude)
        if distance <= radius_km:
            found.append((item, distance))
    found.sort(key=lambda pair: pair[1])
    logger.debug("Nearby search at (%s, %s) r=%skm found %d listings", lat, lng, radius_km, len(found))
    return found
