"""Review side effects on equipment popularity and bookings."""

from __future__ import annotations

import logging
import math

from django.db import transaction  # type: ignore
from django.db.models import Avg  # type: ignore

from apps.bookings.models import Booking
from apps.equipment.models import Equipment

from .models import Review

logger = logging.getLogger(__name__)


def popularity_from_average(average: float | None) -> int:
    """Map an average 1–5 star rating onto the 0–10 popularity scale."""
    if not average:
        return 0
    return min(10, math.floor(average * 2 + 0.5))


def refresh_equipment_popularity(equipment_id: int) -> int:
    average = Review.objects.filter(equipment_id=equipment_id).aggregate(avg=Avg('rating'))['avg']
    popularity = popularity_from_average(average)
    Equipment.objects.filter(pk=equipment_id).update(popularity=popularity)
    return popularity


@transaction.atomic
def record_review(*, user, booking: Booking, rating: int, comment: str = '') -> Review:
    review = Review.objects.create(
        user=user,
        equipment_id=booking.equipment_id,
        booking=booking,
        rating=rating,
        comment=comment,
    )
    Booking.objects.filter(pk=booking.pk).update(is_rated=True)
    popularity = refresh_equipment_popularity(booking.equipment_id)
    logger.info(
        "Review %s recorded for booking %s, equipment %s popularity now %s",
        review.pk,
        booking.pk,
        booking.equipment_id,
        popularity,
    )
    return review
