"""Linear preference scoring of equipment for a user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.conf import settings  # type: ignore

from apps.bookings.models import Booking
from apps.equipment.models import Equipment

from .models import Recommendation

logger = logging.getLogger(__name__)

MAX_SCORE = 100
DEFAULT_REASON = "Recommended based on your preferences"


@dataclass
class ScoredEquipment:
    equipment: Equipment
    score: int
    reasons: list[str] = field(default_factory=list)

    @property
    def reason(self) -> str:
        return self.reasons[0] if self.reasons else DEFAULT_REASON


def _has_price_preference(user) -> bool:
    return bool(user.price_range_min or user.price_range_max)


def score_equipment(user, equipment: Equipment, rented_ids: set[int]) -> ScoredEquipment:
    score = 0
    reasons: list[str] = []

    if equipment.category in (user.preferred_categories or []):
        score += 30
        reasons.append(f"Matches your preferred category: {equipment.get_category_display()}")

    if equipment.location in (user.preferred_locations or []):
        score += 20
        reasons.append(f"Available in your preferred location: {equipment.location}")

    if _has_price_preference(user) and user.price_in_range(equipment.daily_rate.minor_units):
        score += 15
        reasons.append("Within your preferred price range")

    preferred_features = set(user.preferred_features or [])
    matching = [feature for feature in (equipment.features or []) if feature in preferred_features]
    if matching:
        score += 5 * len(matching)
        reasons.append(f"Has {len(matching)} features you prefer")

    if equipment.popularity > 0:
        score += min(10, equipment.popularity)

    if equipment.pk in rented_ids:
        score += 10
        reasons.append("You have rented this before")

    return ScoredEquipment(equipment=equipment, score=min(MAX_SCORE, score), reasons=reasons)


def recommend_for(user) -> list[ScoredEquipment]:
    """Score every listing for ``user``, keep the best and persist them."""

    rented_ids = set(Booking.objects.filter(renter=user).values_list("equipment_id", flat=True))
    scored = [
        score_equipment(user, equipment, rented_ids)
        for equipment in Equipment.objects.exclude(owner=user)
    ]
    threshold = settings.RECOMMENDATIONS_MIN_SCORE
    top = sorted(
        (item for item in scored if item.score > threshold),
        key=lambda item: item.score,
        reverse=True,
    )[: settings.RECOMMENDATIONS_LIMIT]

    Recommendation.objects.bulk_create(
        [
            Recommendation(user=user, equipment=item.equipment, score=item.score, reason=item.reason)
            for item in top
        ]
    )
    logger.info("Generated %d recommendations for user %s", len(top), user.pk)
    return top
