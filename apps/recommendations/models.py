"""Persisted recommendation results."""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore


class Recommendation(models.Model):
    """A scored suggestion of equipment for a user, as shown to them."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='recommendations'
    )
    equipment = models.ForeignKey(
        'equipment.Equipment', on_delete=models.CASCADE, related_name='recommendations'
    )
    score = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(100)])
    reason = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-score']

    def __str__(self) -> str:
        return f"Recommendation of {self.equipment_id} for {self.user_id} ({self.score})"
