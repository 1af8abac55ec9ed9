"""Model definition for equipment comparisons.

Each row puts one piece of equipment on a user's comparison list.
Duplicates are prevented via a unique constraint.
"""

from __future__ import annotations

from django.db import models  # type: ignore


class Comparison(models.Model):
    """Equipment on a user's comparison list."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='comparisons'
    )
    equipment = models.ForeignKey(
        'equipment.Equipment', on_delete=models.CASCADE, related_name='compared_by'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('user', 'equipment')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"Comparison of equipment {self.equipment_id} by user {self.user_id}"
