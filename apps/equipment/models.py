"""Equipment domain models for AgriRent.

An equipment listing belongs to its owner and carries the daily rate,
location and the marketplace ``availability`` flag that booking creation
flips atomically. Popularity is derived from reviews.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import MoneyField


def _empty_list() -> list:
    return []


def _empty_dict() -> dict:
    return {}


class Equipment(models.Model):
    """Единица сельхозтехники, выставленная в аренду."""

    class Category(models.TextChoices):
        TRACTORS = "tractors", _("Tractors & Harvesters")
        COMBINE_HARVESTERS = "combine_harvesters", _("Combine Harvesters")
        SEEDING = "seeding", _("Seeding Equipment")
        PLOUGHS = "ploughs", _("Ploughs & Tillers")
        SPRAYING = "spraying", _("Spraying Equipment")
        CULTIVATORS = "cultivators", _("Cultivators")
        THRESHERS = "threshers", _("Threshers")
        IRRIGATION = "irrigation", _("Irrigation")
        COMBINE_EQUIPMENT = "combine_equipment", _("Combine Equipment")
        ROTAVATORS = "rotavators", _("Rotavators")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="equipment",
    )
    name = models.CharField(_("Name"), max_length=255)
    description = models.TextField(_("Description"), blank=True)
    category = models.CharField(
        _("Category"),
        max_length=32,
        choices=Category.choices,
        db_index=True,
    )
    daily_rate = MoneyField(_("Daily rate"), help_text=_("Minor currency units (paise)."))
    image_url = models.URLField(_("Image URL"), max_length=500, blank=True)
    availability = models.BooleanField(
        _("Available for booking"),
        default=True,
        help_text=_("Cleared while a booking holds or has consumed the listing."),
    )
    location = models.CharField(_("Location"), max_length=255)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    features = models.JSONField(default=_empty_list, blank=True)
    specs = models.JSONField(default=_empty_dict, blank=True)
    popularity = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(10)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Equipment")
        verbose_name_plural = _("Equipment")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category", "availability"]),
            models.Index(fields=["owner", "created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(daily_rate__gt=0),
                name="equipment_daily_rate_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_category_display()})"

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
