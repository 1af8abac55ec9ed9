"""Admin registrations for the equipment directory."""

from __future__ import annotations

from django.contrib import admin

from .models import Equipment


@admin.register(Equipment)
class EquipmentAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "owner",
        "daily_rate",
        "availability",
        "location",
        "popularity",
        "created_at",
    )
    list_filter = ("category", "availability")
    search_fields = ("name", "location", "owner__email")
    readonly_fields = ("popularity", "created_at", "updated_at")
