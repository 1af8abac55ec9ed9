"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "equipment",
        "renter",
        "status",
        "start_date",
        "end_date",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "is_rated", "start_date")
    search_fields = ("booking_code", "equipment__name", "renter__email", "gateway_order_id")
    readonly_fields = (
        "booking_code",
        "daily_rate",
        "total_days",
        "total_price",
        "gateway_order_id",
        "gateway_payment_id",
        "paid_at",
        "created_at",
        "updated_at",
    )
