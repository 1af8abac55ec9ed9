"""Admin registrations for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentEvent, Receipt


@admin.register(Receipt)
class ReceiptAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "renter", "amount", "status", "generated_at")
    search_fields = ("booking__booking_code", "renter__email", "gateway_payment_id")
    readonly_fields = ("generated_at",)


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = ("event", "gateway_order_id", "booking", "outcome", "received_at")
    list_filter = ("event", "outcome")
    search_fields = ("gateway_order_id", "gateway_payment_id")
    readonly_fields = ("payload", "received_at")
