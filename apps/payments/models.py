"""Payment records for AgriRent: receipts and the webhook audit log."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import MoneyField


class Receipt(models.Model):
    """Квитанция об оплате бронирования. Одна на бронирование."""

    class Method(models.TextChoices):
        GATEWAY = "gateway", _("Online payment gateway")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="receipt",
    )
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="receipts",
    )
    amount = MoneyField(help_text=_("Equals the booking total, minor units."))
    status = models.CharField(max_length=32, help_text=_("Booking status when issued."))
    gateway_payment_id = models.CharField(max_length=64, blank=True)
    payment_method = models.CharField(max_length=20, choices=Method.choices, default=Method.GATEWAY)
    metadata = models.JSONField(default=dict, blank=True)
    generated_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Receipt")
        verbose_name_plural = _("Receipts")
        ordering = ["-generated_at"]

    def __str__(self) -> str:
        return f"Receipt {self.pk} for booking {self.booking_id} ({self.amount.format()})"


class PaymentEvent(models.Model):
    """Accepted gateway webhook payload, kept for audit."""

    event = models.CharField(max_length=64)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_events",
    )
    gateway_order_id = models.CharField(max_length=64, blank=True)
    gateway_payment_id = models.CharField(max_length=64, blank=True)
    payload = models.JSONField(default=dict)
    outcome = models.CharField(max_length=64, blank=True)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment event")
        verbose_name_plural = _("Payment events")
        ordering = ["-received_at"]
        indexes = [models.Index(fields=["gateway_order_id"])]

    def __str__(self) -> str:
        return f"{self.event} for order {self.gateway_order_id or '-'}"
