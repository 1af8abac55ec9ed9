"""Serializers for receipts."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.api.fields import MoneyDisplayField, MoneySerializerField

from .models import Receipt


class ReceiptSerializer(serializers.ModelSerializer):
    amount = MoneySerializerField(read_only=True)
    amount_display = MoneyDisplayField(source="amount")
    currency = serializers.CharField(source="amount.currency", read_only=True)
    equipment_name = serializers.CharField(source="booking.equipment.name", read_only=True)

    class Meta:
        model = Receipt
        fields = [
            "id",
            "booking",
            "renter",
            "amount",
            "amount_display",
            "currency",
            "status",
            "gateway_payment_id",
            "payment_method",
            "equipment_name",
            "metadata",
            "generated_at",
        ]
        read_only_fields = fields
