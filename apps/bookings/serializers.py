"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.api.fields import MoneyDisplayField, MoneySerializerField

from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    daily_rate = MoneySerializerField(read_only=True)
    total_price = MoneySerializerField(read_only=True)
    total_price_display = MoneyDisplayField(source="total_price")
    equipment_name = serializers.CharField(source="equipment.name", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "equipment",
            "equipment_name",
            "renter",
            "start_date",
            "end_date",
            "total_days",
            "daily_rate",
            "total_price",
            "total_price_display",
            "status",
            "gateway_order_id",
            "gateway_payment_id",
            "is_rated",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Запрос на бронирование техники. Обе даты включительно."""

    equipment = serializers.IntegerField(min_value=1)
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must not precede start date."})
        return attrs


class PaymentVerificationSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField(min_value=1)
    gateway_order_id = serializers.CharField(max_length=64)
    gateway_payment_id = serializers.CharField(max_length=64)
    signature = serializers.CharField(max_length=256)
