"""Serializers for the equipment directory."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.api.fields import MoneyDisplayField, MoneySerializerField

from .models import Equipment


class EquipmentSerializer(serializers.ModelSerializer):
    owner = serializers.ReadOnlyField(source="owner_id")
    owner_name = serializers.SerializerMethodField()
    daily_rate = MoneySerializerField()
    daily_rate_display = MoneyDisplayField(source="daily_rate")
    features = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    specs = serializers.DictField(child=serializers.CharField(max_length=255), required=False)

    class Meta:
        model = Equipment
        fields = [
            "id",
            "owner",
            "owner_name",
            "name",
            "description",
            "category",
            "daily_rate",
            "daily_rate_display",
            "image_url",
            "availability",
            "location",
            "latitude",
            "longitude",
            "features",
            "specs",
            "popularity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["availability", "popularity", "created_at", "updated_at"]

    def get_owner_name(self, obj: Equipment) -> str:
        return obj.owner.get_full_name() or obj.owner.username or obj.owner.email

    def validate_daily_rate(self, value):  # type: ignore
        if value.minor_units <= 0:
            raise serializers.ValidationError("Daily rate must be positive.")
        return value

    def validate(self, attrs):  # type: ignore
        lat = attrs.get("latitude", getattr(self.instance, "latitude", None))
        lng = attrs.get("longitude", getattr(self.instance, "longitude", None))
        if (lat is None) != (lng is None):
            raise serializers.ValidationError("Latitude and longitude must be given together.")
        if lat is not None and not -90 <= lat <= 90:
            raise serializers.ValidationError({"latitude": "Out of range."})
        if lng is not None and not -180 <= lng <= 180:
            raise serializers.ValidationError({"longitude": "Out of range."})
        return attrs


class AvailabilityQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)


class AvailabilityUpdateSerializer(serializers.Serializer):
    available = serializers.BooleanField()


class NearbyQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius_km = serializers.FloatField(min_value=0.1, max_value=500, default=50)
