"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.equipment.models import Equipment

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Основной сериализатор пользователя."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "role",
            "location",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """Profile of the current user, including rental preferences."""

    preferred_categories = serializers.ListField(
        child=serializers.ChoiceField(choices=Equipment.Category.choices), required=False
    )
    preferred_locations = serializers.ListField(child=serializers.CharField(), required=False)
    preferred_features = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "role",
            "location",
            "preferred_categories",
            "preferred_locations",
            "preferred_features",
            "price_range_min",
            "price_range_max",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "email", "role", "created_at", "updated_at"]

    def validate(self, attrs):  # type: ignore
        low = attrs.get("price_range_min", getattr(self.instance, "price_range_min", 0))
        high = attrs.get("price_range_max", getattr(self.instance, "price_range_max", 0))
        if high and low > high:
            raise serializers.ValidationError(
                {"price_range_max": "Upper bound must not be below the lower bound."}
            )
        return attrs
