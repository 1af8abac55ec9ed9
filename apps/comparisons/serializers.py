"""Serializers for comparisons."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.equipment.serializers import EquipmentSerializer

from .models import Comparison


class ComparisonSerializer(serializers.ModelSerializer):
    equipment = EquipmentSerializer(read_only=True)

    class Meta:
        model = Comparison
        fields = ['id', 'equipment', 'created_at']
        read_only_fields = fields
