"""Serializers for recommendations."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.equipment.serializers import EquipmentSerializer


class ScoredEquipmentSerializer(serializers.Serializer):
    equipment = EquipmentSerializer(read_only=True)
    score = serializers.IntegerField(read_only=True)
    reason = serializers.CharField(read_only=True)
