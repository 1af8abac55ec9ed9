"""API views for the comparison list."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.equipment.models import Equipment

from .models import Comparison
from .serializers import ComparisonSerializer


class ComparisonViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Viewset to add, list and remove equipment from the comparison list.

    Endpoints:
    - GET /api/v1/comparisons/ - список сравнения
    - POST /api/v1/comparisons/add/{equipment_id}/ - добавить
    - DELETE /api/v1/comparisons/remove/{equipment_id}/ - удалить
    """

    serializer_class = ComparisonSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        """Пользователи видят только свой список."""
        return Comparison.objects.select_related('equipment', 'equipment__owner').filter(
            user=self.request.user
        )

    @action(detail=False, methods=['post'], url_path=r'add/(?P<equipment_id>[0-9]+)')
    def add(self, request, equipment_id=None):  # type: ignore
        equipment = get_object_or_404(Equipment, pk=equipment_id)
        comparison, created = Comparison.objects.get_or_create(user=request.user, equipment=equipment)
        return Response(
            ComparisonSerializer(comparison).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=False, methods=['delete'], url_path=r'remove/(?P<equipment_id>[0-9]+)')
    def remove(self, request, equipment_id=None):  # type: ignore
        deleted, _ = Comparison.objects.filter(user=request.user, equipment_id=equipment_id).delete()
        if not deleted:
            return Response({'detail': 'Equipment is not in your comparison list.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
