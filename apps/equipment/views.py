"""Equipment API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotAuthenticated  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings import services as booking_services

from .filters import EquipmentFilterSet
from .models import Equipment
from .serializers import (
    AvailabilityQuerySerializer,
    AvailabilityUpdateSerializer,
    EquipmentSerializer,
    NearbyQuerySerializer,
)
from .services import equipment_near, resolve_availability_window


class IsEquipmentOwnerOrAdmin(permissions.BasePermission):
    """Изменять объявление могут только его владелец и администраторы."""

    def has_object_permission(self, request, view, obj: Equipment):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_platform_admin():
            return True
        return obj.owner_id == user.id


class EquipmentViewSet(viewsets.ModelViewSet):
    """Viewset для каталога сельхозтехники."""

    queryset = Equipment.objects.select_related("owner").all()
    serializer_class = EquipmentSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsEquipmentOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = EquipmentFilterSet
    ordering_fields = ["daily_rate", "created_at", "popularity"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list" and self.request.query_params.get("owned") == "true":
            if not self.request.user.is_authenticated:
                raise NotAuthenticated("Authentication required to list your equipment.")
            return qs.filter(owner=self.request.user)
        return qs

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)

    @action(detail=True, methods=["get", "patch"])
    def availability(self, request, pk=None):  # type: ignore
        equipment: Equipment = self.get_object()

        if request.method == "PATCH":
            payload = AvailabilityUpdateSerializer(data=request.data)
            payload.is_valid(raise_exception=True)
            equipment = booking_services.set_equipment_availability(
                equipment, payload.validated_data["available"]
            )
            return Response(self.get_serializer(equipment).data)

        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        window = resolve_availability_window(
            query.validated_data.get("startDate"),
            query.validated_data.get("endDate"),
        )

        if not equipment.availability:
            available = False
            message = "Equipment is not available for booking"
        else:
            available = booking_services.is_available(equipment, window.start_date, window.end_date)
            message = (
                "Equipment is available for the selected dates"
                if available
                else "Equipment is not available for the selected dates"
            )

        return Response(
            {
                "available": available,
                "startDate": window.start_date.isoformat(),
                "endDate": window.end_date.isoformat(),
                "message": message,
            }
        )

    @action(detail=False, methods=["get"], permission_classes=[permissions.AllowAny])
    def nearby(self, request):  # type: ignore
        query = NearbyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        found = equipment_near(
            params["lat"],
            params["lng"],
            params["radius_km"],
            queryset=self.filter_queryset(self.get_queryset()).filter(
                latitude__isnull=False, longitude__isnull=False
            ),
        )
        results = []
        for item, distance in found:
            data = self.get_serializer(item).data
            data["distance_km"] = round(distance, 2)
            results.append(data)
        return Response(results)
