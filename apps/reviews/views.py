"""API views for managing reviews."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Review
from .serializers import ReviewCreateSerializer, ReviewSerializer
from .services import record_review, refresh_equipment_popularity


class IsReviewerOrAdmin(permissions.BasePermission):
    """Allow renters to manage their reviews and admins to manage all."""

    def has_object_permission(self, request, view, obj: Review) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_platform_admin():
            return True
        return obj.user_id == user.id


class ReviewViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for creating, retrieving and deleting reviews."""

    queryset = Review.objects.select_related('equipment', 'user', 'booking').all()
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsReviewerOrAdmin]

    def get_serializer_class(self):  # type: ignore
        if self.action == 'create':
            return ReviewCreateSerializer
        return ReviewSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        equipment_id = self.request.query_params.get('equipment')
        if equipment_id and equipment_id.isdigit():
            qs = qs.filter(equipment_id=int(equipment_id))
        return qs

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = record_review(
            user=request.user,
            booking=serializer.validated_data['booking'],
            rating=serializer.validated_data['rating'],
            comment=serializer.validated_data.get('comment', ''),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance: Review) -> None:  # type: ignore
        equipment_id = instance.equipment_id
        instance.delete()
        refresh_equipment_popularity(equipment_id)
