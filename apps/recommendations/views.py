"""API views for recommendations."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .serializers import ScoredEquipmentSerializer
from .services import recommend_for


class RecommendationView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ScoredEquipmentSerializer

    def get(self, request):  # type: ignore
        top = recommend_for(request.user)
        return Response(ScoredEquipmentSerializer(top, many=True).data)
