"""URL declarations for receipts."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ReceiptViewSet

router = DefaultRouter()
router.register(r"", ReceiptViewSet, basename="receipt")

urlpatterns = [
    path("", include(router.urls)),
]
