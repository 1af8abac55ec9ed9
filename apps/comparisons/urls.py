"""URL routing for comparisons."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ComparisonViewSet

router = DefaultRouter()
router.register(r'', ComparisonViewSet, basename='comparison')

urlpatterns = [path('', include(router.urls))]
