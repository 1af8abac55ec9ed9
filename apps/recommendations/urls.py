"""URL routing for recommendations."""

from django.urls import path  # type: ignore

from .views import RecommendationView

urlpatterns = [path('', RecommendationView.as_view(), name='recommendations')]
