"""URL configuration for AgriRent project.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from apps.payments.views import payment_gateway_webhook

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/users/', include('apps.users.urls')),
    path('api/v1/equipment/', include('apps.equipment.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/receipts/', include('apps.payments.urls')),
    path('api/v1/reviews/', include('apps.reviews.urls')),
    path('api/v1/comparisons/', include('apps.comparisons.urls')),
    path('api/v1/recommendations/', include('apps.recommendations.urls')),
    # Payment gateway callbacks
    path('api/v1/webhooks/payment-gateway/', payment_gateway_webhook, name='payment-gateway-webhook'),
    # API docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
