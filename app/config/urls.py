"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - Gateway router (?gateway-api=<gateway id>)
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /docs/                         - ReDoc API documentation
    /api/v1/financing/             - Financing gateway endpoints
        callback/                  - Provider callback (POST)
        eligibility/               - Eligibility and widget data (GET)
        orders/{id}/pay/           - Start financing checkout (POST)
        orders/{id}/checkout-context/ - Post-checkout data (GET)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check
from financing.views import gateway_api

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Financing gateway
    path("financing/", include("financing.urls")),
]

urlpatterns = [
    # Payment gateway callbacks (callback URLs point at the site root)
    path("", gateway_api, name="gateway_api"),
    # Documentation
    path("docs/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Financing Gateway Admin"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Welcome to the Admin Portal"
