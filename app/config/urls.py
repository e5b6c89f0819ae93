"""
URL configuration for the credential service.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Register with code + password
        login/                     - Login (session + JWT pair)
        logout/                    - Logout
        check/                     - Current session user
        token/refresh/             - Refresh a JWT access token
    /api/v1/credentials/           - Credential dispensing
        services/                  - Service catalog with stock counts
        generate/                  - Pop a credential for a service (POST)
        history/                   - Caller's generation history
        stats/                     - Caller's usage statistics
    /api/v1/payments/              - Orders and PayPal
        orders/register/           - Register an order (POST)
        orders/status/             - Order status by orderId
        checkout/orders/           - Create a PayPal order (POST)
        checkout/orders/{id}/capture/ - Capture a PayPal order (POST)
        paypal/ipn/                - PayPal IPN listener (POST)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("credentials/", include("credentials.urls")),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Credential Service Admin"
admin.site.site_title = "Credential Service"
admin.site.index_title = "Pools, orders and users"
