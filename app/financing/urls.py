"""
URL configuration for the financing app.

Routes:
    - POST callback/ - Provider callback endpoint
    - GET eligibility/ - Eligibility and widget data
    - POST orders/<id>/pay/ - Start financing checkout
    - GET orders/<id>/checkout-context/ - Post-checkout data

All routes are prefixed with /api/v1/financing/ when included in the main URLconf.
The gateway router (financing.views.gateway_api) is mounted at the site root
by config/urls.py.
"""

from django.urls import path

from financing.views import (
    CheckoutContextView,
    EligibilityView,
    ProcessPaymentView,
    financing_callback,
)

app_name = "financing"

urlpatterns = [
    path("callback/", financing_callback, name="callback"),
    path("eligibility/", EligibilityView.as_view(), name="eligibility"),
    path("orders/<int:order_id>/pay/", ProcessPaymentView.as_view(), name="process-payment"),
    path(
        "orders/<int:order_id>/checkout-context/",
        CheckoutContextView.as_view(),
        name="checkout-context",
    ),
]
