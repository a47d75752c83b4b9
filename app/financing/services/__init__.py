"""
Financing services.

Usage:
    from financing.services import CallbackService, OfferService

    result = OfferService.create_offer(order)
    order = CallbackService.process(request.body)
"""

from financing.services.callback_service import CallbackService
from financing.services.offer_service import OfferService

__all__ = [
    "CallbackService",
    "OfferService",
]
