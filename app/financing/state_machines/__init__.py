"""
State machine enums for the financing gateway.

FinancingOffer uses django-fsm with the FinancingState values.
"""

from financing.state_machines.states import (
    CallbackStatus,
    FinancingState,
    GatewayMode,
)

__all__ = [
    "CallbackStatus",
    "FinancingState",
    "GatewayMode",
]
