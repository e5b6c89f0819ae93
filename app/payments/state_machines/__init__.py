"""
State enums for payment models.
"""

from payments.state_machines.states import (
    NotificationOutcome,
    NotificationStatus,
    OrderStatus,
)

__all__ = [
    "NotificationOutcome",
    "NotificationStatus",
    "OrderStatus",
]
