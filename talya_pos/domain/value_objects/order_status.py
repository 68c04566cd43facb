"""
Order status value object

Defines the order lifecycle states and the allow-list of transitions between them.
"""

from enum import Enum
from typing import Dict, FrozenSet


class OrderStatus(str, Enum):
    """Lifecycle state of a persisted order"""

    PENDING = "pending"
    SERVED = "served"
    PAID = "paid"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not STATUS_TRANSITIONS[self]

    @property
    def timestamp_field(self) -> str | None:
        """Name of the write-once timestamp stamped when entering this status"""
        return _TIMESTAMP_FIELDS.get(self)

    @property
    def emoji(self) -> str:
        return _STATUS_EMOJIS[self]

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        return new_status in STATUS_TRANSITIONS[self]


STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED}),
    OrderStatus.SERVED: frozenset({OrderStatus.PAID}),
    OrderStatus.PAID: frozenset(),  # Terminal state
    OrderStatus.CANCELLED: frozenset(),  # Terminal state
}

_TIMESTAMP_FIELDS = {
    OrderStatus.SERVED: "served_at",
    OrderStatus.PAID: "paid_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

_STATUS_EMOJIS = {
    OrderStatus.PENDING: "⏳",
    OrderStatus.SERVED: "🍽️",
    OrderStatus.PAID: "💰",
    OrderStatus.CANCELLED: "❌",
}
