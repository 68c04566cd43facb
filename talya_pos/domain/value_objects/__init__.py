"""
Domain value objects package

Contains immutable value objects for prices, portions and order states.
"""

from .money import round_to_cents
from .order_mode import OrderMode
from .order_status import STATUS_TRANSITIONS, OrderStatus
from .portion_type import PortionType

__all__ = [
    "round_to_cents",
    "OrderMode",
    "OrderStatus",
    "STATUS_TRANSITIONS",
    "PortionType",
]
