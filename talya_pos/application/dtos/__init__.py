"""
Application DTOs
"""

from .cart_dtos import CartLineInfo, CartOperationResponse, CartSummary
from .order_dtos import (
    DishStat,
    HourlyStat,
    OrderBoard,
    OrderStatistics,
    OrderSubmissionResponse,
)

__all__ = [
    "CartLineInfo",
    "CartOperationResponse",
    "CartSummary",
    "DishStat",
    "HourlyStat",
    "OrderBoard",
    "OrderStatistics",
    "OrderSubmissionResponse",
]
