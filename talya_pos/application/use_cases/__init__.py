"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .cart_management_use_case import CartManagementUseCase, CartSession
from .order_analytics_use_case import OrderAnalyticsUseCase, compute_order_statistics
from .order_board_use_case import OrderBoardUseCase, build_order_board
from .order_status_management_use_case import OrderStatusManagementUseCase
from .order_submission_use_case import OrderSubmissionUseCase

__all__ = [
    'CartManagementUseCase',
    'CartSession',
    'OrderAnalyticsUseCase',
    'compute_order_statistics',
    'OrderBoardUseCase',
    'build_order_board',
    'OrderStatusManagementUseCase',
    'OrderSubmissionUseCase',
]
