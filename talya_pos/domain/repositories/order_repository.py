"""
Order repository interface

Defines the contract for order data access operations. Orders are created and
updated, never deleted.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..entities.order_entity import Order
from ..value_objects.order_status import OrderStatus

OrdersListener = Callable[[List[Order]], None]
Unsubscribe = Callable[[], None]


class OrderRepository(ABC):
    """Repository interface for order operations"""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Persist a new order"""
        pass

    @abstractmethod
    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        pass

    @abstractmethod
    async def get_all_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Get all orders, newest first, optionally filtered by status"""
        pass

    @abstractmethod
    async def update_order_if_status(self, order: Order, expected_status: OrderStatus) -> bool:
        """
        Replace the stored order with `order` only if its stored status is still
        `expected_status`. Returns False when another writer got there first.
        """
        pass

    @abstractmethod
    def subscribe(self, listener: OrdersListener) -> Unsubscribe:
        """
        Register a listener called with the full order set (newest first)
        right away and again after every write.
        """
        pass
