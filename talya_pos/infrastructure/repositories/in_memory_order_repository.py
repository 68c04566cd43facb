"""
In-memory Order Repository

Process-local order store used for development and tests.
"""

import logging
import threading
from typing import Dict, List, Optional

from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import (
    OrderRepository,
    OrdersListener,
    Unsubscribe,
)
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.infrastructure.repositories.order_feed import OrderFeed


class InMemoryOrderRepository(OrderRepository):
    """Dictionary-backed OrderRepository with compare-and-set updates"""

    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()
        self._feed = OrderFeed()
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, order: Order) -> Order:
        self._logger.info("📝 CREATE ORDER: %s (%s)", order.id, order.destination_label)
        with self._lock:
            if order.id in self._orders:
                raise ValueError(f"Order already exists: {order.id}")
            self._orders[order.id] = order
            snapshot = self._snapshot()
        self._feed.publish(snapshot)
        return order

    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    async def get_all_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        with self._lock:
            orders = self._snapshot()
        if status is not None:
            orders = [order for order in orders if order.status == status]
        return orders

    async def update_order_if_status(self, order: Order, expected_status: OrderStatus) -> bool:
        with self._lock:
            current = self._orders.get(order.id)
            if current is None or current.status != expected_status:
                self._logger.warning(
                    "⚠️ STALE UPDATE REJECTED: order %s expected %s, found %s",
                    order.id,
                    expected_status.value,
                    current.status.value if current else "missing",
                )
                return False
            self._orders[order.id] = order
            snapshot = self._snapshot()
        self._feed.publish(snapshot)
        return True

    def subscribe(self, listener: OrdersListener) -> Unsubscribe:
        unsubscribe = self._feed.subscribe(listener)
        with self._lock:
            snapshot = self._snapshot()
        listener(snapshot)
        return unsubscribe

    def _snapshot(self) -> List[Order]:
        return sorted(self._orders.values(), key=lambda order: order.created_at, reverse=True)
