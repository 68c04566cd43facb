"""
Order feed

Push-based subscription shared by the order stores: after each write every
listener receives the full, current order set.
"""

import logging
import threading
from typing import List

from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import OrdersListener, Unsubscribe


class OrderFeed:
    """Listener registry with snapshot broadcast"""

    def __init__(self):
        self._listeners: List[OrdersListener] = []
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, listener: OrdersListener) -> Unsubscribe:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, orders: List[Order]) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(list(orders))
            except Exception as e:  # pylint: disable=broad-except
                # A failing view must not undo a write that already happened
                self._logger.error("💥 ORDER LISTENER FAILED: %s", e, exc_info=True)
