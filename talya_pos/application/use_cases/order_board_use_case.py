"""
Order Board Use Case

Keeps the live dashboard in step with the order store: every push from the
store subscription rebuilds the board synchronously from the snapshot.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from talya_pos.application.dtos.order_dtos import OrderBoard
from talya_pos.application.use_cases.order_analytics_use_case import compute_order_statistics
from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import OrderRepository, Unsubscribe
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus

BoardListener = Callable[[OrderBoard], None]


def build_order_board(orders: Iterable[Order], now: Optional[datetime] = None) -> OrderBoard:
    """Active lists newest first; cancelled orders only count in statistics"""
    orders = sorted(orders, key=lambda order: order.created_at, reverse=True)

    def with_status(status: OrderStatus) -> List[Order]:
        return [order for order in orders if order.status == status]

    occupied = {
        order.table_number
        for order in orders
        if order.mode == OrderMode.DINE_IN and order.is_active
    }

    return OrderBoard(
        pending=with_status(OrderStatus.PENDING),
        served=with_status(OrderStatus.SERVED),
        paid=with_status(OrderStatus.PAID),
        statistics=compute_order_statistics(orders, now=now),
        occupied_tables=sorted(occupied, key=lambda table: (len(table), table)),
    )


class OrderBoardUseCase:
    """Subscribes to the order store and republishes a derived board"""

    def __init__(
        self,
        order_repository: OrderRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._order_repository = order_repository
        self._clock = clock
        self._board = OrderBoard()
        self._listeners: List[BoardListener] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def board(self) -> OrderBoard:
        with self._lock:
            return self._board

    @property
    def is_running(self) -> bool:
        return self._unsubscribe is not None

    def add_listener(self, listener: BoardListener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        if self._unsubscribe is None:
            self._logger.info("📡 ORDER BOARD: subscribing to order feed")
            self._unsubscribe = self._order_repository.subscribe(self._on_orders)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            self._logger.info("📴 ORDER BOARD: unsubscribed")

    def _on_orders(self, orders: List[Order]) -> None:
        board = build_order_board(orders, now=self._clock())
        with self._lock:
            self._board = board

        self._logger.debug(
            "📋 BOARD REFRESHED: %d pending, %d served, %d paid",
            len(board.pending),
            len(board.served),
            len(board.paid),
        )
        for listener in list(self._listeners):
            listener(board)
