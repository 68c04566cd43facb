"""
Order Status Management Use Case

Moves orders through pending -> served -> paid, or pending -> cancelled.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import OrderRepository
from talya_pos.domain.value_objects.order_status import STATUS_TRANSITIONS, OrderStatus
from talya_pos.infrastructure.utilities.exceptions import (
    BusinessLogicError,
    ConcurrentOrderUpdateError,
    OrderNotFoundError,
)


class OrderStatusManagementUseCase:
    """Use case for managing order status transitions"""

    def __init__(
        self,
        order_repository: OrderRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._order_repository = order_repository
        self._clock = clock
        self._logger = logging.getLogger(self.__class__.__name__)

    async def update_order_status(
        self, order_id: str, new_status: OrderStatus, reason: Optional[str] = None
    ) -> Order:
        """
        Apply one lifecycle transition.

        The order is re-read, the transition validated against the allow-list,
        and the write only lands if the stored status is still the one read.
        """
        new_status = OrderStatus(new_status)
        self._logger.info("📝 STATUS UPDATE: Order %s → %s", order_id, new_status.value)

        try:
            current = await self._order_repository.get_order_by_id(order_id)
            if current is None:
                raise OrderNotFoundError(order_id)

            updated = current.transition_to(new_status, reason=reason, now=self._clock())

            applied = await self._order_repository.update_order_if_status(updated, current.status)
            if not applied:
                raise ConcurrentOrderUpdateError(order_id, current.status.value)

            self._logger.info(
                "✅ STATUS UPDATED: Order %s %s → %s",
                order_id,
                current.status.value,
                new_status.value,
            )
            return updated

        except BusinessLogicError as e:
            self._logger.error("💥 STATUS UPDATE ERROR: Order %s, %s", order_id, e)
            raise

    async def mark_served(self, order_id: str) -> Order:
        return await self.update_order_status(order_id, OrderStatus.SERVED)

    async def mark_paid(self, order_id: str) -> Order:
        return await self.update_order_status(order_id, OrderStatus.PAID)

    async def cancel_order(self, order_id: str, reason: str) -> Order:
        return await self.update_order_status(order_id, OrderStatus.CANCELLED, reason=reason)

    async def get_orders_by_status(self, status: OrderStatus) -> List[Order]:
        status = OrderStatus(status)
        orders = await self._order_repository.get_all_orders(status=status)
        self._logger.info("📊 FOUND %d ORDERS with status %s", len(orders), status.value)
        return orders

    async def get_active_orders(self) -> List[Order]:
        """Pending and served orders"""
        orders = await self._order_repository.get_all_orders()
        return [order for order in orders if order.is_active]

    @staticmethod
    def allowed_transitions(status: OrderStatus) -> List[OrderStatus]:
        return sorted(STATUS_TRANSITIONS[OrderStatus(status)], key=lambda value: value.value)
