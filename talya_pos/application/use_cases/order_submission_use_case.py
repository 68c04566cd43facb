"""
Order Submission Use Case

Validates the active order, persists it as pending, then prints the ticket.
Order durability comes first: a failed print never undoes the order.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from talya_pos.application.dtos.order_dtos import OrderSubmissionResponse
from talya_pos.domain.entities.cart_entity import ActiveOrder
from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import OrderRepository
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.infrastructure.services.ticket_print_service import PrintOutcome, TicketPrintService
from talya_pos.infrastructure.utilities.constants import UserMessages
from talya_pos.infrastructure.utilities.exceptions import (
    DatabaseError,
    EmptyCartError,
    MissingDestinationError,
    OrderNotFoundError,
    ValidationError,
    validate_and_raise,
)


class OrderSubmissionUseCase:
    """Use case for turning the cart into a persisted order"""

    def __init__(
        self,
        order_repository: OrderRepository,
        print_service: Optional[TicketPrintService] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._order_repository = order_repository
        self._print_service = print_service
        self._clock = clock
        self._logger = logging.getLogger(self.__class__.__name__)

    async def submit(self, active_order: ActiveOrder) -> OrderSubmissionResponse:
        self._logger.info(
            "🛒 ORDER SUBMISSION: %d lines, total %s, %s",
            len(active_order.lines),
            active_order.total,
            active_order.order_type.value,
        )

        try:
            self._validate(active_order)
        except ValidationError as e:
            self._logger.warning("❌ ORDER REJECTED: %s", e)
            return OrderSubmissionResponse(
                success=False, error_message=e.user_message, error_code=e.error_code
            )

        order = Order.from_active_order(active_order, now=self._clock())

        try:
            order = await self._order_repository.create_order(order)
        except DatabaseError as e:
            self._logger.error("💥 ORDER STORE UNAVAILABLE: %s", e)
            return OrderSubmissionResponse(
                success=False,
                error_message=UserMessages.STORE_UNAVAILABLE,
                error_code=e.error_code,
            )

        self._logger.info("✅ ORDER CREATED: %s for %s", order.id, order.destination_label)

        print_outcome = await self._print(order)
        return OrderSubmissionResponse(success=True, order=order, print_outcome=print_outcome)

    async def reprint_ticket(self, order_id: str) -> PrintOutcome:
        """Send an existing order's ticket again"""
        order = await self._order_repository.get_order_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        self._logger.info("🖨️ REPRINT: order %s", order_id)
        return await self._print(order)

    async def _print(self, order: Order) -> PrintOutcome:
        if self._print_service is None:
            self._logger.warning("⚠️ NO PRINTER: order %s not printed", order.id)
            return PrintOutcome.failed(UserMessages.PRINTER_NOT_CONFIGURED)

        try:
            outcome = await self._print_service.print_order(order)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._logger.error("💥 PRINT ERROR for order %s: %s", order.id, e, exc_info=True)
            return PrintOutcome.failed(f"Print error: {e}")

        if not outcome.success:
            self._logger.warning(
                "⚠️ PRINT FAILED for order %s after %d attempts: %s",
                order.id,
                outcome.attempts,
                outcome.error,
            )
        return outcome

    @staticmethod
    def _validate(active_order: ActiveOrder) -> None:
        validate_and_raise(not active_order.is_empty, EmptyCartError)

        if active_order.order_type == OrderMode.DINE_IN:
            field = "table_number"
        else:
            field = "client_number"
        destination = getattr(active_order, field) or ""
        validate_and_raise(bool(destination.strip()), MissingDestinationError, field)
