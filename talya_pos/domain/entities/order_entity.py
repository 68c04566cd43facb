# pylint: disable=too-many-instance-attributes
"""
Order Entity - persisted order and its lifecycle rules
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Tuple

from talya_pos.domain.entities.cart_entity import ActiveOrder, CartLineItem
from talya_pos.domain.value_objects.money import round_to_cents
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.infrastructure.utilities.exceptions import (
    CancellationReasonRequiredError,
    InvalidStatusTransitionError,
)


@dataclass(frozen=True)
class OrderItemSnapshot:
    """Line of a persisted order, frozen at submission time"""

    name: str
    unit_price: Decimal
    quantity: int
    item_id: str | None = None
    special_instructions: str | None = None
    emoji: str | None = None
    portion_label: str | None = None
    composed_details: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "unit_price", round_to_cents(self.unit_price))

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_cart_line(cls, line: CartLineItem) -> "OrderItemSnapshot":
        return cls(
            name=line.display_name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            item_id=line.item_id,
            special_instructions=line.note,
            emoji=line.emoji,
            portion_label=line.portion_label,
            composed_details=tuple(line.composed_details),
        )


@dataclass(frozen=True)
class Order:
    """Order domain entity"""

    mode: OrderMode
    total: Decimal
    items: Tuple[OrderItemSnapshot, ...]
    table_number: str | None = None
    client_number: str | None = None
    note: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime | None = None
    served_at: datetime | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    source: str = "admin"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        """Validate the order after initialization"""
        object.__setattr__(self, "total", round_to_cents(self.total))
        if self.total < 0:
            raise ValueError("Order total cannot be negative")

        has_table = bool(self.table_number)
        has_client = bool(self.client_number)
        if has_table == has_client:
            raise ValueError("Order needs exactly one of table_number or client_number")

        if self.mode == OrderMode.DINE_IN and not has_table:
            raise ValueError("Dine-in orders must carry a table number")

        if self.mode == OrderMode.TAKEAWAY and not has_client:
            raise ValueError("Takeaway orders must carry a client number")

    @classmethod
    def from_active_order(cls, active_order: ActiveOrder, now: datetime | None = None) -> "Order":
        """Snapshot a validated cart into a new pending order"""
        is_dine_in = active_order.order_type == OrderMode.DINE_IN
        note = (active_order.global_note or "").strip() or None
        return cls(
            mode=active_order.order_type,
            total=active_order.total,
            items=tuple(OrderItemSnapshot.from_cart_line(line) for line in active_order.lines),
            table_number=active_order.table_number.strip() if is_dine_in else None,
            client_number=None if is_dine_in else active_order.client_number.strip(),
            note=note,
            created_at=now or datetime.now(),
        )

    @property
    def destination(self) -> str:
        return self.table_number if self.mode == OrderMode.DINE_IN else self.client_number

    @property
    def destination_label(self) -> str:
        return self.mode.destination_label(self.destination)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_active(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.SERVED)

    def transition_to(
        self,
        new_status: OrderStatus,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> "Order":
        """
        Return a copy of the order moved to new_status.

        Raises without building anything when the transition is not in the
        allow-list or a cancellation has no reason, so the original is never
        half-updated.
        """
        new_status = OrderStatus(new_status)
        if not self.status.can_transition_to(new_status):
            raise InvalidStatusTransitionError(self.id, self.status.value, new_status.value)

        changes = {"status": new_status}
        if new_status == OrderStatus.CANCELLED:
            cleaned_reason = (reason or "").strip()
            if not cleaned_reason:
                raise CancellationReasonRequiredError(self.id)
            changes["cancellation_reason"] = cleaned_reason

        now = now or datetime.now()
        timestamp_field = new_status.timestamp_field
        if getattr(self, timestamp_field) is None:
            changes[timestamp_field] = now
        changes["updated_at"] = now

        return replace(self, **changes)
