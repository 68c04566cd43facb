# pylint: disable=too-many-instance-attributes
"""
Cart entities

The active order being composed at the till: cart lines plus the order
destination (table or takeaway client number).
"""

import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Tuple

from talya_pos.domain.entities.composed_menu_entity import MenuSelection, StepBreakdown
from talya_pos.domain.value_objects.money import round_to_cents
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.exceptions import InvalidPriceError


def new_line_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CartLineItem:
    """One row of the cart"""

    item_id: str
    display_name: str
    unit_price: Decimal
    quantity: int = 1
    emoji: str | None = None
    note: str | None = None
    portion_type: PortionType | None = None
    variant: str | None = None
    portion_label: str | None = None
    original_price: Decimal | None = None
    is_composed: bool = False
    selections: Tuple[MenuSelection, ...] = ()
    selected_items_breakdown: Tuple[StepBreakdown, ...] = ()
    line_id: str = field(default_factory=new_line_id)

    def __post_init__(self):
        """Validate the line after initialization"""
        if self.quantity < 1:
            raise ValueError("Cart line quantity must be at least 1")

        unit_price = round_to_cents(self.unit_price)
        if unit_price < 0:
            raise InvalidPriceError(self.display_name, unit_price)
        object.__setattr__(self, "unit_price", unit_price)

    @property
    def merge_key(self) -> tuple | None:
        """Identity used to merge repeated adds; composed lines never merge"""
        if self.is_composed:
            return None
        return (self.item_id, self.portion_type or self.variant or PortionType.NORMAL)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def composed_details(self) -> List[str]:
        return [group.describe() for group in self.selected_items_breakdown]

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)


def compute_total(lines: Iterable[CartLineItem]) -> Decimal:
    """Sum of unit_price x quantity, recomputed from scratch"""
    return sum((line.line_total for line in lines), Decimal("0.00"))


@dataclass(frozen=True)
class ActiveOrder:
    """Cart in progress; every mutation produces a new value"""

    id: str = field(default_factory=new_line_id)
    name: str = ""
    lines: Tuple[CartLineItem, ...] = ()
    order_type: OrderMode = OrderMode.DINE_IN
    table_number: str | None = None
    client_number: str | None = None
    global_note: str | None = None
    total: Decimal = field(default=Decimal("0.00"), init=False)

    def __post_init__(self):
        object.__setattr__(self, "total", compute_total(self.lines))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def destination(self) -> str | None:
        """Table number for dine-in, client number for takeaway"""
        if self.order_type == OrderMode.DINE_IN:
            return self.table_number
        return self.client_number

    def find_line(self, line_id: str) -> CartLineItem | None:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None

    def with_lines(self, lines: Iterable[CartLineItem]) -> "ActiveOrder":
        return replace(self, lines=tuple(lines))
