"""
Cart DTOs

Data Transfer Objects for cart-related operations.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from talya_pos.domain.entities.cart_entity import ActiveOrder
from talya_pos.domain.services.menu_wizard import MenuWizard


@dataclass
class CartLineInfo:
    """Cart line information"""
    line_id: str
    item_id: str
    display_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    emoji: Optional[str] = None
    note: Optional[str] = None
    is_composed: bool = False
    composed_details: List[str] = field(default_factory=list)


@dataclass
class CartSummary:
    """Cart summary information"""
    lines: List[CartLineInfo]
    item_count: int
    total: Decimal
    order_type: str
    destination: Optional[str] = None
    global_note: Optional[str] = None

    @classmethod
    def from_active_order(cls, order: ActiveOrder) -> "CartSummary":
        return cls(
            lines=[
                CartLineInfo(
                    line_id=line.line_id,
                    item_id=line.item_id,
                    display_name=line.display_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                    emoji=line.emoji,
                    note=line.note,
                    is_composed=line.is_composed,
                    composed_details=line.composed_details,
                )
                for line in order.lines
            ],
            item_count=order.item_count,
            total=order.total,
            order_type=order.order_type.value,
            destination=order.destination,
            global_note=order.global_note,
        )


@dataclass
class CartOperationResponse:
    """Response for cart operations"""
    success: bool
    cart_summary: Optional[CartSummary] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    wizard: Optional[MenuWizard] = None

    @property
    def requires_wizard(self) -> bool:
        """The item is a composed menu; finish the wizard then add its line"""
        return self.wizard is not None
