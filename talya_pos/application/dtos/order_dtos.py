"""
Order DTOs

Data Transfer Objects for order submission, lifecycle views and statistics.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from talya_pos.domain.entities.order_entity import Order
from talya_pos.infrastructure.services.ticket_print_service import PrintOutcome
from talya_pos.infrastructure.utilities.constants import UserMessages


@dataclass
class OrderSubmissionResponse:
    """Two-phase result: the order is durable even when printing failed"""
    success: bool
    order: Optional[Order] = None
    print_outcome: Optional[PrintOutcome] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def order_id(self) -> Optional[str]:
        return self.order.id if self.order else None

    @property
    def warning_message(self) -> Optional[str]:
        """Soft warning for a created order whose ticket may not have printed"""
        if not self.success or self.print_outcome is None or self.print_outcome.success:
            return None
        return f"{UserMessages.PRINT_WARNING}: {self.print_outcome.error}"


@dataclass
class HourlyStat:
    hour: int
    orders: int = 0
    revenue: Decimal = Decimal("0.00")


@dataclass
class DishStat:
    name: str
    quantity: int = 0
    revenue: Decimal = Decimal("0.00")


@dataclass
class OrderStatistics:
    """Today's figures, recomputed from the full order set"""
    total_orders: int = 0
    total_revenue: Decimal = Decimal("0.00")
    average_order_value: Decimal = Decimal("0.00")
    pending_orders: int = 0
    served_orders: int = 0
    paid_orders: int = 0
    cancelled_orders: int = 0
    dine_in_orders: int = 0
    takeaway_orders: int = 0
    total_items: int = 0
    hourly_breakdown: List[HourlyStat] = field(default_factory=list)
    top_dishes: List[DishStat] = field(default_factory=list)


@dataclass
class OrderBoard:
    """Live dashboard view"""
    pending: List[Order] = field(default_factory=list)
    served: List[Order] = field(default_factory=list)
    paid: List[Order] = field(default_factory=list)
    statistics: OrderStatistics = field(default_factory=OrderStatistics)
    occupied_tables: List[str] = field(default_factory=list)
