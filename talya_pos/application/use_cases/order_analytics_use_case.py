"""
Order Analytics Use Case

Derives today's statistics from the full order set. Nothing here is stored:
figures are recomputed from each snapshot.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from talya_pos.application.dtos.order_dtos import DishStat, HourlyStat, OrderStatistics
from talya_pos.domain.entities.order_entity import Order
from talya_pos.domain.repositories.order_repository import OrderRepository
from talya_pos.domain.value_objects.money import round_to_cents
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.infrastructure.utilities.constants import AnalyticsSettings


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def orders_created_today(orders: Iterable[Order], now: datetime) -> List[Order]:
    day_start = start_of_day(now)
    day_end = day_start + timedelta(days=1)
    return [order for order in orders if day_start <= order.created_at < day_end]


def compute_order_statistics(
    orders: Iterable[Order],
    now: Optional[datetime] = None,
    top_dishes_limit: int = AnalyticsSettings.TOP_DISHES_LIMIT,
) -> OrderStatistics:
    """Statistics over orders created since local midnight"""
    today = orders_created_today(orders, now or datetime.now())

    status_counts: Dict[OrderStatus, int] = defaultdict(int)
    for order in today:
        status_counts[order.status] += 1

    paid = [order for order in today if order.status == OrderStatus.PAID]
    total_revenue = sum((order.total for order in paid), Decimal("0.00"))
    average = round_to_cents(total_revenue / len(paid)) if paid else Decimal("0.00")

    not_cancelled = [order for order in today if order.status != OrderStatus.CANCELLED]

    return OrderStatistics(
        total_orders=len(today),
        total_revenue=round_to_cents(total_revenue),
        average_order_value=average,
        pending_orders=status_counts[OrderStatus.PENDING],
        served_orders=status_counts[OrderStatus.SERVED],
        paid_orders=status_counts[OrderStatus.PAID],
        cancelled_orders=status_counts[OrderStatus.CANCELLED],
        dine_in_orders=sum(1 for order in today if order.mode == OrderMode.DINE_IN),
        takeaway_orders=sum(1 for order in today if order.mode == OrderMode.TAKEAWAY),
        total_items=sum(order.item_count for order in not_cancelled),
        hourly_breakdown=_hourly_breakdown(today),
        top_dishes=_top_dishes(not_cancelled, top_dishes_limit),
    )


def _hourly_breakdown(orders: List[Order]) -> List[HourlyStat]:
    by_hour: Dict[int, HourlyStat] = {}
    for order in orders:
        stat = by_hour.setdefault(order.created_at.hour, HourlyStat(hour=order.created_at.hour))
        stat.orders += 1
        if order.status == OrderStatus.PAID:
            stat.revenue += order.total
    return [by_hour[hour] for hour in sorted(by_hour)]


def _top_dishes(orders: List[Order], limit: int) -> List[DishStat]:
    dishes: Dict[str, DishStat] = {}
    for order in orders:
        for item in order.items:
            stat = dishes.setdefault(item.name, DishStat(name=item.name))
            stat.quantity += item.quantity
            stat.revenue += item.line_total
    ranked = sorted(dishes.values(), key=lambda stat: (-stat.quantity, stat.name))
    return ranked[:limit]


class OrderAnalyticsUseCase:
    """Use case for dashboard statistics"""

    def __init__(
        self,
        order_repository: OrderRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._order_repository = order_repository
        self._clock = clock
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_today_statistics(self) -> OrderStatistics:
        orders = await self._order_repository.get_all_orders()
        statistics = compute_order_statistics(orders, now=self._clock())
        self._logger.info(
            "📊 TODAY: %d orders, revenue %s, %d paid",
            statistics.total_orders,
            statistics.total_revenue,
            statistics.paid_orders,
        )
        return statistics
