"""
SQLAlchemy Order Repository

Concrete implementation of OrderRepository using SQLAlchemy ORM.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from talya_pos.domain.entities.order_entity import Order, OrderItemSnapshot
from talya_pos.domain.repositories.order_repository import (
    OrderRepository,
    OrdersListener,
    Unsubscribe,
)
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.infrastructure.database.models import OrderItemRecord, OrderRecord
from talya_pos.infrastructure.database.operations import DatabaseManager
from talya_pos.infrastructure.repositories.order_feed import OrderFeed
from talya_pos.infrastructure.utilities.exceptions import DatabaseError


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(self, db_manager: DatabaseManager):
        self._db_manager = db_manager
        self._feed = OrderFeed()
        self._logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def _managed_session(self, operation: str):
        session = self._db_manager.get_session()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            self._logger.error("💥 DATABASE ERROR during %s: %s", operation, e)
            raise DatabaseError(f"Database error during {operation}: {e}", operation) from e
        finally:
            session.close()

    async def create_order(self, order: Order) -> Order:
        self._logger.info("📝 CREATE ORDER: %s (%s)", order.id, order.destination_label)

        with self._managed_session("create_order") as session:
            session.add(self._to_record(order))
            session.commit()

        self._logger.info("✅ ORDER CREATION SUCCESS: %s, total %s", order.id, order.total)
        self._publish()
        return order

    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        self._logger.debug("🔍 GET ORDER BY ID: %s", order_id)

        with self._managed_session("get_order_by_id") as session:
            record = session.execute(
                select(OrderRecord)
                .options(selectinload(OrderRecord.items))
                .where(OrderRecord.id == order_id)
            ).scalar_one_or_none()

            if record is None:
                self._logger.info("📭 ORDER NOT FOUND: ID %s", order_id)
                return None
            return self._to_entity(record)

    async def get_all_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        return self._load_orders(status)

    async def update_order_if_status(self, order: Order, expected_status: OrderStatus) -> bool:
        self._logger.info(
            "🔄 UPDATE ORDER: %s %s → %s", order.id, expected_status.value, order.status.value
        )

        with self._managed_session("update_order_if_status") as session:
            result = session.execute(
                update(OrderRecord)
                .where(
                    OrderRecord.id == order.id,
                    OrderRecord.status == expected_status.value,
                )
                .values(
                    status=order.status.value,
                    updated_at=order.updated_at,
                    served_at=order.served_at,
                    paid_at=order.paid_at,
                    cancelled_at=order.cancelled_at,
                    cancellation_reason=order.cancellation_reason,
                )
            )
            session.commit()
            updated = result.rowcount == 1

        if not updated:
            self._logger.warning(
                "⚠️ STALE UPDATE REJECTED: order %s is no longer %s", order.id, expected_status.value
            )
            return False

        self._publish()
        return True

    def subscribe(self, listener: OrdersListener) -> Unsubscribe:
        unsubscribe = self._feed.subscribe(listener)
        listener(self._load_orders())
        return unsubscribe

    def _publish(self) -> None:
        """Push a fresh snapshot to subscribers; the committed write stands if this fails"""
        if not self._feed.listener_count:
            return
        try:
            orders = self._load_orders()
        except DatabaseError as e:
            self._logger.error("⚠️ SNAPSHOT REFRESH FAILED, subscribers not notified: %s", e)
            return
        self._feed.publish(orders)

    def _load_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        with self._managed_session("get_all_orders") as session:
            query = (
                select(OrderRecord)
                .options(selectinload(OrderRecord.items))
                .order_by(OrderRecord.created_at.desc())
            )
            if status is not None:
                query = query.where(OrderRecord.status == OrderStatus(status).value)
            records = session.execute(query).scalars().all()
            return [self._to_entity(record) for record in records]

    @staticmethod
    def _to_record(order: Order) -> OrderRecord:
        return OrderRecord(
            id=order.id,
            mode=order.mode.value,
            status=order.status.value,
            table_number=order.table_number,
            client_number=order.client_number,
            total=order.total,
            note=order.note,
            source=order.source,
            created_at=order.created_at,
            updated_at=order.updated_at,
            served_at=order.served_at,
            paid_at=order.paid_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            items=[
                OrderItemRecord(
                    position=position,
                    item_id=item.item_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    special_instructions=item.special_instructions,
                    emoji=item.emoji,
                    portion_label=item.portion_label,
                    composed_details=list(item.composed_details),
                )
                for position, item in enumerate(order.items)
            ],
        )

    @staticmethod
    def _to_entity(record: OrderRecord) -> Order:
        return Order(
            id=record.id,
            mode=OrderMode(record.mode),
            status=OrderStatus(record.status),
            table_number=record.table_number,
            client_number=record.client_number,
            total=record.total,
            note=record.note,
            source=record.source,
            created_at=record.created_at,
            updated_at=record.updated_at,
            served_at=record.served_at,
            paid_at=record.paid_at,
            cancelled_at=record.cancelled_at,
            cancellation_reason=record.cancellation_reason,
            items=tuple(
                OrderItemSnapshot(
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    item_id=item.item_id,
                    special_instructions=item.special_instructions,
                    emoji=item.emoji,
                    portion_label=item.portion_label,
                    composed_details=tuple(item.composed_details or ()),
                )
                for item in record.items
            ),
        )
