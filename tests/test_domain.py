"""
Domain Layer Tests
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from talya_pos.domain.entities.cart_entity import ActiveOrder, CartLineItem
from talya_pos.domain.entities.composed_menu_entity import (
    ComposedMenuConfig,
    MenuStep,
    SelectedOptionEntry,
    SelectionType,
    StepBreakdown,
)
from talya_pos.domain.entities.menu_entity import MenuCategory, MenuItem, category_emoji
from talya_pos.domain.entities.order_entity import Order, OrderItemSnapshot
from talya_pos.domain.value_objects.money import round_to_cents
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.exceptions import (
    CancellationReasonRequiredError,
    InvalidPriceError,
    InvalidStatusTransitionError,
)


def make_order(**overrides):
    values = {
        "mode": OrderMode.DINE_IN,
        "total": Decimal("12.00"),
        "items": (OrderItemSnapshot(name="Houmous", unit_price=Decimal("6.00"), quantity=2),),
        "table_number": "4",
        "created_at": datetime(2024, 5, 17, 12, 0),
    }
    values.update(overrides)
    return Order(**values)


class TestRounding:
    """Test cent rounding"""

    def test_round_half_up(self):
        """Amounts are rounded half-up to cents"""
        assert round_to_cents("2.345") == Decimal("2.35")
        assert round_to_cents(0.1 + 0.2) == Decimal("0.30")
        assert round_to_cents(3) == Decimal("3.00")


class TestPortionType:
    """Test portion pricing"""

    def test_piece_price(self):
        """A 10.00 item as a piece costs 3.00"""
        assert PortionType.PIECE.adjusted_price(Decimal("10.00")) == Decimal("3.00")

    def test_demi_price(self):
        """A 7.00 item as a half portion costs 3.50"""
        assert PortionType.DEMI.adjusted_price(Decimal("7.00")) == Decimal("3.50")

    def test_normal_price_unchanged(self):
        assert PortionType.NORMAL.adjusted_price(Decimal("8.90")) == Decimal("8.90")

    def test_price_reduction(self):
        assert PortionType.DEMI.price_reduction(Decimal("5.00")) == Decimal("-2.50")
        assert PortionType.PIECE.price_reduction(Decimal("10.00")) == Decimal("-7.00")
        assert PortionType.NORMAL.price_reduction(Decimal("10.00")) == Decimal("0.00")

    def test_labels(self):
        assert PortionType.NORMAL.suffix == ""
        assert PortionType.PIECE.suffix == " (piece)"
        assert PortionType.DEMI.label == "demi part"


class TestOrderMode:
    """Test destination labels"""

    def test_destination_labels(self):
        assert OrderMode.DINE_IN.destination_label("4") == "Table 4"
        assert OrderMode.TAKEAWAY.destination_label("12") == "Takeaway #12"


class TestMenuEntities:
    """Test catalog and composed-menu entities"""

    def test_menu_item_price_rounded(self):
        item = MenuItem(id="a", name="Falafel", price="8.005", category_id="c")
        assert item.price == Decimal("8.01")

    def test_menu_item_requires_name(self):
        with pytest.raises(ValueError):
            MenuItem(id="a", name="  ", price=Decimal("1"), category_id="c")

    def test_category_emoji_fallback(self):
        categories = [MenuCategory(id="drinks", name="Drinks", emoji="🥤")]
        assert category_emoji("drinks", categories) == "🥤"
        assert category_emoji("unknown", categories) == "🍽️"

    def test_step_bounds_validated(self):
        with pytest.raises(ValueError, match="exceeds"):
            MenuStep(
                id="s",
                label="Sides",
                selection_type=SelectionType.MULTIPLE,
                source_type="custom",
                min_selections=3,
                max_selections=2,
            )

    def test_config_rejects_empty_and_duplicate_steps(self):
        with pytest.raises(ValueError):
            ComposedMenuConfig(steps=())

        step = MenuStep(id="s", label="S", selection_type=SelectionType.SINGLE, source_type="custom")
        with pytest.raises(ValueError, match="duplicate"):
            ComposedMenuConfig(steps=(step, step))

    def test_selection_hints(self):
        step = MenuStep(
            id="s",
            label="Sides",
            selection_type=SelectionType.MULTIPLE,
            source_type="custom",
            min_selections=2,
            max_selections=2,
        )
        assert step.selection_hint() == "Select exactly 2 options"

    def test_breakdown_describe(self):
        group = StepBreakdown(
            step_id="drink",
            step_label="Choose drink",
            items=(SelectedOptionEntry(id="coca", name="Coca-Cola", note="no ice"),),
        )
        assert group.describe() == "Choose drink: Coca-Cola (no ice)"


class TestCartEntities:
    """Test cart lines and the active order"""

    def test_total_recomputed_from_lines(self):
        lines = (
            CartLineItem(item_id="a", display_name="A", unit_price=Decimal("2.50"), quantity=2),
            CartLineItem(item_id="b", display_name="B", unit_price=Decimal("4.00")),
        )
        order = ActiveOrder(lines=lines)
        assert order.total == Decimal("9.00")
        assert order.item_count == 3
        assert order.with_lines(lines[:1]).total == Decimal("5.00")

    def test_composed_lines_have_no_merge_key(self):
        line = CartLineItem(item_id="m", display_name="Menu", unit_price=Decimal("14.90"), is_composed=True)
        assert line.merge_key is None

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValueError):
            CartLineItem(item_id="a", display_name="A", unit_price=Decimal("1"), quantity=0)

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidPriceError, match="negative"):
            CartLineItem(item_id="a", display_name="A", unit_price=Decimal("-0.50"))


class TestOrderLifecycle:
    """Test order status transitions"""

    @pytest.mark.parametrize(
        "current,new,allowed",
        [
            (current, new, new in {
                OrderStatus.PENDING: {OrderStatus.SERVED, OrderStatus.CANCELLED},
                OrderStatus.SERVED: {OrderStatus.PAID},
            }.get(current, set()))
            for current in OrderStatus
            for new in OrderStatus
        ],
    )
    def test_transition_allow_list(self, current, new, allowed):
        """Every (current, new) pair follows the allow-list"""
        assert current.can_transition_to(new) is allowed

    def test_terminal_states(self):
        assert OrderStatus.PAID.is_terminal
        assert OrderStatus.CANCELLED.is_terminal
        assert not OrderStatus.PENDING.is_terminal

    def test_serve_stamps_timestamp(self):
        order = make_order()
        now = datetime(2024, 5, 17, 12, 10)
        served = order.transition_to(OrderStatus.SERVED, now=now)
        assert served.status == OrderStatus.SERVED
        assert served.served_at == now
        assert served.updated_at == now
        assert order.status == OrderStatus.PENDING

    def test_served_at_is_write_once(self):
        first = datetime(2024, 5, 17, 12, 10)
        served = make_order().transition_to(OrderStatus.SERVED, now=first)
        paid = served.transition_to(OrderStatus.PAID, now=first + timedelta(minutes=30))
        assert paid.served_at == first
        assert paid.paid_at == first + timedelta(minutes=30)

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidStatusTransitionError):
            make_order().transition_to(OrderStatus.PAID)

    def test_cancel_requires_reason(self):
        order = make_order()
        with pytest.raises(CancellationReasonRequiredError):
            order.transition_to(OrderStatus.CANCELLED, reason="   ")
        assert order.status == OrderStatus.PENDING

    def test_cancel_with_reason(self):
        cancelled = make_order().transition_to(OrderStatus.CANCELLED, reason="  customer left ")
        assert cancelled.cancellation_reason == "customer left"
        assert cancelled.cancelled_at is not None

    def test_order_needs_exactly_one_destination(self):
        with pytest.raises(ValueError):
            make_order(client_number="7")
        with pytest.raises(ValueError):
            make_order(mode=OrderMode.TAKEAWAY)

    def test_from_active_order(self):
        line = CartLineItem(item_id="a", display_name="Houmous", unit_price=Decimal("6.00"), note="extra oil")
        active = ActiveOrder(
            lines=(line,),
            order_type=OrderMode.TAKEAWAY,
            client_number=" 12 ",
            global_note="  ",
        )
        order = Order.from_active_order(active, now=datetime(2024, 5, 17, 12, 0))
        assert order.status == OrderStatus.PENDING
        assert order.client_number == "12"
        assert order.table_number is None
        assert order.note is None
        assert order.total == Decimal("6.00")
        assert order.items[0].special_instructions == "extra oil"
        assert order.destination_label == "Takeaway #12"
