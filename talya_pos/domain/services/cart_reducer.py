"""
Cart Reducer

Every cart mutation is a command applied by a pure function
(ActiveOrder, command) -> ActiveOrder. The total is recomputed from the lines
each time a new ActiveOrder is built.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Dict, FrozenSet, Mapping

from talya_pos.domain.entities.cart_entity import ActiveOrder, CartLineItem, new_line_id
from talya_pos.domain.entities.menu_entity import MenuItem
from talya_pos.domain.services.composed_menu_registry import ComposedMenuRegistry
from talya_pos.domain.services.step_option_resolver import default_portion_categories
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.exceptions import (
    ComposedMenuRequiresWizardError,
    InvalidPriceError,
    PortionNotOfferedError,
    validate_and_raise,
)


class CartCommand:
    """Marker base class for cart commands"""


@dataclass(frozen=True)
class AddSimpleItem(CartCommand):
    item: MenuItem
    portion_type: PortionType = PortionType.NORMAL
    override_price: Decimal | None = None
    emoji: str | None = None


@dataclass(frozen=True)
class AddComposedItem(CartCommand):
    line: CartLineItem


@dataclass(frozen=True)
class RemoveOne(CartCommand):
    item_id: str
    portion_type: PortionType = PortionType.NORMAL


@dataclass(frozen=True)
class RemoveLine(CartCommand):
    line_id: str


@dataclass(frozen=True)
class SetLineNote(CartCommand):
    line_id: str
    note: str | None


@dataclass(frozen=True)
class ClearCart(CartCommand):
    pass


@dataclass(frozen=True)
class ResetOrder(CartCommand):
    pass


@dataclass(frozen=True)
class SetOrderType(CartCommand):
    order_type: OrderMode


@dataclass(frozen=True)
class SetTableNumber(CartCommand):
    table_number: str | None


@dataclass(frozen=True)
class SetClientNumber(CartCommand):
    client_number: str | None


@dataclass(frozen=True)
class SetGlobalNote(CartCommand):
    note: str | None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class CartReducer:
    """Applies cart commands; holds configuration only, never cart state"""

    def __init__(
        self,
        registry: ComposedMenuRegistry | None = None,
        portion_categories: Mapping[str, PortionType] | None = None,
    ):
        self._registry = registry or ComposedMenuRegistry()
        if portion_categories is None:
            portion_categories = default_portion_categories()
        self._portion_categories = {
            category_id: PortionType(portion) for category_id, portion in portion_categories.items()
        }
        self._handlers: Dict[type, Callable[[ActiveOrder, CartCommand], ActiveOrder]] = {
            AddSimpleItem: self._add_simple_item,
            AddComposedItem: self._add_composed_item,
            RemoveOne: self._remove_one,
            RemoveLine: self._remove_line,
            SetLineNote: self._set_line_note,
            ClearCart: self._clear_cart,
            ResetOrder: self._reset_order,
            SetOrderType: self._set_order_type,
            SetTableNumber: self._set_table_number,
            SetClientNumber: self._set_client_number,
            SetGlobalNote: self._set_global_note,
        }

    def available_portions(self, category_id: str | None) -> FrozenSet[PortionType]:
        """Portions offered for a category; unmapped categories only offer normal"""
        reduced = self._portion_categories.get(category_id)
        if reduced is None or reduced == PortionType.NORMAL:
            return frozenset({PortionType.NORMAL})
        return frozenset({PortionType.NORMAL, reduced})

    def apply(self, state: ActiveOrder, command: CartCommand) -> ActiveOrder:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported cart command: {type(command).__name__}")
        return handler(state, command)

    def _add_simple_item(self, state: ActiveOrder, command: AddSimpleItem) -> ActiveOrder:
        item = command.item
        if self._registry.is_composed_menu(item.name):
            raise ComposedMenuRequiresWizardError(item.name)

        portion = PortionType(command.portion_type)
        if portion not in self.available_portions(item.category_id):
            raise PortionNotOfferedError(item.name, portion.value)

        key = (item.id, portion)
        lines = list(state.lines)
        for index, line in enumerate(lines):
            if line.merge_key == key:
                lines[index] = line.with_quantity(line.quantity + 1)
                return state.with_lines(lines)

        if command.override_price is not None:
            validate_and_raise(command.override_price >= 0, InvalidPriceError, item.name, command.override_price)
            unit_price = command.override_price
        else:
            unit_price = portion.adjusted_price(item.price)

        lines.append(
            CartLineItem(
                item_id=item.id,
                display_name=f"{item.name}{portion.suffix}",
                unit_price=unit_price,
                quantity=1,
                emoji=command.emoji,
                portion_type=portion,
                portion_label=portion.label,
                original_price=item.price,
            )
        )
        return state.with_lines(lines)

    @staticmethod
    def _add_composed_item(state: ActiveOrder, command: AddComposedItem) -> ActiveOrder:
        line = command.line
        if not line.is_composed:
            raise ValueError("Only composed lines can be added as composed items")

        if state.find_line(line.line_id) is not None:
            line = replace(line, line_id=new_line_id())
        return state.with_lines(state.lines + (line,))

    @staticmethod
    def _remove_one(state: ActiveOrder, command: RemoveOne) -> ActiveOrder:
        key = (command.item_id, PortionType(command.portion_type))
        lines = list(state.lines)
        for index, line in enumerate(lines):
            if line.merge_key != key:
                continue
            if line.quantity > 1:
                lines[index] = line.with_quantity(line.quantity - 1)
            else:
                del lines[index]
            return state.with_lines(lines)
        return state

    @staticmethod
    def _remove_line(state: ActiveOrder, command: RemoveLine) -> ActiveOrder:
        return state.with_lines(line for line in state.lines if line.line_id != command.line_id)

    @staticmethod
    def _set_line_note(state: ActiveOrder, command: SetLineNote) -> ActiveOrder:
        note = _clean(command.note)
        return state.with_lines(
            replace(line, note=note) if line.line_id == command.line_id else line
            for line in state.lines
        )

    @staticmethod
    def _clear_cart(state: ActiveOrder, command: ClearCart) -> ActiveOrder:
        return state.with_lines(())

    @staticmethod
    def _reset_order(state: ActiveOrder, command: ResetOrder) -> ActiveOrder:
        return replace(state, lines=(), table_number=None, client_number=None, global_note=None)

    @staticmethod
    def _set_order_type(state: ActiveOrder, command: SetOrderType) -> ActiveOrder:
        order_type = OrderMode(command.order_type)
        if order_type == OrderMode.DINE_IN:
            return replace(state, order_type=order_type, client_number=None)
        return replace(state, order_type=order_type, table_number=None)

    @staticmethod
    def _set_table_number(state: ActiveOrder, command: SetTableNumber) -> ActiveOrder:
        return replace(
            state,
            order_type=OrderMode.DINE_IN,
            table_number=_clean(command.table_number),
            client_number=None,
        )

    @staticmethod
    def _set_client_number(state: ActiveOrder, command: SetClientNumber) -> ActiveOrder:
        return replace(
            state,
            order_type=OrderMode.TAKEAWAY,
            client_number=_clean(command.client_number),
            table_number=None,
        )

    @staticmethod
    def _set_global_note(state: ActiveOrder, command: SetGlobalNote) -> ActiveOrder:
        return replace(state, global_note=_clean(command.note))


def apply_cart_command(
    state: ActiveOrder, command: CartCommand, reducer: CartReducer | None = None
) -> ActiveOrder:
    """Functional entry point: apply one command with the given (or default) reducer"""
    return (reducer or CartReducer()).apply(state, command)
