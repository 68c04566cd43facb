"""
Domain entities package

Contains the catalog, composed-menu, cart and order entities of the POS engine.
"""

from .cart_entity import ActiveOrder, CartLineItem
from .composed_menu_entity import (
    ComposedMenuConfig,
    MenuSelection,
    MenuStep,
    MenuStepOption,
    SelectedOptionEntry,
    SelectionType,
    SourceType,
    StepBreakdown,
)
from .menu_entity import MenuCategory, MenuItem
from .order_entity import Order, OrderItemSnapshot

__all__ = [
    "ActiveOrder",
    "CartLineItem",
    "ComposedMenuConfig",
    "MenuSelection",
    "MenuStep",
    "MenuStepOption",
    "SelectedOptionEntry",
    "SelectionType",
    "SourceType",
    "StepBreakdown",
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderItemSnapshot",
]
