"""
Menu catalog entities

Read-only view of the restaurant catalog: categories and the items inside them.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from talya_pos.domain.value_objects.money import round_to_cents
from talya_pos.infrastructure.utilities.constants import MenuSettings


@dataclass(frozen=True)
class MenuCategory:
    """Catalog category, supplies default iconography for its items"""

    id: str
    name: str
    emoji: str | None = None
    active: bool = True
    display_order: int = 0


@dataclass(frozen=True)
class MenuItem:
    """Catalog item"""

    id: str
    name: str
    price: Decimal
    category_id: str
    description: str = ""
    available: bool = True
    display_order: int = 0
    is_popular: bool = False
    is_special: bool = False

    def __post_init__(self):
        """Validate the item after initialization"""
        if not self.id:
            raise ValueError("Menu item id cannot be empty")

        if not self.name or not self.name.strip():
            raise ValueError("Menu item name cannot be empty")

        price = round_to_cents(self.price)
        if price < 0:
            raise ValueError("Menu item price cannot be negative")
        object.__setattr__(self, "price", price)


def category_emoji(category_id: str | None, categories: Iterable[MenuCategory]) -> str:
    """Emoji of the item's category, or the default plate emoji"""
    for category in categories:
        if category.id == category_id and category.emoji:
            return category.emoji
    return MenuSettings.DEFAULT_ITEM_EMOJI
