"""
In-memory Catalog Repository
"""

from typing import Iterable, List

from talya_pos.domain.entities.menu_entity import MenuCategory, MenuItem
from talya_pos.domain.repositories.catalog_repository import CatalogRepository


class InMemoryCatalogRepository(CatalogRepository):
    """Catalog held in memory; replaced wholesale when the catalog feed changes"""

    def __init__(self, categories: Iterable[MenuCategory] = (), items: Iterable[MenuItem] = ()):
        self._categories: List[MenuCategory] = list(categories)
        self._items: List[MenuItem] = list(items)

    def replace(self, categories: Iterable[MenuCategory], items: Iterable[MenuItem]) -> None:
        self._categories = list(categories)
        self._items = list(items)

    async def get_categories(self) -> List[MenuCategory]:
        return sorted(self._categories, key=lambda category: category.display_order)

    async def get_items(self) -> List[MenuItem]:
        return list(self._items)
