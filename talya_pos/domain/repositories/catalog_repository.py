"""
Catalog repository interface

Read-only access to the menu catalog.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.menu_entity import MenuCategory, MenuItem


class CatalogRepository(ABC):
    """Repository interface for the menu catalog"""

    @abstractmethod
    async def get_categories(self) -> List[MenuCategory]:
        """Get all categories ordered by display order"""
        pass

    @abstractmethod
    async def get_items(self) -> List[MenuItem]:
        """Get all catalog items, available or not"""
        pass

    async def get_item_by_id(self, item_id: str) -> Optional[MenuItem]:
        """Find one item by id"""
        for item in await self.get_items():
            if item.id == item_id:
                return item
        return None
