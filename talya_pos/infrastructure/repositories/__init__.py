"""
Repository implementations
"""

from .in_memory_catalog_repository import InMemoryCatalogRepository
from .in_memory_order_repository import InMemoryOrderRepository
from .sqlalchemy_order_repository import SQLAlchemyOrderRepository

__all__ = [
    "InMemoryCatalogRepository",
    "InMemoryOrderRepository",
    "SQLAlchemyOrderRepository",
]
