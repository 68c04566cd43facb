"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
"""

from .catalog_repository import CatalogRepository
from .order_repository import OrderRepository

__all__ = [
    'CatalogRepository',
    'OrderRepository',
]
