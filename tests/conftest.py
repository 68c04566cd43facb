"""
Test configuration and fixtures for the Talya POS engine
"""

import os
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from talya_pos.container import reset_container
from talya_pos.domain.entities.composed_menu_entity import (
    ComposedMenuConfig,
    MenuStep,
    MenuStepOption,
    SelectionType,
)
from talya_pos.domain.entities.menu_entity import MenuCategory, MenuItem
from talya_pos.domain.services.cart_reducer import CartReducer
from talya_pos.domain.services.composed_menu_registry import (
    ComposedMenuEntry,
    ComposedMenuRegistry,
)
from talya_pos.domain.services.step_option_resolver import StepOptionResolver
from talya_pos.infrastructure.configuration.config import reset_config
from talya_pos.infrastructure.repositories.in_memory_catalog_repository import (
    InMemoryCatalogRepository,
)
from talya_pos.infrastructure.repositories.in_memory_order_repository import (
    InMemoryOrderRepository,
)


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env():
    """Mock environment variables for testing"""
    test_env = {
        'ENVIRONMENT': 'test',
        'LOG_LEVEL': 'DEBUG',
        'DATABASE_URL': 'sqlite:///:memory:',
        'PRINTER_ENDPOINT': 'http://printer.test/print',
        'PRINTER_ADDRESS': '192.168.1.50',
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        reset_container()
        yield test_env
        reset_container()
        reset_config()


@pytest.fixture
def fixed_now():
    """A mid-service timestamp used as the clock in tests"""
    return datetime(2024, 5, 17, 13, 30, 0)


@pytest.fixture
def categories():
    return [
        MenuCategory(id="sandwiches", name="Sandwiches", emoji="🥙", display_order=1),
        MenuCategory(id="hors-doeuvre-froid", name="Cold starters", emoji="🥗", display_order=2),
        MenuCategory(id="hors-doeuvre-chaud", name="Hot starters", emoji="🧆", display_order=3),
        MenuCategory(id="drinks", name="Drinks", emoji="🥤", display_order=4),
        MenuCategory(id="menus", name="Menus", emoji="📋", display_order=5),
    ]


@pytest.fixture
def menu_items():
    return [
        MenuItem(id="shawarma", name="Shawarma sandwich", price=Decimal("9.50"), category_id="sandwiches"),
        MenuItem(id="falafel", name="Falafel sandwich", price=Decimal("8.00"), category_id="sandwiches"),
        MenuItem(id="houmous", name="Houmous", price=Decimal("10.00"), category_id="hors-doeuvre-froid"),
        MenuItem(
            id="taboule",
            name="Taboulé",
            price=Decimal("6.00"),
            category_id="hors-doeuvre-froid",
            display_order=2,
        ),
        MenuItem(
            id="kibbe",
            name="Kibbé",
            price=Decimal("7.00"),
            category_id="hors-doeuvre-chaud",
            description="Fried bulgur croquettes",
        ),
        MenuItem(
            id="borek",
            name="Borek",
            price=Decimal("5.00"),
            category_id="hors-doeuvre-chaud",
            available=False,
        ),
        MenuItem(id="coke", name="Coca-Cola", price=Decimal("2.50"), category_id="drinks"),
        MenuItem(id="water", name="Water", price=Decimal("1.50"), category_id="drinks"),
        MenuItem(id="express", name="Menu Talya express", price=Decimal("14.90"), category_id="menus"),
    ]


@pytest.fixture
def express_config():
    """Sandwich, exactly two cold starters, one drink"""
    return ComposedMenuConfig(
        key="menu-talya-express",
        name="Menu Talya express",
        steps=(
            MenuStep(
                id="sandwich",
                label="Choose sandwich",
                selection_type=SelectionType.SINGLE,
                source_type="items",
                source_item_ids=("shawarma", "falafel"),
            ),
            MenuStep(
                id="starters",
                label="Choose starters",
                selection_type=SelectionType.MULTIPLE,
                source_type="category",
                source_category_id="hors-doeuvre-froid",
                min_selections=2,
                max_selections=2,
            ),
            MenuStep(
                id="drink",
                label="Choose drink",
                selection_type=SelectionType.SINGLE,
                source_type="custom",
                allow_custom_note=False,
                custom_options=(
                    MenuStepOption(id="coca", label="Coca-Cola", emoji="🥤"),
                    MenuStepOption(id="eau", label="Water", emoji="💧"),
                ),
            ),
        ),
    )


@pytest.fixture
def registry(express_config):
    return ComposedMenuRegistry(
        [ComposedMenuEntry(key=express_config.key, name=express_config.name, config=express_config)]
    )


@pytest.fixture
def resolver():
    return StepOptionResolver()


@pytest.fixture
def reducer(registry):
    return CartReducer(registry)


@pytest.fixture
def catalog_repository(categories, menu_items):
    return InMemoryCatalogRepository(categories, menu_items)


@pytest.fixture
def order_repository():
    return InMemoryOrderRepository()


@pytest.fixture
def items_by_id(menu_items):
    return {item.id: item for item in menu_items}
