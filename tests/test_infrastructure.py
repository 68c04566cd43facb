"""
Infrastructure Layer Tests
"""

import json
import logging
import os
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import httpx
import pytest

from talya_pos.container import get_container, reset_container
from talya_pos.domain.entities.order_entity import Order, OrderItemSnapshot
from talya_pos.domain.value_objects.order_mode import OrderMode
from talya_pos.domain.value_objects.order_status import OrderStatus
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.catalog.composed_menu_loader import (
    load_composed_menu_registry,
    parse_composed_menus,
)
from talya_pos.infrastructure.configuration.config import Settings, get_config, reset_config
from talya_pos.infrastructure.database.operations import DatabaseManager
from talya_pos.infrastructure.logging.logging_config import (
    LoggingConfigOptions,
    get_structured_logger,
    setup_logging,
)
from talya_pos.infrastructure.repositories.order_feed import OrderFeed
from talya_pos.infrastructure.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from talya_pos.infrastructure.services.ticket_print_service import (
    TicketPrintService,
    validate_print_data,
)
from talya_pos.infrastructure.utilities.exceptions import DatabaseError


def make_order(**overrides):
    values = {
        "mode": OrderMode.DINE_IN,
        "total": Decimal("19.40"),
        "items": (
            OrderItemSnapshot(
                name="Menu Talya express",
                unit_price=Decimal("14.90"),
                quantity=1,
                item_id="express",
                emoji="📋",
                composed_details=("Choose drink: Coca-Cola",),
            ),
            OrderItemSnapshot(
                name="Houmous (piece)",
                unit_price=Decimal("4.50"),
                quantity=1,
                special_instructions="no garlic",
                portion_label="piece",
            ),
        ),
        "table_number": "4",
        "note": "birthday",
        "created_at": datetime(2024, 5, 17, 12, 0),
    }
    values.update(overrides)
    return Order(**values)


class FakeSleep:
    """Records backoff delays instead of sleeping"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def print_service(handler, sleep=None, **kwargs):
    options = {
        "endpoint": "http://printer.test/print",
        "printer_address": "192.168.1.50",
        "auth_token": "secret",
        "transport": httpx.MockTransport(handler),
        "sleep": sleep or FakeSleep(),
    }
    options.update(kwargs)
    return TicketPrintService(**options)


class TestTicketPrintService:
    """Test ticket printing over HTTP"""

    def test_payload(self):
        service = print_service(lambda request: httpx.Response(200))
        payload = service.build_payload(make_order())

        assert payload["printerAddress"] == "192.168.1.50"
        assert payload["tableOrClientLabel"] == "Table 4"
        assert payload["orderType"] == "dine-in"
        assert payload["total"] == 19.40
        assert payload["globalNote"] == "birthday"
        menu, houmous = payload["products"]
        assert menu["composedDetails"] == ["Choose drink: Coca-Cola"]
        assert menu["emoji"] == "📋"
        assert "specialInstructions" not in menu
        assert houmous["specialInstructions"] == "no garlic"
        assert houmous["portionLabel"] == "piece"

    @pytest.mark.asyncio
    async def test_print_success(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        outcome = await print_service(handler).print_order(make_order())

        assert outcome.success is True
        assert outcome.attempts == 1
        assert requests[0].headers["Authorization"] == "Bearer secret"
        assert json.loads(requests[0].content)["orderId"]

    @pytest.mark.asyncio
    async def test_retry_then_success(self):
        responses = iter([httpx.Response(503, text="busy"), httpx.Response(200)])
        sleep = FakeSleep()

        outcome = await print_service(lambda request: next(responses), sleep=sleep).print_order(make_order())

        assert outcome.success is True
        assert outcome.attempts == 2
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_timeouts_exhaust_attempts(self):
        """Each attempt times out; the outcome is a failure, not an exception"""
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        sleep = FakeSleep()
        service = print_service(handler, sleep=sleep, max_attempts=3, backoff_seconds=0.5)

        outcome = await service.print_order(make_order())

        assert outcome.success is False
        assert outcome.attempts == 3
        assert "timed out" in outcome.error
        assert sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_unreachable_printer(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        outcome = await print_service(handler).print_order(make_order())
        assert outcome.success is False
        assert "unreachable" in outcome.error

    @pytest.mark.asyncio
    async def test_malformed_endpoint(self):
        calls = []
        sleep = FakeSleep()
        service = print_service(calls.append, sleep=sleep, endpoint="http://[::1/print")

        outcome = await service.print_order(make_order())

        assert outcome.success is False
        assert outcome.attempts == 2
        assert "Invalid printer endpoint" in outcome.error
        assert calls == []

    @pytest.mark.asyncio
    async def test_not_configured(self):
        calls = []
        service = print_service(lambda request: calls.append(request), printer_address="")

        outcome = await service.print_order(make_order())

        assert outcome.success is False
        assert outcome.attempts == 0
        assert calls == []

    def test_validate_print_data(self):
        bad = make_order(items=(OrderItemSnapshot(name=" ", unit_price=Decimal("1"), quantity=0),))
        errors = validate_print_data(bad)
        assert "Item 1 has no name" in errors
        assert "Item 1 has an invalid quantity" in errors
        assert validate_print_data(make_order()) == []

    def test_from_settings(self):
        service = TicketPrintService.from_settings(get_config())
        assert service.is_configured


class TestOrderFeed:
    """Test listener fan-out"""

    def test_failing_listener_does_not_block_others(self):
        feed = OrderFeed()
        received = []

        def broken(orders):
            raise RuntimeError("view crashed")

        feed.subscribe(broken)
        unsubscribe = feed.subscribe(received.append)
        feed.publish([make_order()])

        assert len(received) == 1
        unsubscribe()
        assert feed.listener_count == 1


@pytest.fixture
def db_manager():
    manager = DatabaseManager(database_url="sqlite:///:memory:")
    manager.create_tables()
    yield manager
    manager.close()


class TestSQLAlchemyOrderRepository:
    """Test the SQLAlchemy order store"""

    @pytest.mark.asyncio
    async def test_round_trip(self, db_manager):
        repository = SQLAlchemyOrderRepository(db_manager)
        order = await repository.create_order(make_order())

        loaded = await repository.get_order_by_id(order.id)

        assert loaded.total == Decimal("19.40")
        assert loaded.items[0].composed_details == ("Choose drink: Coca-Cola",)
        assert loaded.items[1].special_instructions == "no garlic"
        assert loaded.note == "birthday"
        assert await repository.get_order_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_compare_and_set_update(self, db_manager):
        """A second writer holding a stale status is refused"""
        repository = SQLAlchemyOrderRepository(db_manager)
        order = await repository.create_order(make_order())

        served = order.transition_to(OrderStatus.SERVED)
        cancelled = order.transition_to(OrderStatus.CANCELLED, reason="duplicate")

        assert await repository.update_order_if_status(served, OrderStatus.PENDING) is True
        assert await repository.update_order_if_status(cancelled, OrderStatus.PENDING) is False

        stored = await repository.get_order_by_id(order.id)
        assert stored.status == OrderStatus.SERVED
        assert stored.served_at is not None
        assert stored.cancellation_reason is None

    @pytest.mark.asyncio
    async def test_filter_and_order(self, db_manager):
        repository = SQLAlchemyOrderRepository(db_manager)
        first = await repository.create_order(make_order(created_at=datetime(2024, 5, 17, 11, 0)))
        second = await repository.create_order(
            make_order(
                mode=OrderMode.TAKEAWAY,
                table_number=None,
                client_number="9",
                created_at=datetime(2024, 5, 17, 12, 30),
            )
        )

        all_orders = await repository.get_all_orders()
        pending = await repository.get_all_orders(status=OrderStatus.PENDING)
        paid = await repository.get_all_orders(status=OrderStatus.PAID)

        assert [order.id for order in all_orders] == [second.id, first.id]
        assert len(pending) == 2
        assert paid == []

    @pytest.mark.asyncio
    async def test_subscription(self, db_manager):
        repository = SQLAlchemyOrderRepository(db_manager)
        snapshots = []

        unsubscribe = repository.subscribe(snapshots.append)
        await repository.create_order(make_order())
        unsubscribe()
        await repository.create_order(make_order())

        assert [len(snapshot) for snapshot in snapshots] == [0, 1]

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_write(self, db_manager):
        """Writes that committed are reported as done when the subscriber refresh fails"""
        repository = SQLAlchemyOrderRepository(db_manager)
        snapshots = []
        repository.subscribe(snapshots.append)
        order = make_order()

        with patch.object(
            repository, "_load_orders", side_effect=DatabaseError("read failed", "get_all_orders")
        ):
            assert await repository.create_order(order) == order
            served = order.transition_to(OrderStatus.SERVED)
            assert await repository.update_order_if_status(served, OrderStatus.PENDING) is True

        stored = await repository.get_all_orders()
        assert [(o.id, o.status) for o in stored] == [(order.id, OrderStatus.SERVED)]
        assert snapshots == [[]]

    @pytest.mark.asyncio
    async def test_errors_wrapped(self, db_manager):
        repository = SQLAlchemyOrderRepository(db_manager)
        db_manager.drop_tables()
        with pytest.raises(DatabaseError):
            await repository.get_all_orders()

    def test_health_check(self, db_manager):
        assert db_manager.health_check() == {"status": "healthy"}


class TestComposedMenuLoader:
    """Test composed menu configuration loading"""

    def test_bundled_menus(self):
        registry = load_composed_menu_registry()

        assert len(registry) == 9
        assert registry.is_composed_menu("Menu Talya express - édition hiver")
        assert registry.is_composed_menu("Assiette au choix & boisson")
        assert not registry.is_composed_menu("Houmous")

    def test_custom_file(self, tmp_path):
        path = tmp_path / "menus.json"
        path.write_text(
            json.dumps(
                {
                    "menus": [
                        {
                            "key": "lunch",
                            "name": "Lunch formula",
                            "steps": [
                                {
                                    "id": "main",
                                    "label": "Main",
                                    "selectionType": "single",
                                    "sourceType": "custom",
                                    "customOptions": [{"id": "a", "label": "A", "priceAdjustment": 1.5}],
                                }
                            ],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )

        registry = load_composed_menu_registry(path)

        config = registry.get_composed_menu_config("Lunch formula")
        assert config.steps[0].custom_options[0].price_adjustment == Decimal("1.50")

    def test_invalid_menu(self):
        with pytest.raises(ValueError, match="broken"):
            parse_composed_menus({"menus": [{"key": "broken", "name": "Broken", "steps": []}]})


class TestConfiguration:
    """Test settings loading"""

    def test_settings_from_environment(self):
        config = get_config()
        assert config.environment == "test"
        assert config.database_url == "sqlite:///:memory:"
        assert config.printer_address == "192.168.1.50"
        assert config.print_max_attempts == 2
        assert config.currency == "EUR"

    def test_singleton_and_reset(self):
        first = get_config()
        assert get_config() is first
        with patch.dict(os.environ, {"CURRENCY": "usd"}):
            reset_config()
            assert get_config().currency == "USD"

    def test_portion_mapping(self):
        mapping = Settings(portion_categories={"starters": "demi"}).portion_mapping()
        assert mapping == {"starters": PortionType.DEMI}

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            Settings(portion_categories={"starters": "quarter"})
        with pytest.raises(ValueError):
            Settings(print_max_attempts=0)
        with pytest.raises(ValueError):
            Settings(printer_endpoint="http://[::1/print")
        with pytest.raises(ValueError):
            Settings(printer_endpoint="ftp://printer.local/print")


class TestLogging:
    """Test logging setup"""

    def test_setup_logging_writes_files(self, tmp_path):
        root_logger = logging.getLogger()
        previous_handlers = list(root_logger.handlers)
        try:
            setup_logging(LoggingConfigOptions(log_level="INFO", log_dir=str(tmp_path), enable_console=False))
            logging.getLogger("OrderSubmissionUseCase").info("order created", extra={"order_id": "abc"})
            for handler in root_logger.handlers:
                handler.flush()

            json_lines = (tmp_path / "talya_pos.json.log").read_text(encoding="utf-8").splitlines()
            record = json.loads(json_lines[-1])
            assert record["order_id"] == "abc"
            assert record["level"] == "INFO"
            assert (tmp_path / "talya_pos.log").exists()
            assert get_structured_logger("TicketPrintService") is not None
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers = previous_handlers

    def test_options_from_settings(self):
        options = LoggingConfigOptions.from_settings(Settings(environment="production", log_level="WARNING"))
        assert options.enable_console is False
        assert options.log_level == "WARNING"


class TestContainer:
    """Test dependency wiring"""

    @pytest.mark.asyncio
    async def test_wiring(self):
        container = get_container()

        assert get_container() is container
        assert len(container.get_composed_menu_registry()) == 9
        assert container.get_cart_management_use_case() is container.get_cart_management_use_case()
        assert isinstance(container.get_order_repository(), SQLAlchemyOrderRepository)
        assert await container.get_order_repository().get_all_orders() == []

    def test_override(self, order_repository):
        container = get_container()
        container.override("order_repository", order_repository)
        assert container.get_order_status_management_use_case()._order_repository is order_repository

    def test_reset(self):
        first = get_container()
        reset_container()
        assert get_container() is not first
