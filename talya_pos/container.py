"""
Simplified dependency injection container for the POS engine.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from talya_pos.application.use_cases.cart_management_use_case import CartManagementUseCase
from talya_pos.application.use_cases.order_analytics_use_case import OrderAnalyticsUseCase
from talya_pos.application.use_cases.order_board_use_case import OrderBoardUseCase
from talya_pos.application.use_cases.order_status_management_use_case import (
    OrderStatusManagementUseCase,
)
from talya_pos.application.use_cases.order_submission_use_case import OrderSubmissionUseCase
from talya_pos.domain.repositories.catalog_repository import CatalogRepository
from talya_pos.domain.repositories.order_repository import OrderRepository
from talya_pos.domain.services.cart_reducer import CartReducer
from talya_pos.domain.services.composed_menu_registry import ComposedMenuRegistry
from talya_pos.domain.services.step_option_resolver import StepOptionResolver
from talya_pos.infrastructure.catalog.composed_menu_loader import load_composed_menu_registry
from talya_pos.infrastructure.configuration.config import Settings, get_config
from talya_pos.infrastructure.database.operations import DatabaseManager
from talya_pos.infrastructure.repositories.in_memory_catalog_repository import (
    InMemoryCatalogRepository,
)
from talya_pos.infrastructure.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from talya_pos.infrastructure.services.ticket_print_service import TicketPrintService

logger = logging.getLogger(__name__)


class Container:
    """Simple dependency injection container"""

    _instance: Optional["Container"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "Container":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super(Container, cls).__new__(cls)
                cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        self.config: Settings = get_config()
        self.services: Dict[str, Any] = {}

    def override(self, name: str, instance: Any) -> None:
        """Replace a service, typically with a test double"""
        self.services[name] = instance

    def _get(self, name: str, factory: Callable[[], Any]) -> Any:
        if name not in self.services:
            try:
                self.services[name] = factory()
            except Exception as e:
                logger.error("💥 CONTAINER: failed to build %s: %s", name, e)
                raise
        return self.services[name]

    def get_database_manager(self) -> DatabaseManager:
        def build() -> DatabaseManager:
            manager = DatabaseManager(config=self.config)
            manager.create_tables()
            return manager

        return self._get("database_manager", build)

    def get_order_repository(self) -> OrderRepository:
        return self._get(
            "order_repository",
            lambda: SQLAlchemyOrderRepository(self.get_database_manager()),
        )

    def get_catalog_repository(self) -> CatalogRepository:
        return self._get("catalog_repository", InMemoryCatalogRepository)

    def get_composed_menu_registry(self) -> ComposedMenuRegistry:
        return self._get(
            "composed_menu_registry",
            lambda: load_composed_menu_registry(self.config.composed_menus_path or None),
        )

    def get_step_option_resolver(self) -> StepOptionResolver:
        return self._get(
            "step_option_resolver",
            lambda: StepOptionResolver(self.config.portion_mapping()),
        )

    def get_cart_reducer(self) -> CartReducer:
        return self._get(
            "cart_reducer",
            lambda: CartReducer(self.get_composed_menu_registry(), self.config.portion_mapping()),
        )

    def get_print_service(self) -> TicketPrintService:
        return self._get("print_service", lambda: TicketPrintService.from_settings(self.config))

    def get_cart_management_use_case(self) -> CartManagementUseCase:
        return self._get(
            "cart_management_use_case",
            lambda: CartManagementUseCase(
                self.get_catalog_repository(),
                self.get_composed_menu_registry(),
                resolver=self.get_step_option_resolver(),
                reducer=self.get_cart_reducer(),
            ),
        )

    def get_order_submission_use_case(self) -> OrderSubmissionUseCase:
        return self._get(
            "order_submission_use_case",
            lambda: OrderSubmissionUseCase(
                self.get_order_repository(), print_service=self.get_print_service()
            ),
        )

    def get_order_status_management_use_case(self) -> OrderStatusManagementUseCase:
        return self._get(
            "order_status_management_use_case",
            lambda: OrderStatusManagementUseCase(self.get_order_repository()),
        )

    def get_order_analytics_use_case(self) -> OrderAnalyticsUseCase:
        return self._get(
            "order_analytics_use_case",
            lambda: OrderAnalyticsUseCase(self.get_order_repository()),
        )

    def get_order_board_use_case(self) -> OrderBoardUseCase:
        return self._get(
            "order_board_use_case",
            lambda: OrderBoardUseCase(self.get_order_repository()),
        )

    def shutdown(self) -> None:
        board = self.services.get("order_board_use_case")
        if board is not None:
            board.stop()
        manager = self.services.get("database_manager")
        if manager is not None:
            manager.close()
        logger.info("🛑 CONTAINER: shut down")


def get_container() -> Container:
    """Get the global container instance"""
    return Container()


def reset_container() -> None:
    """Drop the global container (used by tests)"""
    with Container._lock:
        instance = Container._instance
        Container._instance = None
    if instance is not None:
        instance.shutdown()
