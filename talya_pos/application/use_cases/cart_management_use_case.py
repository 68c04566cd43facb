"""
Cart Management Use Case

Handles adding, removing and annotating cart lines, and redirects composed
menus to the selection wizard.
"""

import logging
import threading
from typing import List, Optional

from talya_pos.application.dtos.cart_dtos import CartOperationResponse, CartSummary
from talya_pos.domain.entities.cart_entity import ActiveOrder
from talya_pos.domain.entities.menu_entity import category_emoji
from talya_pos.domain.repositories.catalog_repository import CatalogRepository
from talya_pos.domain.services.cart_reducer import (
    AddComposedItem,
    AddSimpleItem,
    CartCommand,
    CartReducer,
)
from talya_pos.domain.services.composed_menu_registry import ComposedMenuRegistry
from talya_pos.domain.services.menu_wizard import MenuWizard
from talya_pos.domain.services.step_option_resolver import StepOptionResolver
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.exceptions import TalyaPosError


class CartSession:
    """
    One active order and its owner-confined state.

    All mutations go through dispatch(), serialized by a lock, and each
    replaced state is kept so the last changes can be undone. The open
    composed-menu wizard, if any, lives here as well.
    """

    def __init__(self, reducer: CartReducer, initial: Optional[ActiveOrder] = None):
        self._reducer = reducer
        self._state = initial or ActiveOrder()
        self._history: List[ActiveOrder] = []
        self._lock = threading.RLock()
        self.active_wizard: Optional[MenuWizard] = None

    @property
    def state(self) -> ActiveOrder:
        with self._lock:
            return self._state

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return bool(self._history)

    def dispatch(self, command: CartCommand) -> ActiveOrder:
        with self._lock:
            new_state = self._reducer.apply(self._state, command)
            if new_state is not self._state:
                self._history.append(self._state)
                self._state = new_state
            return self._state

    def undo(self) -> bool:
        with self._lock:
            if not self._history:
                return False
            self._state = self._history.pop()
            return True

    def quantity_of(self, item_id: str, portion_type: PortionType = PortionType.NORMAL) -> int:
        key = (item_id, PortionType(portion_type))
        return sum(line.quantity for line in self.state.lines if line.merge_key == key)


class CartManagementUseCase:
    """Use case for cart operations"""

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        registry: ComposedMenuRegistry,
        resolver: Optional[StepOptionResolver] = None,
        reducer: Optional[CartReducer] = None,
    ):
        self._catalog_repository = catalog_repository
        self._registry = registry
        self._resolver = resolver or StepOptionResolver()
        self._reducer = reducer or CartReducer(registry)
        self._logger = logging.getLogger(self.__class__.__name__)

    def open_session(self, name: str = "") -> CartSession:
        return CartSession(self._reducer, ActiveOrder(name=name))

    async def add_item(
        self,
        session: CartSession,
        item_id: str,
        portion_type: PortionType = PortionType.NORMAL,
        override_price=None,
    ) -> CartOperationResponse:
        """
        Add one unit of a catalog item.

        Composed menus are not added: the response carries an opened wizard
        (requires_wizard is True) and the cart is left untouched.
        """
        self._logger.info("🛒 ADD TO CART: item %s (%s)", item_id, PortionType(portion_type).value)

        item = await self._catalog_repository.get_item_by_id(item_id)
        if item is None:
            return CartOperationResponse(
                success=False, error_message="This item no longer exists.", error_code="ITEM_NOT_FOUND"
            )
        if not item.available:
            return CartOperationResponse(
                success=False,
                error_message=f"{item.name} is not available right now.",
                error_code="ITEM_UNAVAILABLE",
            )

        categories = await self._catalog_repository.get_categories()

        config = self._registry.get_composed_menu_config(item.name)
        if config is not None:
            wizard = MenuWizard(
                item,
                config,
                catalog_items=await self._catalog_repository.get_items(),
                categories=categories,
                resolver=self._resolver,
            )
            wizard.open()
            session.active_wizard = wizard
            self._logger.info("🧭 COMPOSED MENU: %s redirected to wizard", item.name)
            return CartOperationResponse(
                success=True, cart_summary=CartSummary.from_active_order(session.state), wizard=wizard
            )

        return self.execute(
            session,
            AddSimpleItem(
                item=item,
                portion_type=PortionType(portion_type),
                override_price=override_price,
                emoji=category_emoji(item.category_id, categories),
            ),
        )

    def confirm_wizard(self, session: CartSession) -> CartOperationResponse:
        """Finalize the session's wizard and append the composed line"""
        wizard = session.active_wizard
        if wizard is None:
            return CartOperationResponse(success=False, error_message="No menu is being composed.")

        result = wizard.finalize()
        if not result.success:
            return CartOperationResponse(
                success=False,
                cart_summary=CartSummary.from_active_order(session.state),
                error_message=result.error_message,
                error_code="VALIDATION_ERROR",
                wizard=wizard,
            )

        session.active_wizard = None
        return self.execute(session, AddComposedItem(result.line_item))

    def cancel_wizard(self, session: CartSession) -> CartOperationResponse:
        if session.active_wizard is not None:
            session.active_wizard.close()
            session.active_wizard = None
        return CartOperationResponse(success=True, cart_summary=CartSummary.from_active_order(session.state))

    def execute(self, session: CartSession, command: CartCommand) -> CartOperationResponse:
        """Apply any cart command, turning business errors into a failed response"""
        try:
            state = session.dispatch(command)
        except TalyaPosError as e:
            self._logger.warning("⚠️ CART COMMAND REJECTED: %s - %s", type(command).__name__, e)
            return CartOperationResponse(
                success=False,
                cart_summary=CartSummary.from_active_order(session.state),
                error_message=e.user_message,
                error_code=e.error_code,
            )

        self._logger.debug("🛒 CART UPDATED: %d lines, total %s", len(state.lines), state.total)
        return CartOperationResponse(success=True, cart_summary=CartSummary.from_active_order(state))

    def undo(self, session: CartSession) -> CartOperationResponse:
        if not session.undo():
            return CartOperationResponse(success=False, error_message="Nothing to undo.")
        return CartOperationResponse(success=True, cart_summary=CartSummary.from_active_order(session.state))
