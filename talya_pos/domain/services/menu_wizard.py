"""
Menu Wizard

Step-by-step selection state machine for composed menus. One state per step
index, walked linearly; finalizing the last step produces a composed cart line.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence

from talya_pos.domain.entities.cart_entity import CartLineItem
from talya_pos.domain.entities.composed_menu_entity import (
    ComposedMenuConfig,
    MenuSelection,
    MenuStep,
    MenuStepOption,
    SelectedOptionEntry,
    StepBreakdown,
)
from talya_pos.domain.entities.menu_entity import MenuCategory, MenuItem, category_emoji
from talya_pos.domain.services.step_option_resolver import StepOptionResolver
from talya_pos.infrastructure.utilities.exceptions import WizardStepInvalidError


@dataclass
class WizardResponse:
    """Outcome of a wizard action"""

    success: bool
    error_message: str | None = None
    cancelled: bool = False
    line_item: CartLineItem | None = None


@dataclass(frozen=True)
class WizardProgress:
    """Where the wizard stands, for display"""

    step_index: int
    step_count: int
    step_label: str
    is_last_step: bool
    hint: str


class MenuWizard:
    """Selection wizard for one composed menu item"""

    def __init__(
        self,
        menu_item: MenuItem,
        config: ComposedMenuConfig,
        catalog_items: Sequence[MenuItem] = (),
        categories: Sequence[MenuCategory] = (),
        resolver: StepOptionResolver | None = None,
    ):
        self._menu_item = menu_item
        self._config = config
        self._catalog_items = list(catalog_items)
        self._categories = list(categories)
        self._resolver = resolver or StepOptionResolver()
        self._logger = logging.getLogger(self.__class__.__name__)

        self._is_open = False
        self._index = 0
        self._selections: Dict[str, MenuSelection] = {}
        self._notes: Dict[str, str] = {}

    @property
    def menu_item(self) -> MenuItem:
        return self._menu_item

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_step(self) -> MenuStep:
        return self._config.steps[self._index]

    @property
    def is_last_step(self) -> bool:
        return self._index == self._config.step_count - 1

    @property
    def selections(self) -> Dict[str, MenuSelection]:
        return dict(self._selections)

    def open(self) -> None:
        """Open the wizard, discarding anything left from a previous run"""
        self._reset()
        self._is_open = True
        self._logger.info(
            "🧭 WIZARD OPENED: %s (%d steps)", self._menu_item.name, self._config.step_count
        )

    def close(self) -> None:
        self._reset()
        self._is_open = False

    def current_options(self) -> List[MenuStepOption]:
        return self.options_for(self.current_step)

    def options_for(self, step: MenuStep) -> List[MenuStepOption]:
        return self._resolver.resolve_step_options(step, self._catalog_items, self._categories)

    def current_selection(self) -> MenuSelection | None:
        return self._selections.get(self.current_step.id)

    def current_note(self) -> str | None:
        return self._notes.get(self.current_step.id)

    def select(self, option_id: str, is_custom_option: bool | None = None) -> WizardResponse:
        """Select (single) or toggle (multiple) an option on the current step"""
        if not self._is_open:
            return WizardResponse(success=False, error_message="The wizard is not open.")

        step = self.current_step
        if option_id not in {option.id for option in self.current_options()}:
            return WizardResponse(
                success=False,
                error_message=f"Option '{option_id}' is not available for '{step.label}'.",
            )

        use_custom = step.uses_custom_options if is_custom_option is None else is_custom_option
        existing = self._selections.get(step.id) or MenuSelection(step_id=step.id)

        if not step.is_multiple:
            bucket = (option_id,)
            selection = MenuSelection(
                step_id=step.id,
                selected_item_ids=() if use_custom else bucket,
                selected_custom_options=bucket if use_custom else (),
            )
        else:
            current = existing.selected_custom_options if use_custom else existing.selected_item_ids
            if option_id in current:
                bucket = tuple(selected for selected in current if selected != option_id)
            else:
                bucket = current + (option_id,)
                if step.max_selections is not None and len(bucket) > step.max_selections:
                    # Oldest selections are evicted to make room
                    evicted = bucket[: len(bucket) - step.max_selections]
                    bucket = bucket[-step.max_selections:]
                    self._logger.debug("↩️ EVICTED %s from step %s", evicted, step.id)
            if use_custom:
                selection = replace(existing, selected_custom_options=bucket)
            else:
                selection = replace(existing, selected_item_ids=bucket)

        self._selections[step.id] = selection
        return WizardResponse(success=True)

    def set_note(self, note: str | None) -> WizardResponse:
        """Attach a free-text note to the current step"""
        if not self._is_open:
            return WizardResponse(success=False, error_message="The wizard is not open.")

        step = self.current_step
        if not step.allow_custom_note:
            return WizardResponse(
                success=False, error_message=f"Notes are not allowed for '{step.label}'."
            )

        cleaned = (note or "").strip()
        if cleaned:
            self._notes[step.id] = cleaned
        else:
            self._notes.pop(step.id, None)
        return WizardResponse(success=True)

    def is_current_step_valid(self) -> bool:
        return self._is_step_valid(self.current_step)

    def next(self) -> WizardResponse:
        if not self._is_open:
            return WizardResponse(success=False, error_message="The wizard is not open.")

        if not self.is_current_step_valid():
            return self._invalid_step_response()

        self._index = min(self._index + 1, self._config.step_count - 1)
        return WizardResponse(success=True)

    def previous(self) -> WizardResponse:
        """Go back one step; going back from the first step cancels the wizard"""
        if not self._is_open:
            return WizardResponse(success=False, error_message="The wizard is not open.")

        if self._index == 0:
            self._logger.info("🚪 WIZARD CANCELLED: %s", self._menu_item.name)
            self.close()
            return WizardResponse(success=True, cancelled=True)

        self._index -= 1
        return WizardResponse(success=True)

    def progress(self) -> WizardProgress:
        step = self.current_step
        return WizardProgress(
            step_index=self._index,
            step_count=self._config.step_count,
            step_label=step.label,
            is_last_step=self.is_last_step,
            hint=step.selection_hint(),
        )

    def finalize(self) -> WizardResponse:
        """Build the composed cart line from the accumulated selections"""
        if not self._is_open:
            return WizardResponse(success=False, error_message="The wizard is not open.")

        if not self.is_last_step:
            return WizardResponse(
                success=False, error_message="Complete the remaining steps before confirming."
            )

        if not self.is_current_step_valid():
            return self._invalid_step_response()

        selections = []
        breakdown = []
        for step in self._config.steps:
            selection = self._selections.get(step.id)
            note = self._notes.get(step.id)
            if selection is None:
                continue
            selections.append(replace(selection, custom_note=note))

            entries = self._resolve_entries(step, selection, note)
            if entries:
                breakdown.append(
                    StepBreakdown(step_id=step.id, step_label=step.label, items=tuple(entries))
                )

        line = CartLineItem(
            item_id=self._menu_item.id,
            display_name=self._menu_item.name,
            unit_price=self._menu_item.price,
            quantity=1,
            emoji=category_emoji(self._menu_item.category_id, self._categories),
            original_price=self._menu_item.price,
            is_composed=True,
            selections=tuple(selections),
            selected_items_breakdown=tuple(breakdown),
        )

        self._logger.info(
            "✅ WIZARD FINALIZED: %s with %d step selections", self._menu_item.name, len(breakdown)
        )
        self.close()
        return WizardResponse(success=True, line_item=line)

    def _resolve_entries(
        self, step: MenuStep, selection: MenuSelection, note: str | None
    ) -> List[SelectedOptionEntry]:
        options = {option.id: option for option in self.options_for(step)}
        catalog = {item.id: item for item in self._catalog_items}

        entries = []
        for option_id in selection.option_ids:
            option = options.get(option_id)
            if option is not None:
                entries.append(
                    SelectedOptionEntry(
                        id=option.id,
                        name=option.label,
                        price_adjustment=option.price_adjustment,
                        note=note,
                    )
                )
                continue

            item = catalog.get(option_id)
            if item is not None:
                entries.append(SelectedOptionEntry(id=item.id, name=item.name, note=note))
                continue

            self._logger.warning(
                "⚠️ STALE SELECTION DROPPED: option %s of step %s in %s",
                option_id,
                step.id,
                self._menu_item.name,
            )
        return entries

    def _is_step_valid(self, step: MenuStep) -> bool:
        selection = self._selections.get(step.id)
        if selection is None:
            return not step.required

        total_selected = selection.total_selected
        if step.required and total_selected == 0:
            return False
        if not step.is_multiple:
            return True
        if step.min_selections is not None and total_selected < step.min_selections:
            return False
        if step.max_selections is not None and total_selected > step.max_selections:
            return False
        return True

    def _invalid_step_response(self) -> WizardResponse:
        step = self.current_step
        error = WizardStepInvalidError(step.label, step.selection_hint())
        return WizardResponse(success=False, error_message=error.user_message)

    def _reset(self) -> None:
        self._index = 0
        self._selections = {}
        self._notes = {}
