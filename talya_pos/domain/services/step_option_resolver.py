"""
Step Option Resolver

Turns a wizard step plus the current catalog into the list of options the
staff member can pick from.
"""

import logging
from typing import Dict, List, Mapping, Sequence

from talya_pos.domain.entities.composed_menu_entity import (
    MenuStep,
    MenuStepOption,
    SourceType,
)
from talya_pos.domain.entities.menu_entity import MenuCategory, MenuItem, category_emoji
from talya_pos.domain.value_objects.portion_type import PortionType
from talya_pos.infrastructure.utilities.constants import MenuSettings


def default_portion_categories() -> Dict[str, PortionType]:
    """Category id -> reduced portion offered alongside the normal one"""
    mapping = {category_id: PortionType.PIECE for category_id in MenuSettings.PIECE_CATEGORY_IDS}
    mapping.update(
        {category_id: PortionType.DEMI for category_id in MenuSettings.DEMI_CATEGORY_IDS}
    )
    return mapping


class StepOptionResolver:
    """Resolves the selectable options of a composed-menu step"""

    def __init__(self, portion_categories: Mapping[str, PortionType] | None = None):
        if portion_categories is None:
            portion_categories = default_portion_categories()
        self._portion_categories = {
            category_id: PortionType(portion) for category_id, portion in portion_categories.items()
        }
        self._logger = logging.getLogger(self.__class__.__name__)

    def portion_for_category(self, category_id: str | None) -> PortionType | None:
        return self._portion_categories.get(category_id)

    def resolve_step_options(
        self,
        step: MenuStep,
        catalog_items: Sequence[MenuItem],
        categories: Sequence[MenuCategory],
    ) -> List[MenuStepOption]:
        if step.source_type == SourceType.CUSTOM:
            return list(step.custom_options)

        if step.source_type == SourceType.ITEMS:
            return self._resolve_items(step, catalog_items, categories)

        if step.source_type == SourceType.CATEGORY:
            return self._resolve_category(step, catalog_items, categories)

        self._logger.warning(
            "⚠️ UNKNOWN SOURCE TYPE: step %s has source type %r", step.id, step.source_type
        )
        return []

    def _resolve_items(
        self,
        step: MenuStep,
        catalog_items: Sequence[MenuItem],
        categories: Sequence[MenuCategory],
    ) -> List[MenuStepOption]:
        by_id = {item.id: item for item in catalog_items}
        options = []
        for item_id in step.source_item_ids:
            item = by_id.get(item_id)
            if item is None or not item.available:
                continue
            options.append(self._item_option(item, categories))
        return options

    def _resolve_category(
        self,
        step: MenuStep,
        catalog_items: Sequence[MenuItem],
        categories: Sequence[MenuCategory],
    ) -> List[MenuStepOption]:
        if not step.source_category_id:
            return []

        items = sorted(
            (
                item
                for item in catalog_items
                if item.category_id == step.source_category_id and item.available
            ),
            key=lambda item: item.display_order,
        )

        portion = self.portion_for_category(step.source_category_id)
        options = []
        for item in items:
            options.append(self._item_option(item, categories))
            if portion is not None and portion != PortionType.NORMAL:
                options.append(self._portion_option(item, portion, categories))
        return options

    @staticmethod
    def _item_option(item: MenuItem, categories: Sequence[MenuCategory]) -> MenuStepOption:
        return MenuStepOption(
            id=item.id,
            label=item.name,
            description=item.description or None,
            emoji=category_emoji(item.category_id, categories),
        )

    @staticmethod
    def _portion_option(
        item: MenuItem, portion: PortionType, categories: Sequence[MenuCategory]
    ) -> MenuStepOption:
        return MenuStepOption(
            id=f"{item.id}-{portion.value}",
            label=f"{item.name}{portion.suffix}",
            description=f"{item.description} - {portion.label}" if item.description else portion.label,
            price_adjustment=portion.price_reduction(item.price),
            emoji=f"{category_emoji(item.category_id, categories)}{MenuSettings.PORTION_VARIANT_EMOJI}",
        )
