"""
Composed menu loader

Builds a ComposedMenuRegistry from JSON configuration data. The bundled file
ships with the package; a deployment can point COMPOSED_MENUS_PATH at its own.
"""

import json
import logging
from decimal import Decimal
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List

from talya_pos.domain.entities.composed_menu_entity import (
    ComposedMenuConfig,
    MenuStep,
    MenuStepOption,
    SelectionType,
)
from talya_pos.domain.services.composed_menu_registry import (
    ComposedMenuEntry,
    ComposedMenuRegistry,
)

logger = logging.getLogger(__name__)

BUNDLED_MENUS_FILE = "composed_menus.json"


def _parse_option(data: Dict[str, Any]) -> MenuStepOption:
    return MenuStepOption(
        id=data["id"],
        label=data["label"],
        description=data.get("description"),
        price_adjustment=Decimal(str(data.get("priceAdjustment", 0))),
        emoji=data.get("emoji"),
    )


def _parse_step(data: Dict[str, Any]) -> MenuStep:
    return MenuStep(
        id=data["id"],
        label=data["label"],
        description=data.get("description"),
        selection_type=SelectionType(data.get("selectionType", "single")),
        required=data.get("required", True),
        min_selections=data.get("minSelections"),
        max_selections=data.get("maxSelections"),
        allow_custom_note=data.get("allowCustomNote", True),
        source_type=data.get("sourceType", "custom"),
        source_category_id=data.get("sourceCategoryId"),
        source_item_ids=tuple(data.get("sourceItemIds", ())),
        custom_options=tuple(_parse_option(option) for option in data.get("customOptions", ())),
    )


def parse_composed_menus(payload: Dict[str, Any]) -> List[ComposedMenuEntry]:
    """Parse the {"menus": [...]} document into registry entries"""
    entries = []
    for menu in payload.get("menus", []):
        try:
            config = ComposedMenuConfig(
                key=menu["key"],
                name=menu["name"],
                steps=tuple(_parse_step(step) for step in menu["steps"]),
            )
            entries.append(
                ComposedMenuEntry(
                    key=menu["key"],
                    name=menu["name"],
                    config=config,
                    match_fragments=tuple(menu.get("match", ())),
                )
            )
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid composed menu {menu.get('key', '?')}: {e}") from e
    return entries


def load_composed_menu_registry(path: str | Path | None = None) -> ComposedMenuRegistry:
    """Load the registry from `path`, or from the bundled configuration"""
    if path:
        raw = Path(path).read_text(encoding="utf-8")
        source = str(path)
    else:
        raw = resources.files("talya_pos.data").joinpath(BUNDLED_MENUS_FILE).read_text(encoding="utf-8")
        source = BUNDLED_MENUS_FILE

    registry = ComposedMenuRegistry(parse_composed_menus(json.loads(raw)))
    logger.info("📋 LOADED %d COMPOSED MENUS from %s", len(registry), source)
    return registry
