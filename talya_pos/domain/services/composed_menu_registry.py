"""
Composed Menu Registry

Lookup table from catalog item names to composed-menu configurations.
Matching is case-insensitive substring matching: an item whose name contains
every match fragment of a registered entry is treated as that composed menu,
so "Menu Talya express - winter edition" still resolves to "Menu Talya express".
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from talya_pos.domain.entities.composed_menu_entity import ComposedMenuConfig


@dataclass(frozen=True)
class ComposedMenuEntry:
    """One registered composed menu"""

    key: str
    name: str
    config: ComposedMenuConfig
    match_fragments: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        fragments = self.match_fragments or (self.name,)
        normalized = tuple(fragment.strip().lower() for fragment in fragments if fragment.strip())
        if not normalized:
            raise ValueError(f"Composed menu {self.key} has nothing to match on")
        object.__setattr__(self, "match_fragments", normalized)

    def matches(self, item_name: str) -> bool:
        lowered = item_name.lower()
        return all(fragment in lowered for fragment in self.match_fragments)


class ComposedMenuRegistry:
    """Injectable registry of composed menus; first registered match wins"""

    def __init__(self, entries: Iterable[ComposedMenuEntry] = ()):
        self._entries: List[ComposedMenuEntry] = []
        self._logger = logging.getLogger(self.__class__.__name__)
        for entry in entries:
            self.register(entry)

    def register(self, entry: ComposedMenuEntry) -> None:
        if any(existing.key == entry.key for existing in self._entries):
            raise ValueError(f"Composed menu already registered: {entry.key}")
        self._entries.append(entry)
        self._logger.debug("📋 REGISTERED COMPOSED MENU: %s (%s)", entry.key, entry.name)

    @property
    def entries(self) -> Tuple[ComposedMenuEntry, ...]:
        return tuple(self._entries)

    def find_entry(self, item_name: str | None) -> ComposedMenuEntry | None:
        if not item_name:
            return None
        for entry in self._entries:
            if entry.matches(item_name):
                return entry
        return None

    def is_composed_menu(self, item_name: str | None) -> bool:
        return self.find_entry(item_name) is not None

    def get_composed_menu_config(self, item_name: str | None) -> ComposedMenuConfig | None:
        """Configuration for the item, or None when it is a plain item"""
        entry = self.find_entry(item_name)
        return entry.config if entry else None

    def __len__(self) -> int:
        return len(self._entries)
