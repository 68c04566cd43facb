# pylint: disable=too-many-instance-attributes
"""
Composed menu entities

A composed menu is a catalog item whose content is assembled through an ordered
sequence of selection steps (pick a sandwich, pick two sides, pick a drink).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple

from talya_pos.domain.value_objects.money import round_to_cents


class SelectionType(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


class SourceType(str, Enum):
    CATEGORY = "category"
    ITEMS = "items"
    CUSTOM = "custom"


@dataclass(frozen=True)
class MenuStepOption:
    """A selectable choice within a step"""

    id: str
    label: str
    description: str | None = None
    price_adjustment: Decimal = Decimal("0")
    emoji: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "price_adjustment", round_to_cents(self.price_adjustment))


@dataclass(frozen=True)
class MenuStep:
    """One stage of a composed-menu wizard"""

    id: str
    label: str
    selection_type: SelectionType
    source_type: str
    required: bool = True
    description: str | None = None
    min_selections: int | None = None
    max_selections: int | None = None
    allow_custom_note: bool = True
    source_category_id: str | None = None
    source_item_ids: Tuple[str, ...] = ()
    custom_options: Tuple[MenuStepOption, ...] = ()

    def __post_init__(self):
        """Validate the step bounds"""
        if not self.id:
            raise ValueError("Menu step id cannot be empty")

        if self.min_selections is not None and self.min_selections < 0:
            raise ValueError(f"Step {self.id}: min_selections cannot be negative")

        if self.max_selections is not None and self.max_selections < 1:
            raise ValueError(f"Step {self.id}: max_selections must be at least 1")

        if (
            self.min_selections is not None
            and self.max_selections is not None
            and self.min_selections > self.max_selections
        ):
            raise ValueError(
                f"Step {self.id}: min_selections ({self.min_selections}) "
                f"exceeds max_selections ({self.max_selections})"
            )

    @property
    def is_multiple(self) -> bool:
        return self.selection_type == SelectionType.MULTIPLE

    @property
    def uses_custom_options(self) -> bool:
        return self.source_type == SourceType.CUSTOM

    def selection_hint(self) -> str:
        """Human-readable cardinality rule, e.g. 'Select exactly 2 options'"""
        if not self.is_multiple:
            return "Select 1 option" if self.required else "Select up to 1 option"

        low, high = self.min_selections, self.max_selections
        if low is not None and low == high:
            return f"Select exactly {low} options"
        if low is not None and high is not None:
            return f"Select {low} to {high} options"
        if high is not None:
            return f"Select up to {high} options"
        if low is not None:
            return f"Select at least {low} options"
        return "Select any number of options"


@dataclass(frozen=True)
class ComposedMenuConfig:
    """Ordered, non-empty sequence of steps"""

    steps: Tuple[MenuStep, ...]
    key: str = ""
    name: str = ""

    def __post_init__(self):
        if not self.steps:
            raise ValueError(f"Composed menu {self.key or self.name} has no steps")

        step_ids = [step.id for step in self.steps]
        duplicates = sorted({step_id for step_id in step_ids if step_ids.count(step_id) > 1})
        if duplicates:
            raise ValueError(
                f"Composed menu {self.key or self.name} has duplicate step ids: {', '.join(duplicates)}"
            )

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def step_index(self, step_id: str) -> int:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        raise KeyError(step_id)


@dataclass(frozen=True)
class MenuSelection:
    """Choices made for one step; a later update for the same step replaces it"""

    step_id: str
    selected_item_ids: Tuple[str, ...] = ()
    selected_custom_options: Tuple[str, ...] = ()
    custom_note: str | None = None

    @property
    def total_selected(self) -> int:
        return len(self.selected_item_ids) + len(self.selected_custom_options)

    @property
    def option_ids(self) -> Tuple[str, ...]:
        return self.selected_item_ids + self.selected_custom_options


@dataclass(frozen=True)
class SelectedOptionEntry:
    """A resolved option inside a composed line's breakdown"""

    id: str
    name: str
    price_adjustment: Decimal = Decimal("0")
    note: str | None = None


@dataclass(frozen=True)
class StepBreakdown:
    """Resolved selections for one step, in step order"""

    step_id: str
    step_label: str
    items: Tuple[SelectedOptionEntry, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        """One ticket line, e.g. 'Choose drink: Coca-Cola'"""
        names = ", ".join(entry.name for entry in self.items)
        notes = [entry.note for entry in self.items if entry.note]
        text = f"{self.step_label}: {names}"
        if notes:
            # All entries of a step share the step note
            text = f"{text} ({notes[0]})"
        return text
