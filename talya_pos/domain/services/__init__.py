"""
Domain services

Stateless (or owner-confined) business logic: composed-menu lookup, step
option resolution, the selection wizard and the cart reducer.
"""

from .cart_reducer import CartReducer, apply_cart_command
from .composed_menu_registry import ComposedMenuEntry, ComposedMenuRegistry
from .menu_wizard import MenuWizard, WizardProgress, WizardResponse
from .step_option_resolver import StepOptionResolver, default_portion_categories

__all__ = [
    "CartReducer",
    "apply_cart_command",
    "ComposedMenuEntry",
    "ComposedMenuRegistry",
    "MenuWizard",
    "WizardProgress",
    "WizardResponse",
    "StepOptionResolver",
    "default_portion_categories",
]
