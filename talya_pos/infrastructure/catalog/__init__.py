"""
Catalog configuration loading
"""

from .composed_menu_loader import load_composed_menu_registry, parse_composed_menus

__all__ = ["load_composed_menu_registry", "parse_composed_menus"]
