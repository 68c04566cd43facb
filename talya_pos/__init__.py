"""
Talya POS

Restaurant point-of-sale engine: composed-menu wizard, cart pricing,
order submission and order lifecycle.
"""

__version__ = "0.1.0"
