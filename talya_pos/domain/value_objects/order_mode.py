"""
Order mode value object
"""

from enum import Enum


class OrderMode(str, Enum):
    """How the order is served: at a table or as a numbered takeaway"""

    DINE_IN = "dine-in"
    TAKEAWAY = "takeaway"

    def destination_label(self, identifier: str) -> str:
        """Human label printed on tickets, e.g. 'Table 4' or 'Takeaway #12'"""
        if self is OrderMode.DINE_IN:
            return f"Table {identifier}"
        return f"Takeaway #{identifier}"
