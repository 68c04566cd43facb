"""
Portion type value object

Reduced-size portions of catalog items with fixed price multipliers.
"""

from decimal import Decimal
from enum import Enum

from .money import round_to_cents


class PortionType(str, Enum):
    """Portion variant of a catalog item"""

    NORMAL = "normal"
    PIECE = "piece"
    DEMI = "demi"

    @property
    def multiplier(self) -> Decimal:
        return _MULTIPLIERS[self]

    @property
    def label(self) -> str | None:
        """Short label shown on tickets; None for the normal portion"""
        return _LABELS[self]

    @property
    def suffix(self) -> str:
        """Suffix appended to the item name on cart lines"""
        return f" ({self.label})" if self.label else ""

    def adjusted_price(self, base_price) -> Decimal:
        """round(base_price x multiplier, 2)"""
        return round_to_cents(round_to_cents(base_price) * self.multiplier)

    def price_reduction(self, base_price) -> Decimal:
        """Signed adjustment taking a full-price item down to this portion"""
        base = round_to_cents(base_price)
        return -round_to_cents(base * (Decimal("1") - self.multiplier))


_MULTIPLIERS = {
    PortionType.NORMAL: Decimal("1.0"),
    PortionType.PIECE: Decimal("0.3"),
    PortionType.DEMI: Decimal("0.5"),
}

_LABELS = {
    PortionType.NORMAL: None,
    PortionType.PIECE: "piece",
    PortionType.DEMI: "demi part",
}
