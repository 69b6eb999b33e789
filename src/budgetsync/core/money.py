"""Amount conversion helpers.

Amounts are stored and sent as integers in minor currency units (cents).
Positive means money leaving the account, matching the provider's sign.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from budgetsync.config import settings


def to_minor_units(amount: Decimal | float | int | str, minor_unit: int | None = None) -> int:
    """Convert a provider amount in major units (e.g. dollars) to minor units.

    >>> to_minor_units(Decimal("12.34"))
    1234
    >>> to_minor_units(-0.005)
    -1
    """
    exponent = settings.currency_minor_unit if minor_unit is None else minor_unit
    scaled = Decimal(str(amount)) * (Decimal(10) ** exponent)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def outflow(amount: int) -> int | None:
    return amount if amount > 0 else None


def inflow(amount: int) -> int | None:
    return -amount if amount < 0 else None
