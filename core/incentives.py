"""
core/incentives.py
------------------
Commission / bonus aggregation across roles.

Commission values are percentage strings ("10%"), bonuses are currency
strings ("50€"). A product's combined incentive for a set of roles is the
sum of its commission and bonus once per contributing role. Both the store
selector and the comparison table go through `combine_incentive`.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable

from core.logger import get_logger
from core.types import CombinedIncentive, Product

logger = get_logger(__name__)

PERCENT = "%"
EURO = "€"


def parse_amount(value: str | None, suffix: str) -> Decimal:
    """
    Parse a unit-suffixed amount into a Decimal.

    Unparseable or non-finite values ("—", "", None, "NaN") count as zero.
    """
    text = (value or "").strip()
    if text.endswith(suffix):
        text = text[: -len(suffix)].strip()
    try:
        amount = Decimal(text.replace(",", "."))
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        logger.debug(f"[Incentives] Treating unparseable amount {value!r} as 0")
        return Decimal(0)
    return amount


def format_amount(value: Decimal, suffix: str) -> str:
    """Render a Decimal in fixed-point notation without trailing zeros and re-append the unit."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}{suffix}"


def combine_incentive(product: Product, role_ids: Iterable[int]) -> CombinedIncentive:
    """
    Sum a product's commission and bonus across the given contributing roles.

    With a single role the result equals the product's own values.
    """
    roles = tuple(role_ids)
    commission = parse_amount(product.commission, PERCENT) * len(roles)
    bonus = parse_amount(product.bonus, EURO) * len(roles)
    return CombinedIncentive(
        product_id=product.id,
        role_combination=roles,
        combined_commission=format_amount(commission, PERCENT),
        combined_bonus=format_amount(bonus, EURO),
    )
