"""Payload field extraction: amount and customer name probes.

Upstream senders disagree on where these fields live and in which unit an
amount is expressed. Each probe path carries its own unit so the conversion
rule for one provider can be tested and changed without touching the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from webhook_speaker.models import AmountUnit

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class AmountSource:
    path: tuple[str, ...]
    unit: AmountUnit


AMOUNT_SOURCES: tuple[AmountSource, ...] = (
    AmountSource(("amount",), AmountUnit.CENTS),
    AmountSource(("data", "object", "amount"), AmountUnit.CENTS),      # Stripe
    AmountSource(("total_price",), AmountUnit.DECIMAL),                # Shopify
)

CUSTOMER_NAME_SOURCES: tuple[tuple[str, ...], ...] = (
    ("customer_name",),
    ("data", "object", "customer_name"),
    ("customer", "first_name"),
    ("name",),
)


def dig(body: Any, path: tuple[str, ...]) -> Any:
    """Walk nested dicts; any missing or non-dict hop yields None."""
    node = body
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def normalize_amount(value: Any, unit: AmountUnit) -> str | None:
    """Format an amount as a 2-decimal string, dividing cents by 100."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.debug("Ignoring non-numeric amount %r", value)
        return None
    if not amount.is_finite():
        return None
    if unit is AmountUnit.CENTS:
        amount = amount / 100
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def extract_amount(body: dict[str, Any], divide_all_by_100: bool = False) -> str | None:
    """First non-null amount across AMOUNT_SOURCES, normalized per its unit.

    ``divide_all_by_100`` treats every source as cents, which is how older
    deployments handled Shopify's ``total_price``.
    """
    for source in AMOUNT_SOURCES:
        value = dig(body, source.path)
        if value is None:
            continue
        unit = AmountUnit.CENTS if divide_all_by_100 else source.unit
        return normalize_amount(value, unit)
    return None


def extract_customer_name(body: dict[str, Any]) -> str | None:
    for path in CUSTOMER_NAME_SOURCES:
        value = dig(body, path)
        if value is None or value == "":
            continue
        return value if isinstance(value, str) else str(value)
    return None
