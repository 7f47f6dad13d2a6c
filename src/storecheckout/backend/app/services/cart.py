"""Normalise untrusted cart payloads and price them against the catalog.

The coercions here are deliberately lenient: a non-list cart becomes an empty
cart, and a missing, non-numeric or sub-1 quantity becomes 1. Pricing is the
strict step: a single unknown SKU rejects the whole cart.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from storecheckout.backend.app.errors import UnknownProductError
from storecheckout.backend.app.models import CartItem, LineItem
from storecheckout.backend.config.catalog import Catalog

_LOGGER = logging.getLogger(__name__)

# Processor limit on the length of a single metadata value.
METADATA_VALUE_LIMIT = 500


def _coerce_int(value: Any, *, default: int) -> int:
    """Truncate ``value`` toward zero, returning ``default`` when it is not a number."""

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def coerce_quantity(value: Any) -> int:
    """Return ``value`` as an integer quantity floored at 1."""

    if not value:
        return 1
    return max(1, _coerce_int(value, default=1))


def _entry_field(entry: Any, name: str) -> Any:
    return entry.get(name) if isinstance(entry, Mapping) else None


def normalize_items(raw_items: Any) -> list[CartItem]:
    """Coerce an arbitrary cart payload into an ordered list of ``CartItem``."""

    if not isinstance(raw_items, list):
        return []

    return [
        CartItem(
            id=str(_entry_field(entry, "id") or "").strip(),
            qty=coerce_quantity(_entry_field(entry, "qty")),
        )
        for entry in raw_items
        if entry
    ]


def build_line_items(items: Iterable[CartItem], catalog: Catalog) -> list[LineItem]:
    """Price every cart item, failing on the first SKU missing from ``catalog``."""

    line_items: list[LineItem] = []
    for item in items:
        unit_amount = catalog.price_for(item.id)
        if unit_amount is None:
            raise UnknownProductError(item.id)
        line_items.append(LineItem(sku=item.id, amount=unit_amount, quantity=item.qty))
    return line_items


def subtotal_cents(line_items: Iterable[LineItem]) -> int:
    """Sum unit amount times quantity over ``line_items``."""

    return sum(line_item.total for line_item in line_items)


def summarize_items(items: Sequence[CartItem]) -> str:
    """Render ``items`` as ``"<id>x<qty>, ..."`` within the metadata length limit."""

    summary = ", ".join(f"{item.id}x{item.qty}" for item in items)
    return summary[:METADATA_VALUE_LIMIT]


def compact_cart(raw_cart: Sequence[Any]) -> list[dict[str, Any]]:
    """Reduce a front-end cart to ``{id, qty, p}`` entries for order confirmation.

    ``p`` is the display unit price the front-end showed; it is informational
    only and never used to compute a charge amount.
    """

    compacted: list[dict[str, Any]] = []
    for entry in raw_cart:
        price = _entry_field(entry, "p") or _entry_field(entry, "price_cents") or 0
        compacted.append(
            {
                "id": str(_entry_field(entry, "id") or ""),
                "qty": coerce_quantity(_entry_field(entry, "qty")),
                "p": max(0, _coerce_int(price, default=0)),
            }
        )
    return compacted


def serialize_cart_snapshot(raw_cart: Sequence[Any]) -> str | None:
    """Return the compact cart as JSON, or ``None`` when it will not fit in metadata."""

    snapshot = json.dumps(compact_cart(raw_cart), separators=(",", ":"))
    if len(snapshot) > METADATA_VALUE_LIMIT:
        _LOGGER.warning(
            "Cart snapshot of %d characters exceeds the metadata limit; omitting it",
            len(snapshot),
        )
        return None
    return snapshot


def parse_cart_snapshot(raw: str | None) -> list[Any]:
    """Parse a stored cart snapshot, degrading to an empty cart on bad data."""

    try:
        parsed = json.loads(raw or "[]")
    except (TypeError, ValueError):
        _LOGGER.info("Ignoring unreadable cart snapshot")
        return []
    return parsed if isinstance(parsed, list) else []


__all__ = [
    "METADATA_VALUE_LIMIT",
    "build_line_items",
    "coerce_quantity",
    "compact_cart",
    "normalize_items",
    "parse_cart_snapshot",
    "serialize_cart_snapshot",
    "subtotal_cents",
    "summarize_items",
]
