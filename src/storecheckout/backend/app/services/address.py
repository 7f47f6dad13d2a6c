"""Shipping address completeness checks and normalisation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from storecheckout.backend.app.models import ADDRESS_FIELDS, ShippingAddress

_LOGGER = logging.getLogger(__name__)

DEFAULT_COUNTRY = "US"


def _address_mapping(shipping: Any) -> Mapping[str, Any] | None:
    if not isinstance(shipping, Mapping):
        return None
    address = shipping.get("address")
    return address if isinstance(address, Mapping) else None


def has_address(shipping: Any) -> bool:
    """Return ``True`` when ``shipping`` carries an ``address`` object."""

    return _address_mapping(shipping) is not None


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def missing_address_fields(shipping: Any) -> list[str]:
    """List every required address field that is absent or blank, as ``address.<field>``."""

    address = _address_mapping(shipping) or {}
    return [f"address.{name}" for name in ADDRESS_FIELDS if _is_blank(address.get(name))]


def is_address_complete(shipping: Any) -> bool:
    """Return ``True`` only when all five address fields are non-blank strings."""

    return has_address(shipping) and not missing_address_fields(shipping)


def _text(value: Any) -> str:
    return str(value or "").strip()


def normalize_address(shipping: Any) -> ShippingAddress:
    """Trim the address fields, upper-case state and country, default the country."""

    address = _address_mapping(shipping) or {}
    return ShippingAddress(
        line1=_text(address.get("line1")),
        city=_text(address.get("city")),
        state=_text(address.get("state")).upper(),
        postal_code=_text(address.get("postal_code")),
        country=(_text(address.get("country")) or DEFAULT_COUNTRY).upper(),
    )


def build_customer_details(shipping: Any) -> dict[str, Any]:
    """Shape ``shipping`` into the customer record the tax calculation expects."""

    return {
        "address": normalize_address(shipping).as_dict(),
        "address_source": "shipping",
    }


def build_charge_shipping(
    shipping: Any,
    *,
    fallback_name: str | None = None,
) -> dict[str, Any] | None:
    """Return the shipping block for a charge.

    The processor requires a recipient name alongside the address, so ``None`` is
    returned when the address is incomplete or no name is available from either
    ``shipping.name`` or ``fallback_name``.
    """

    if not is_address_complete(shipping):
        return None

    name = _text(shipping.get("name")) or _text(fallback_name)
    if not name:
        _LOGGER.info("Shipping address has no recipient name; not attaching it")
        return None

    block: dict[str, Any] = {"address": normalize_address(shipping).as_dict(), "name": name}
    phone = _text(shipping.get("phone"))
    if phone:
        block["phone"] = phone
    return block


__all__ = [
    "DEFAULT_COUNTRY",
    "build_charge_shipping",
    "build_customer_details",
    "has_address",
    "is_address_complete",
    "missing_address_fields",
    "normalize_address",
]
