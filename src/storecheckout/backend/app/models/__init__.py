"""Typed values shared by the checkout services, routes, and processor gateway.

Request and response payloads are Pydantic models (see :mod:`.api`); the values
derived while pricing a cart and the records read back from the payment
processor are small frozen dataclasses. Every monetary field is an integer
count of minor currency units.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .api import (
    CreatePaymentIntentRequest,
    OrderLookupResponse,
    OrderRecord,
    PaymentIntentResponse,
    TaxPreviewRequest,
    TaxPreviewResponse,
)

__all__ = [
    "ADDRESS_FIELDS",
    "CartItem",
    "ChargeDetails",
    "CreatePaymentIntentRequest",
    "LineItem",
    "OrderLookupResponse",
    "OrderRecord",
    "PaymentIntentRecord",
    "PaymentIntentResponse",
    "PricedOrder",
    "ShippingAddress",
    "TaxCalculation",
    "TaxPreviewRequest",
    "TaxPreviewResponse",
]

ADDRESS_FIELDS = ("line1", "city", "state", "postal_code", "country")


@dataclass(frozen=True)
class CartItem:
    """One normalised cart entry: a trimmed SKU and a quantity of at least 1."""

    id: str
    qty: int


@dataclass(frozen=True)
class LineItem:
    """A priced cart entry ready for the processor's tax calculation."""

    sku: str
    amount: int
    quantity: int
    tax_behavior: str = "exclusive"

    @property
    def total(self) -> int:
        return self.amount * self.quantity

    def to_processor_payload(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "reference": self.sku,
            "tax_behavior": self.tax_behavior,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class ShippingAddress:
    """Trimmed postal address; state and country are upper-cased."""

    line1: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    def as_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in ADDRESS_FIELDS}


@dataclass(frozen=True)
class PricedOrder:
    """The amount and annotations for a single charge-creation call."""

    amount: int
    description: str
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TaxCalculation:
    """Processor-computed tax calculation, referenced by its opaque ``id``."""

    id: str
    amount_total: int
    tax_amount_exclusive: int = 0
    tax_amount_inclusive: int = 0

    @property
    def tax(self) -> int:
        return self.tax_amount_exclusive + self.tax_amount_inclusive


@dataclass(frozen=True)
class ChargeDetails:
    """The subset of a processor charge used for order confirmation pages."""

    email: str = ""
    name: str = ""
    receipt_url: str = ""


@dataclass(frozen=True)
class PaymentIntentRecord:
    """A payment intent as read back from the processor."""

    id: str
    status: str
    amount: int
    currency: str
    metadata: Mapping[str, str] = field(default_factory=dict)
    client_secret: str | None = None
    charge: ChargeDetails | None = None
