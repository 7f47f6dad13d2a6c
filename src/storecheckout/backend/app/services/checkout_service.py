"""Compose cart pricing, address checks and processor calls for each endpoint.

Both charge paths (redeeming a tax calculation, or re-pricing the raw cart from
the catalog) produce a :class:`PricedOrder`, and a single processor call turns
that into a payment intent. Amounts never come from the client.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from storecheckout.backend.app.errors import (
    IncompleteAddressError,
    InvalidRequestError,
    ProcessorRequestError,
)
from storecheckout.backend.app.models import (
    CreatePaymentIntentRequest,
    OrderRecord,
    PaymentIntentResponse,
    PricedOrder,
    TaxPreviewRequest,
    TaxPreviewResponse,
)
from storecheckout.backend.config.catalog import Catalog

from .address import (
    build_charge_shipping,
    build_customer_details,
    has_address,
    missing_address_fields,
)
from .cart import (
    METADATA_VALUE_LIMIT,
    build_line_items,
    normalize_items,
    parse_cart_snapshot,
    serialize_cart_snapshot,
    subtotal_cents,
    summarize_items,
)
from .processor import PaymentProcessor

_LOGGER = logging.getLogger(__name__)

MISSING_ITEMS_MESSAGE = "Missing or empty items array"
MISSING_ADDRESS_MESSAGE = "Missing shipping.address"
NO_ITEMS_MESSAGE = "No items"


class CheckoutService:
    """Request-scoped operations over an immutable catalog and a processor."""

    def __init__(
        self,
        *,
        catalog: Catalog,
        processor: PaymentProcessor,
        store_name: str,
    ) -> None:
        self.catalog = catalog
        self.processor = processor
        self.store_name = store_name

    @property
    def currency(self) -> str:
        return self.catalog.currency

    def preview_tax(self, payload: Mapping[str, Any]) -> TaxPreviewResponse:
        """Validate a cart and address, then ask the processor to calculate tax."""

        request = TaxPreviewRequest.model_validate(payload)

        if not isinstance(request.items, list) or not request.items:
            raise InvalidRequestError(MISSING_ITEMS_MESSAGE)
        if not has_address(request.shipping):
            raise InvalidRequestError(MISSING_ADDRESS_MESSAGE)

        missing = missing_address_fields(request.shipping)
        if missing:
            raise IncompleteAddressError(missing)

        items = normalize_items(request.items)
        if not items:
            raise InvalidRequestError(MISSING_ITEMS_MESSAGE)

        line_items = build_line_items(items, self.catalog)
        subtotal = subtotal_cents(line_items)

        calculation = self.processor.create_tax_calculation(
            currency=self.currency,
            line_items=line_items,
            customer_details=build_customer_details(request.shipping),
        )
        tax = calculation.tax
        _LOGGER.info(
            "Tax calculation %s: %d line item(s), subtotal=%d tax=%d",
            calculation.id,
            len(line_items),
            subtotal,
            tax,
        )
        return TaxPreviewResponse(
            id=calculation.id,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
        )

    def _price_from_calculation(self, calc_id: str) -> PricedOrder:
        calculation = self.processor.retrieve_tax_calculation(calc_id)
        return PricedOrder(
            amount=calculation.amount_total,
            description=f"{self.store_name} Order (via tax calc)",
            metadata={"calc_id": calc_id},
        )

    def _price_from_items(self, raw_items: Any) -> PricedOrder:
        if not isinstance(raw_items, list) or not raw_items:
            raise InvalidRequestError(NO_ITEMS_MESSAGE)

        items = normalize_items(raw_items)
        if not items:
            raise InvalidRequestError(NO_ITEMS_MESSAGE)

        line_items = build_line_items(items, self.catalog)
        return PricedOrder(
            amount=subtotal_cents(line_items),
            description=f"{self.store_name} Order",
            metadata={"items": summarize_items(items)},
        )

    def price_order(self, request: CreatePaymentIntentRequest) -> PricedOrder:
        """Determine the charge amount and annotations for ``request``."""

        if request.calc_id:
            order = self._price_from_calculation(request.calc_id)
        else:
            order = self._price_from_items(request.items)

        metadata = dict(order.metadata)
        for key, value in (("email", request.email), ("name", request.name)):
            if not value:
                continue
            if len(value) > METADATA_VALUE_LIMIT:
                _LOGGER.warning(
                    "Customer %s of %d characters exceeds the metadata limit; omitting it",
                    key,
                    len(value),
                )
                continue
            metadata[key] = value
        if isinstance(request.cart, list):
            snapshot = serialize_cart_snapshot(request.cart)
            if snapshot is not None:
                metadata["cart"] = snapshot

        return PricedOrder(
            amount=order.amount,
            description=order.description,
            metadata=metadata,
        )

    def create_payment_intent(self, payload: Mapping[str, Any]) -> PaymentIntentResponse:
        """Create a client-confirmable payment intent and return its client secret."""

        request = CreatePaymentIntentRequest.model_validate(payload)
        order = self.price_order(request)
        shipping = build_charge_shipping(request.shipping, fallback_name=request.name)

        intent = self.processor.create_payment_intent(
            order,
            currency=self.currency,
            shipping=shipping,
        )
        _LOGGER.info(
            "Created payment intent %s for %d %s (shipping attached: %s)",
            intent.id,
            order.amount,
            self.currency,
            shipping is not None,
        )
        if not intent.client_secret:
            raise ProcessorRequestError("Payment intent has no client secret")
        return PaymentIntentResponse(client_secret=intent.client_secret)

    def lookup_order(self, intent_id: str) -> OrderRecord:
        """Rebuild an order confirmation record from a stored payment intent."""

        intent = self.processor.retrieve_payment_intent(intent_id)
        charge = intent.charge
        metadata = intent.metadata

        return OrderRecord(
            id=intent.id,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
            email=metadata.get("email") or (charge.email if charge else "") or "",
            name=metadata.get("name") or (charge.name if charge else "") or "",
            cart=parse_cart_snapshot(metadata.get("cart")),
            receipt_url=charge.receipt_url if charge else "",
        )


__all__ = ["CheckoutService"]
