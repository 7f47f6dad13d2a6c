"""Gateway to the external payment processor (Stripe).

Tax calculation, charge creation and settlement all live with the processor;
this module only translates between the service's typed records and the
Stripe SDK, and maps SDK failures onto the service's exception hierarchy.
Every call is attempted exactly once with an explicit network timeout.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Protocol, TypeVar

import stripe

from storecheckout.backend.app.errors import (
    ProcessorRequestError,
    ProcessorUnavailableError,
)
from storecheckout.backend.app.models import (
    ChargeDetails,
    LineItem,
    PaymentIntentRecord,
    PricedOrder,
    TaxCalculation,
)

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

UNAVAILABLE_MESSAGE = "Payment processor unavailable"


class PaymentProcessor(Protocol):
    """Operations the checkout service needs from a payment processor."""

    def create_tax_calculation(
        self,
        *,
        currency: str,
        line_items: Sequence[LineItem],
        customer_details: Mapping[str, Any],
    ) -> TaxCalculation: ...

    def retrieve_tax_calculation(self, calculation_id: str) -> TaxCalculation: ...

    def create_payment_intent(
        self,
        order: PricedOrder,
        *,
        currency: str,
        shipping: Mapping[str, Any] | None = None,
    ) -> PaymentIntentRecord: ...

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentRecord: ...


def _field(source: Any, name: str, default: Any = None) -> Any:
    if source is None:
        return default
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def _as_dict(source: Any) -> dict[str, Any]:
    if source is None:
        return {}
    to_dict = getattr(source, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    if isinstance(source, Mapping):
        return dict(source)
    return {}


def _to_tax_calculation(calculation: Any) -> TaxCalculation:
    return TaxCalculation(
        id=str(_field(calculation, "id", "")),
        amount_total=int(_field(calculation, "amount_total", 0) or 0),
        tax_amount_exclusive=int(_field(calculation, "tax_amount_exclusive", 0) or 0),
        tax_amount_inclusive=int(_field(calculation, "tax_amount_inclusive", 0) or 0),
    )


def _to_charge_details(charge: Any) -> ChargeDetails | None:
    # An unexpanded charge is only an id string.
    if charge is None or isinstance(charge, str):
        return None
    billing = _field(charge, "billing_details")
    return ChargeDetails(
        email=_field(billing, "email") or "",
        name=_field(billing, "name") or "",
        receipt_url=_field(charge, "receipt_url") or "",
    )


def _to_payment_intent(intent: Any) -> PaymentIntentRecord:
    raw_metadata = _as_dict(_field(intent, "metadata"))
    metadata = {str(key): str(value) for key, value in raw_metadata.items()}
    return PaymentIntentRecord(
        id=str(_field(intent, "id", "")),
        status=str(_field(intent, "status", "")),
        amount=int(_field(intent, "amount", 0) or 0),
        currency=str(_field(intent, "currency", "")),
        metadata=metadata,
        client_secret=_field(intent, "client_secret"),
        charge=_to_charge_details(_field(intent, "latest_charge")),
    )


class StripeProcessor:
    """:class:`PaymentProcessor` backed by the official ``stripe`` SDK."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 20.0,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                _LOGGER.error("STRIPE_SECRET_KEY is not configured")
                raise ProcessorUnavailableError(UNAVAILABLE_MESSAGE)
            self._client = stripe.StripeClient(
                self._api_key,
                http_client=stripe.RequestsClient(timeout=self._timeout),
                max_network_retries=0,
            )
        return self._client

    def _call(self, operation: str, func: Callable[[], _T]) -> _T:
        try:
            return func()
        except stripe.APIConnectionError as error:
            _LOGGER.error("Stripe %s could not reach the API: %s", operation, error)
            raise ProcessorUnavailableError(UNAVAILABLE_MESSAGE) from error
        except stripe.StripeError as error:
            _LOGGER.error(
                "Stripe %s failed (status=%s, code=%s): %s",
                operation,
                error.http_status,
                error.code,
                error.json_body or error,
            )
            raise ProcessorRequestError(error.user_message or "") from error

    def create_tax_calculation(
        self,
        *,
        currency: str,
        line_items: Sequence[LineItem],
        customer_details: Mapping[str, Any],
    ) -> TaxCalculation:
        params = {
            "currency": currency,
            "line_items": [line_item.to_processor_payload() for line_item in line_items],
            "customer_details": dict(customer_details),
        }
        calculation = self._call(
            "tax calculation",
            lambda: self.client.tax.calculations.create(params=params),
        )
        return _to_tax_calculation(calculation)

    def retrieve_tax_calculation(self, calculation_id: str) -> TaxCalculation:
        calculation = self._call(
            "tax calculation lookup",
            lambda: self.client.tax.calculations.retrieve(calculation_id),
        )
        return _to_tax_calculation(calculation)

    def create_payment_intent(
        self,
        order: PricedOrder,
        *,
        currency: str,
        shipping: Mapping[str, Any] | None = None,
    ) -> PaymentIntentRecord:
        # No idempotency key is sent; a client retry can create a second intent.
        params: dict[str, Any] = {
            "amount": order.amount,
            "currency": currency,
            "description": order.description,
            "metadata": dict(order.metadata),
            "automatic_payment_methods": {"enabled": True},
        }
        if shipping is not None:
            params["shipping"] = dict(shipping)
        intent = self._call(
            "payment intent creation",
            lambda: self.client.payment_intents.create(params=params),
        )
        return _to_payment_intent(intent)

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentRecord:
        intent = self._call(
            "payment intent lookup",
            lambda: self.client.payment_intents.retrieve(
                intent_id, params={"expand": ["latest_charge"]}
            ),
        )
        return _to_payment_intent(intent)


__all__ = [
    "PaymentProcessor",
    "StripeProcessor",
    "UNAVAILABLE_MESSAGE",
]
