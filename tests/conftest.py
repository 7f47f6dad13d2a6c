"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from collections.abc import Mapping, Sequence  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from storecheckout.backend.app import create_app  # noqa: E402
from storecheckout.backend.app.errors import ProcessorRequestError  # noqa: E402
from storecheckout.backend.app.models import (  # noqa: E402
    ChargeDetails,
    LineItem,
    PaymentIntentRecord,
    PricedOrder,
    TaxCalculation,
)
from storecheckout.backend.config.catalog import Catalog  # noqa: E402
from storecheckout.backend.config.settings import Settings  # noqa: E402

ALLOWED_ORIGIN = "https://shop.test"

TEST_PRICES = {"a": 1000, "b": 250, "free-sample": 0}


class FakeProcessor:
    """In-memory stand-in for the Stripe gateway.

    Tax is a flat ``tax_rate_bps`` basis points of each line total, rounded
    down, so expectations stay integer.
    """

    def __init__(self, *, tax_rate_bps: int = 1000) -> None:
        self.tax_rate_bps = tax_rate_bps
        self.calculations: dict[str, TaxCalculation] = {}
        self.intents: dict[str, PaymentIntentRecord] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failure: Exception | None = None

    def _record(self, name: str, **details: Any) -> None:
        self.calls.append((name, details))
        if self.failure is not None:
            raise self.failure

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_tax_calculation(
        self,
        *,
        currency: str,
        line_items: Sequence[LineItem],
        customer_details: Mapping[str, Any],
    ) -> TaxCalculation:
        self._record(
            "create_tax_calculation",
            currency=currency,
            line_items=list(line_items),
            customer_details=dict(customer_details),
        )
        subtotal = sum(item.total for item in line_items)
        tax = sum(item.total * self.tax_rate_bps // 10_000 for item in line_items)
        calculation = TaxCalculation(
            id=f"taxcalc_{len(self.calculations) + 1}",
            amount_total=subtotal + tax,
            tax_amount_exclusive=tax,
        )
        self.calculations[calculation.id] = calculation
        return calculation

    def retrieve_tax_calculation(self, calculation_id: str) -> TaxCalculation:
        self._record("retrieve_tax_calculation", calculation_id=calculation_id)
        try:
            return self.calculations[calculation_id]
        except KeyError:
            raise ProcessorRequestError(f"No such tax calculation: '{calculation_id}'") from None

    def create_payment_intent(
        self,
        order: PricedOrder,
        *,
        currency: str,
        shipping: Mapping[str, Any] | None = None,
    ) -> PaymentIntentRecord:
        self._record(
            "create_payment_intent", order=order, currency=currency, shipping=shipping
        )
        intent_id = f"pi_{len(self.intents) + 1}"
        intent = PaymentIntentRecord(
            id=intent_id,
            status="requires_payment_method",
            amount=order.amount,
            currency=currency,
            metadata=dict(order.metadata),
            client_secret=f"{intent_id}_secret_test",
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntentRecord:
        self._record("retrieve_payment_intent", intent_id=intent_id)
        try:
            return self.intents[intent_id]
        except KeyError:
            raise ProcessorRequestError(f"No such payment_intent: '{intent_id}'") from None

    def add_intent(
        self,
        intent_id: str,
        *,
        metadata: Mapping[str, str] | None = None,
        charge: ChargeDetails | None = None,
        amount: int = 2000,
        status: str = "succeeded",
    ) -> PaymentIntentRecord:
        intent = PaymentIntentRecord(
            id=intent_id,
            status=status,
            amount=amount,
            currency="usd",
            metadata=dict(metadata or {}),
            charge=charge,
        )
        self.intents[intent_id] = intent
        return intent


@pytest.fixture()
def settings() -> Settings:
    """Settings with a known allow-list and no processor credential."""

    return Settings(allowed_origins=frozenset({ALLOWED_ORIGIN}), store_name="Test Store")


@pytest.fixture()
def catalog() -> Catalog:
    """A small catalog with round prices."""

    return Catalog.from_prices(TEST_PRICES)


@pytest.fixture()
def processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture()
def app(settings: Settings, processor: FakeProcessor, catalog: Catalog) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(settings, processor=processor, catalog=catalog)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def complete_shipping() -> dict[str, Any]:
    return {
        "name": "Ada Lovelace",
        "address": {
            "line1": "1 Pike Pl",
            "city": "Seattle",
            "state": "wa",
            "postal_code": "98101",
            "country": "us",
        },
    }
