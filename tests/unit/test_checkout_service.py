"""Unit tests for the checkout service's pricing paths."""

from __future__ import annotations

from typing import Any

import pytest

from storecheckout.backend.app.errors import (
    CheckoutError,
    IncompleteAddressError,
    InvalidRequestError,
    UnknownProductError,
)
from storecheckout.backend.app.models import ChargeDetails, CreatePaymentIntentRequest
from storecheckout.backend.app.services.checkout_service import CheckoutService
from storecheckout.backend.config.catalog import Catalog


@pytest.fixture()
def service(catalog: Catalog, processor: Any) -> CheckoutService:
    return CheckoutService(catalog=catalog, processor=processor, store_name="Test Store")


def test_preview_returns_subtotal_tax_and_total(
    service: CheckoutService, processor: Any, complete_shipping: dict[str, Any]
) -> None:
    preview = service.preview_tax(
        {"items": [{"id": "a", "qty": 2}], "shipping": complete_shipping}
    )

    assert preview.subtotal == 2000
    assert preview.tax == 200
    assert preview.total == preview.subtotal + preview.tax
    assert processor.call_names() == ["create_tax_calculation"]
    details = processor.calls[0][1]
    assert details["currency"] == "usd"
    assert details["customer_details"]["address"]["state"] == "WA"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "Missing or empty items array"),
        ({"items": []}, "Missing or empty items array"),
        ({"items": {"id": "a"}}, "Missing or empty items array"),
        ({"items": [{"id": "a"}]}, "Missing shipping.address"),
        ({"items": [{"id": "a"}], "shipping": {}}, "Missing shipping.address"),
        (
            {"items": [None], "shipping": {"address": {"line1": "1 Pike Pl"}}},
            "Incomplete address",
        ),
    ],
)
def test_preview_rejects_incomplete_requests(
    service: CheckoutService, processor: Any, payload: dict[str, Any], message: str
) -> None:
    with pytest.raises(CheckoutError, match=message):
        service.preview_tax(payload)

    assert processor.calls == []


def test_preview_rejects_cart_of_empty_entries(
    service: CheckoutService, complete_shipping: dict[str, Any]
) -> None:
    with pytest.raises(InvalidRequestError, match="Missing or empty items array"):
        service.preview_tax({"items": [None, {}], "shipping": complete_shipping})


def test_preview_lists_missing_address_fields(service: CheckoutService) -> None:
    with pytest.raises(IncompleteAddressError) as excinfo:
        service.preview_tax(
            {"items": [{"id": "a"}], "shipping": {"address": {"line1": "1 Pike Pl"}}}
        )

    assert excinfo.value.missing == [
        "address.city",
        "address.state",
        "address.postal_code",
        "address.country",
    ]


def test_preview_fails_fast_on_unknown_sku(
    service: CheckoutService, processor: Any, complete_shipping: dict[str, Any]
) -> None:
    with pytest.raises(UnknownProductError):
        service.preview_tax(
            {"items": [{"id": "a"}, {"id": "nope"}], "shipping": complete_shipping}
        )

    assert processor.calls == []


def test_price_order_from_items_skips_tax_service(
    service: CheckoutService, processor: Any
) -> None:
    order = service.price_order(
        CreatePaymentIntentRequest(items=[{"id": "a", "qty": 3}])
    )

    assert order.amount == 3000
    assert order.description == "Test Store Order"
    assert order.metadata == {"items": "ax3"}
    assert processor.calls == []


def test_price_order_from_calculation_uses_previewed_total(
    service: CheckoutService, complete_shipping: dict[str, Any]
) -> None:
    preview = service.preview_tax(
        {"items": [{"id": "a", "qty": 1}, {"id": "b", "qty": 2}], "shipping": complete_shipping}
    )

    order = service.price_order(
        CreatePaymentIntentRequest(calc_id=preview.id, items=[{"id": "b", "qty": 99}])
    )

    assert order.amount == preview.total
    assert order.description == "Test Store Order (via tax calc)"
    assert order.metadata == {"calc_id": preview.id}


def test_price_order_stashes_customer_and_cart(service: CheckoutService) -> None:
    order = service.price_order(
        CreatePaymentIntentRequest(
            items=[{"id": "b"}],
            email="ada@example.com",
            name="Ada",
            cart=[{"id": "b", "qty": 1, "p": 250, "title": "Sample"}],
        )
    )

    assert order.metadata["email"] == "ada@example.com"
    assert order.metadata["name"] == "Ada"
    assert order.metadata["cart"] == '[{"id":"b","qty":1,"p":250}]'


def test_price_order_omits_customer_fields_over_metadata_limit(
    service: CheckoutService,
) -> None:
    order = service.price_order(
        CreatePaymentIntentRequest(items=[{"id": "b"}], email="a" * 501, name="Ada")
    )

    assert "email" not in order.metadata
    assert order.metadata["name"] == "Ada"


@pytest.mark.parametrize("items", [None, [], "a", [None, 0]])
def test_price_order_requires_items_without_calculation(
    service: CheckoutService, items: Any
) -> None:
    with pytest.raises(InvalidRequestError, match="No items"):
        service.price_order(CreatePaymentIntentRequest(items=items))


def test_lookup_prefers_metadata_over_billing_details(
    service: CheckoutService, processor: Any
) -> None:
    processor.add_intent(
        "pi_7",
        metadata={"email": "meta@example.com", "cart": '[{"id":"a","qty":2,"p":1000}]'},
        charge=ChargeDetails(
            email="billing@example.com", name="Billing Name", receipt_url="https://r.test/1"
        ),
    )

    order = service.lookup_order("pi_7")

    assert order.email == "meta@example.com"
    assert order.name == "Billing Name"
    assert order.cart == [{"id": "a", "qty": 2, "p": 1000}]
    assert order.receipt_url == "https://r.test/1"


def test_lookup_without_charge_or_metadata(service: CheckoutService, processor: Any) -> None:
    processor.add_intent("pi_8", metadata={"cart": "not json"}, status="processing")

    order = service.lookup_order("pi_8")

    assert order.status == "processing"
    assert (order.email, order.name, order.receipt_url) == ("", "", "")
    assert order.cart == []
