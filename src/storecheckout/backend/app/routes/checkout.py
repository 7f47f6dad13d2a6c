"""Endpoints that price a cart and open a payment with the processor."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, request

from storecheckout.backend.app.errors import (
    IncompleteAddressError,
    ProcessorRequestError,
)
from storecheckout.backend.app.http import current_checkout_service, problem_response
from storecheckout.backend.services import build_json_response, parse_json_payload

blueprint = Blueprint("checkout", __name__)


@blueprint.post("/tax-preview")
def tax_preview() -> tuple[Any, int]:
    """Return subtotal, tax and total for a cart shipped to a complete address."""

    payload = parse_json_payload(request)
    try:
        preview = current_checkout_service().preview_tax(payload)
    except IncompleteAddressError as error:
        return problem_response(
            error.message, status=HTTPStatus.BAD_REQUEST, missing=error.missing
        ).to_response()
    except ProcessorRequestError as error:
        return problem_response(
            error.message or "Tax preview failed", status=HTTPStatus.BAD_REQUEST
        ).to_response()

    return build_json_response(preview)


@blueprint.post("/create-payment-intent")
def create_payment_intent() -> tuple[Any, int]:
    """Create a payment intent and hand back only its client secret."""

    payload = parse_json_payload(request)
    try:
        intent = current_checkout_service().create_payment_intent(payload)
    except ProcessorRequestError as error:
        return problem_response(
            error.message or "Server error", status=HTTPStatus.INTERNAL_SERVER_ERROR
        ).to_response()

    return build_json_response(intent)
