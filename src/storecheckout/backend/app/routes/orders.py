"""Order confirmation lookups backed by the processor's payment intents."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint

from storecheckout.backend.app.errors import (
    ProcessorRequestError,
    ProcessorUnavailableError,
)
from storecheckout.backend.app.http import current_checkout_service, problem_response
from storecheckout.backend.app.models import OrderLookupResponse
from storecheckout.backend.services import build_json_response

blueprint = Blueprint("orders", __name__)

logger = logging.getLogger(__name__)

RETRIEVE_FAILED_MESSAGE = "Cannot retrieve payment"


@blueprint.get("/pi/<intent_id>")
def get_payment_intent(intent_id: str) -> tuple[Any, int]:
    """Return a display-friendly order record for ``intent_id``."""

    try:
        order = current_checkout_service().lookup_order(intent_id)
    except ProcessorRequestError:
        logger.warning("Order lookup failed for payment intent %s", intent_id)
        return problem_response(
            RETRIEVE_FAILED_MESSAGE, status=HTTPStatus.BAD_REQUEST, ok=False
        ).to_response()
    except ProcessorUnavailableError as error:
        return problem_response(
            error.message, status=HTTPStatus.SERVICE_UNAVAILABLE, ok=False
        ).to_response()

    return build_json_response(OrderLookupResponse(order=order))
