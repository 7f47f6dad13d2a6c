"""Helpers for extracting JSON bodies from incoming requests."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

logger = logging.getLogger(__name__)


def parse_json_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req``.

    An empty body is treated as an empty object so the checkout services can
    report which fields are missing; malformed JSON or a non-object document
    is rejected outright.
    """

    if not req.get_data(cache=True):
        return {}

    data = req.get_json(silent=True, force=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    logger.debug("%s %s payload: %s", req.method, req.path, data)
    return dict(data)
