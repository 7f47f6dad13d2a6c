"""Utilities for serialising API responses."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Tuple

from flask import jsonify
from pydantic import BaseModel

ResponseTuple = Tuple[Any, int]


def build_json_response(
    model: BaseModel,
    *,
    status: int = HTTPStatus.OK,
) -> ResponseTuple:
    """Return a Flask JSON response for ``model`` using its field aliases."""

    return jsonify(model.model_dump(mode="json", by_alias=True)), int(status)
