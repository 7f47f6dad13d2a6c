"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, cast

from flask import current_app, jsonify

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from storecheckout.backend.app.services.checkout_service import CheckoutService

CHECKOUT_EXTENSION = "storecheckout.checkout"


@dataclass(frozen=True)
class ProblemResponse:
    """Error payload carrying a human-readable ``error`` message."""

    error: str
    status: int
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {}
        if self.extra:
            payload.update(self.extra)
        payload["error"] = self.error
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(error: str, *, status: int, **extra: Any) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, extra=additional)


def current_checkout_service() -> CheckoutService:
    """Return the checkout service bound to the active application."""

    return cast("CheckoutService", current_app.extensions[CHECKOUT_EXTENSION])


__all__ = [
    "CHECKOUT_EXTENSION",
    "ProblemResponse",
    "current_checkout_service",
    "problem_response",
]
