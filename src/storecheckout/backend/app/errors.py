"""Exception types raised by the checkout services."""

from __future__ import annotations

from collections.abc import Sequence


class CheckoutError(ValueError):
    """Client-correctable request problem; surfaced as HTTP 400."""

    @property
    def message(self) -> str:
        return str(self)


class InvalidRequestError(CheckoutError):
    """Required request fields are missing or unusable."""


class UnknownProductError(CheckoutError):
    """A cart entry references a SKU that is not in the catalog."""

    def __init__(self, sku: str) -> None:
        super().__init__(f"Unknown product id: {sku}")
        self.sku = sku


class IncompleteAddressError(CheckoutError):
    """The shipping address is missing fields needed for tax calculation."""

    def __init__(self, missing: Sequence[str]) -> None:
        super().__init__(f"Incomplete address: {', '.join(missing)}")
        self.missing = list(missing)


class PaymentProcessorError(Exception):
    """Base class for failures talking to the payment processor."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ProcessorRequestError(PaymentProcessorError):
    """The processor answered but rejected the request."""


class ProcessorUnavailableError(PaymentProcessorError):
    """The processor could not be reached or did not answer in time."""


__all__ = [
    "CheckoutError",
    "IncompleteAddressError",
    "InvalidRequestError",
    "PaymentProcessorError",
    "ProcessorRequestError",
    "ProcessorUnavailableError",
    "UnknownProductError",
]
