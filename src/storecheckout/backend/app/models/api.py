"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
    model_validator,
)

__all__ = [
    "CreatePaymentIntentRequest",
    "OrderLookupResponse",
    "OrderRecord",
    "PaymentIntentResponse",
    "TaxPreviewRequest",
    "TaxPreviewResponse",
]


class TaxPreviewRequest(BaseModel):
    """Body of ``POST /tax-preview``.

    Cart and shipping stay untyped here: the normaliser and address validator
    own the lenient coercion rules and the field-by-field error messages.
    """

    model_config = ConfigDict(extra="ignore")

    items: Any = None
    shipping: Any = None


class CreatePaymentIntentRequest(BaseModel):
    """Body of ``POST /create-payment-intent``."""

    model_config = ConfigDict(extra="ignore")

    items: Any = None
    shipping: Any = None
    calc_id: str | None = None
    email: str | None = None
    name: str | None = None
    cart: Any = None

    @field_validator("calc_id", "email", "name", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        if not value:
            return None
        return value if isinstance(value, str) else str(value)


class TaxPreviewResponse(BaseModel):
    """Totals shown to the shopper before payment, all in minor units."""

    model_config = ConfigDict(frozen=True)

    id: str
    subtotal: StrictInt = Field(ge=0)
    tax: StrictInt = Field(ge=0)
    total: StrictInt = Field(ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> TaxPreviewResponse:
        if self.total != self.subtotal + self.tax:
            raise ValueError("total must equal subtotal plus tax")
        return self


class PaymentIntentResponse(BaseModel):
    """Only the client-side confirmation token leaves the service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")


class OrderRecord(BaseModel):
    """Display-friendly order summary rebuilt from a payment intent."""

    model_config = ConfigDict(frozen=True)

    id: str
    status: str
    amount: int
    currency: str
    email: str = ""
    name: str = ""
    cart: list[Any] = Field(default_factory=list)
    receipt_url: str = ""


class OrderLookupResponse(BaseModel):
    """Envelope returned by ``GET /pi/<id>``."""

    model_config = ConfigDict(frozen=True)

    ok: bool = True
    order: OrderRecord
