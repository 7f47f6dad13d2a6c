"""Pydantic models describing the product catalog file."""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator


class ConfigurationError(ValueError):
    """Raised when catalog values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class CatalogEntry(ImmutableModel):
    """A sellable SKU and its unit price in minor currency units."""

    sku: str = Field(min_length=1)
    price_cents: StrictInt = Field(ge=0)
    name: str | None = None


class CatalogConfiguration(ImmutableModel):
    """Top-level catalog document: one currency and the products priced in it."""

    currency: str = Field(default="usd", pattern=r"^[a-z]{3}$")
    products: tuple[CatalogEntry, ...] = ()

    @model_validator(mode="after")
    def _reject_duplicate_skus(self) -> CatalogConfiguration:
        counts = Counter(entry.sku for entry in self.products)
        duplicates = sorted(sku for sku, count in counts.items() if count > 1)
        if duplicates:
            raise ConfigurationError(f"Duplicate catalog SKUs: {', '.join(duplicates)}")
        return self


__all__ = [
    "CatalogConfiguration",
    "CatalogEntry",
    "ConfigurationError",
    "ImmutableModel",
]
