"""Read-only product catalog loaded from the packaged YAML price list."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import CatalogConfiguration, CatalogEntry, ConfigurationError

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
CATALOG_FILE = CONFIG_DIRECTORY / "catalog.yaml"


@dataclass(frozen=True)
class Catalog:
    """Immutable SKU to unit-price lookup in a single currency."""

    currency: str
    prices: Mapping[str, int]

    @classmethod
    def from_configuration(cls, configuration: CatalogConfiguration) -> Catalog:
        prices = {entry.sku: entry.price_cents for entry in configuration.products}
        return cls(currency=configuration.currency, prices=MappingProxyType(prices))

    @classmethod
    def from_prices(cls, prices: Mapping[str, int], *, currency: str = "usd") -> Catalog:
        """Build a catalog from a plain mapping, validating it like the YAML file."""

        entries = [{"sku": sku, "price_cents": price} for sku, price in prices.items()]
        return cls.from_configuration(
            _validate({"currency": currency, "products": entries}, source="mapping")
        )

    def price_for(self, sku: str) -> int | None:
        """Return the unit price for ``sku`` (exact match) or ``None``."""

        return self.prices.get(sku)

    def __contains__(self, sku: object) -> bool:
        return sku in self.prices

    def __iter__(self) -> Iterator[str]:
        return iter(self.prices)

    def __len__(self) -> int:
        return len(self.prices)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Catalog file must define a mapping at the top level")
    return data


def _validate(raw: Mapping[str, Any], *, source: str) -> CatalogConfiguration:
    try:
        return CatalogConfiguration.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Catalog validation failed for {source}: {error}") from error


def load_catalog_configuration(path: Path | None = None) -> CatalogConfiguration:
    """Parse and validate the catalog document at ``path``."""

    target = path or CATALOG_FILE
    if not target.exists():
        raise FileNotFoundError(f"Catalog file not found: {target}")
    return _validate(_load_yaml(target), source=target.name)


@lru_cache(maxsize=1)
def load_catalog() -> Catalog:
    """Load and cache the packaged catalog."""

    return Catalog.from_configuration(load_catalog_configuration())


__all__ = [
    "CATALOG_FILE",
    "CONFIG_DIRECTORY",
    "Catalog",
    "CatalogConfiguration",
    "CatalogEntry",
    "ConfigurationError",
    "load_catalog",
    "load_catalog_configuration",
]
