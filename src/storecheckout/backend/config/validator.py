"""Utilities for validating the product catalog and surfacing issues."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from .catalog import CATALOG_FILE, load_catalog_configuration
from .schema import CatalogConfiguration, CatalogEntry, ConfigurationError

# Stripe rejects charge amounts above eight digits in minor units.
MAX_UNIT_PRICE_CENTS = 99_999_999
# Metadata values and line item references are capped by the processor.
MAX_SKU_LENGTH = 500


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_entry(position: int, entry: CatalogEntry) -> list[str]:
    errors: list[str] = []
    scope = f"products[{position}] ({entry.sku!r})"

    if entry.sku != entry.sku.strip():
        errors.append(
            _format_scope(
                scope,
                "SKU has surrounding whitespace and can never match a trimmed cart id",
            )
        )

    if len(entry.sku) > MAX_SKU_LENGTH:
        errors.append(
            _format_scope(scope, f"SKU is longer than {MAX_SKU_LENGTH} characters")
        )

    if entry.price_cents == 0:
        errors.append(_format_scope(scope, "price is zero; confirm the item is free"))

    if entry.price_cents > MAX_UNIT_PRICE_CENTS:
        errors.append(
            _format_scope(
                scope,
                f"price {entry.price_cents} exceeds the processor limit of {MAX_UNIT_PRICE_CENTS}",
            )
        )

    return errors


def validate_catalog(configuration: CatalogConfiguration) -> list[str]:
    """Return human-readable issues detected in ``configuration``."""

    if not configuration.products:
        return [_format_scope("products", "catalog does not list any products")]

    errors: list[str] = []
    for position, entry in enumerate(configuration.products):
        errors.extend(_validate_entry(position, entry))
    return errors


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the product catalog and report issues helpful to contributors."
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=CATALOG_FILE,
        help="Catalog file to validate (defaults to the packaged catalog)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    try:
        configuration = load_catalog_configuration(args.path)
    except (FileNotFoundError, ConfigurationError) as error:
        print(f"[{args.path.name}] failed to load catalog: {error}")
        return 1

    issues = validate_catalog(configuration)
    if issues:
        print(f"[{args.path.name}] {len(issues)} issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    print(f"[{args.path.name}] OK ({len(configuration.products)} products)")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
