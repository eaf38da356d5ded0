"""Structured SKU helpers.

Format: ``PPP-CCCC-XXX-VNN`` (e.g. ``TPC-PUMP-A01-V01``): 3-letter prefix,
4-letter category, 3-character product code and a two-digit version.
Products may also carry free-form SKUs; version forks only rewrite the
version segment when the SKU follows this format.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from catalog.domain.exceptions import ValidationError

_SKU_PATTERN = re.compile(r"^([A-Z]{3})-([A-Z]{4})-([A-Z0-9]{3})-V(\d{2})$")


@dataclass(frozen=True)
class SkuParts:
    prefix: str
    category: str
    product_code: str
    version: int

    def __str__(self) -> str:
        return generate_sku(self.category, self.product_code, self.version, self.prefix)


def generate_sku(
    category: str,
    product_code: str,
    version: int = 1,
    prefix: str = "TPC",
) -> str:
    if len(prefix) != 3:
        raise ValidationError(f"SKU prefix must be 3 characters, got: {prefix!r}")
    if len(category) != 4:
        raise ValidationError(f"SKU category must be 4 characters, got: {category!r}")
    if len(product_code) != 3:
        raise ValidationError(
            f"SKU product code must be 3 characters, got: {product_code!r}"
        )
    if not 1 <= version <= 99:
        raise ValidationError(f"SKU version must be between 1 and 99, got: {version}")
    return f"{prefix}-{category}-{product_code}-V{version:02d}"


def parse_sku(sku: str) -> SkuParts:
    match = _SKU_PATTERN.match(sku)
    if match is None:
        raise ValidationError(
            f"Invalid SKU format: {sku!r}. Expected format: XXX-XXXX-XXX-VXX"
        )
    prefix, category, product_code, version = match.groups()
    return SkuParts(prefix, category, product_code, int(version))


def is_valid_sku(sku: str) -> bool:
    return _SKU_PATTERN.match(sku) is not None


def increment_version(sku: str) -> str:
    parts = parse_sku(sku)
    return generate_sku(parts.category, parts.product_code, parts.version + 1, parts.prefix)


def base_sku(sku: str) -> str:
    """Return the SKU without its version segment."""
    parts = parse_sku(sku)
    return f"{parts.prefix}-{parts.category}-{parts.product_code}"


def is_same_product(sku_a: str, sku_b: str) -> bool:
    if not (is_valid_sku(sku_a) and is_valid_sku(sku_b)):
        return False
    return base_sku(sku_a) == base_sku(sku_b)
