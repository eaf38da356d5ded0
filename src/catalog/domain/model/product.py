"""Product aggregate.

A product row is freely editable until the first order references it.
After that the row is frozen as history: edits produce a new row (a
*version fork*) and only lifecycle status changes touch the old one.

Lifecycle::

    ACTIVE ──> SUNSET ──> DISCONTINUED
       └──────────────────────^
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from catalog.domain.exceptions import StateError, ValidationError
from catalog.domain.model.sku import increment_version, is_valid_sku
from catalog.domain.model.value_objects import Money

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_VERSION_SUFFIX = re.compile(r"-v\d+$")


class ProductType(Enum):
    STANDALONE = "standalone"
    BUNDLE = "bundle"
    COMPONENT = "component"


class ProductStatus(Enum):
    ACTIVE = "active"
    SUNSET = "sunset"
    DISCONTINUED = "discontinued"


@dataclass(frozen=True)
class ProductImage:
    url: str
    alt_text: str = ""


def slugify(text: str) -> str:
    """Lower-case, url-safe slug: runs of other characters collapse to ``-``."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    if not slug:
        raise ValidationError(f"Cannot derive a slug from {text!r}")
    return slug


def validate_slug(slug: str) -> str:
    if not _SLUG_PATTERN.match(slug):
        raise ValidationError(
            f"Slug {slug!r} must be lower-case letters, digits and single hyphens"
        )
    return slug


@dataclass(frozen=True)
class ProductPatch:
    """Partial update of a product's editable attributes.

    ``None`` means "leave unchanged". ``component_price`` is the only
    nullable attribute, so clearing it needs the explicit
    ``clear_component_price`` flag. Identity (``id``, ``version``) and
    lifecycle (``status``) are never patchable.
    """

    sku: str | None = None
    slug: str | None = None
    name: str | None = None
    price: Money | None = None
    component_price: Money | None = None
    clear_component_price: bool = False
    product_type: ProductType | None = None
    images: tuple[ProductImage, ...] | None = None
    is_available_for_purchase: bool | None = None

    def __post_init__(self) -> None:
        if self.clear_component_price and self.component_price is not None:
            raise ValidationError(
                "Cannot both set and clear the component price in one patch"
            )

    @property
    def is_empty(self) -> bool:
        return self == ProductPatch()


@dataclass
class Product:
    """A catalog entry, possibly one version of a longer lineage.

    ``base_product_id`` points at the first row of the lineage (``None``
    on that first row itself) and ``previous_version_id`` at the row this
    one was forked from.
    """

    id: str
    sku: str
    slug: str
    name: str
    price: Money
    component_price: Money | None = None
    version: int = 1
    product_type: ProductType = ProductType.STANDALONE
    status: ProductStatus = ProductStatus.ACTIVE
    is_available_for_purchase: bool = True
    images: list[ProductImage] = field(default_factory=list)
    base_product_id: str | None = None
    previous_version_id: str | None = None
    replacement_product_id: str | None = None
    sunset_reason: str | None = None
    sunset_at: datetime | None = None
    discontinued_at: datetime | None = None

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        product_id: str,
        sku: str,
        name: str,
        price: Money,
        slug: str | None = None,
        component_price: Money | None = None,
        product_type: ProductType = ProductType.STANDALONE,
        images: list[ProductImage] | None = None,
    ) -> Product:
        """Create a version-1 product, enforcing all invariants."""
        if not product_id or not product_id.strip():
            raise ValidationError("Product id is required")
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _validate_price(price)
        return Product(
            id=product_id.strip(),
            sku=sku.strip(),
            slug=validate_slug(slug) if slug else slugify(name),
            name=name.strip(),
            price=price,
            component_price=component_price,
            product_type=product_type,
            images=list(images or []),
        )

    # --- Derived --------------------------------------------------------------

    @property
    def lineage_id(self) -> str:
        return self.base_product_id or self.id

    @property
    def primary_image_url(self) -> str:
        return self.images[0].url if self.images else ""

    @property
    def unit_price_as_component(self) -> Money:
        """Price used when this product is embedded in another one."""
        return self.component_price if self.component_price is not None else self.price

    @property
    def is_purchasable(self) -> bool:
        return self.is_available_for_purchase and self.status == ProductStatus.ACTIVE

    # --- Edits ----------------------------------------------------------------

    def apply_patch(self, patch: ProductPatch) -> None:
        """Mutate this row in place.

        Callers must make sure the row is not referenced by any order;
        see ``VersioningService.update_product_in_place``.
        """
        if patch.name is not None:
            if not patch.name.strip():
                raise ValidationError("Product name is required")
            self.name = patch.name.strip()
        if patch.sku is not None:
            if not patch.sku.strip():
                raise ValidationError("Product SKU is required")
            self.sku = patch.sku.strip()
        if patch.slug is not None:
            self.slug = validate_slug(patch.slug)
        if patch.price is not None:
            _validate_price(patch.price)
            self.price = patch.price
        if patch.component_price is not None:
            self.component_price = patch.component_price
        elif patch.clear_component_price:
            self.component_price = None
        if patch.product_type is not None:
            self.product_type = patch.product_type
        if patch.images is not None:
            self.images = list(patch.images)
        if patch.is_available_for_purchase is not None:
            self.is_available_for_purchase = patch.is_available_for_purchase

    def fork(self, patch: ProductPatch) -> Product:
        """Return the next version of this product as a brand-new row.

        ``self`` is not modified. The new row starts ``ACTIVE`` and
        purchasable, with the lifecycle fields of the source cleared.
        """
        version = self.version + 1
        base_id = self.lineage_id
        forked = replace(
            self,
            id=f"{base_id}_v{version}",
            sku=increment_version(self.sku) if is_valid_sku(self.sku) else self.sku,
            slug=f"{_VERSION_SUFFIX.sub('', self.slug)}-v{version}",
            version=version,
            status=ProductStatus.ACTIVE,
            is_available_for_purchase=True,
            images=list(self.images),
            base_product_id=base_id,
            previous_version_id=self.id,
            replacement_product_id=None,
            sunset_reason=None,
            sunset_at=None,
            discontinued_at=None,
        )
        forked.apply_patch(patch)
        if forked.slug == self.slug:
            raise ValidationError(
                f"New version of {self.id!r} must not reuse slug {self.slug!r}"
            )
        return forked

    # --- State transitions ----------------------------------------------------

    def sunset(
        self,
        reason: str,
        replacement_product_id: str | None = None,
        at: datetime | None = None,
    ) -> None:
        """Transition ACTIVE -> SUNSET and stop new purchases."""
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to sunset a product")
        if self.status != ProductStatus.ACTIVE:
            raise StateError(
                f"Cannot sunset product {self.id!r}: current status is "
                f"{self.status.value}, expected active"
            )
        if replacement_product_id == self.id:
            raise ValidationError("A product cannot replace itself")
        self.status = ProductStatus.SUNSET
        self.is_available_for_purchase = False
        self.sunset_reason = reason.strip()
        self.replacement_product_id = replacement_product_id
        self.sunset_at = at or datetime.now(timezone.utc)

    def discontinue(self, reason: str | None = None, at: datetime | None = None) -> None:
        """Transition ACTIVE|SUNSET -> DISCONTINUED (terminal)."""
        if self.status == ProductStatus.DISCONTINUED:
            raise StateError(f"Product {self.id!r} is already discontinued")
        self.status = ProductStatus.DISCONTINUED
        self.is_available_for_purchase = False
        if reason and reason.strip():
            self.sunset_reason = reason.strip()
        self.discontinued_at = at or datetime.now(timezone.utc)


def _validate_price(price: Money) -> None:
    if price.is_zero:
        raise ValidationError("Product price must be greater than zero")
