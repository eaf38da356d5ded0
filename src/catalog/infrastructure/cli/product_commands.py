"""CLI commands for products, versions and lifecycle."""

from __future__ import annotations

import click

from catalog.application.add_product import AddProductHandler
from catalog.application.product_lifecycle import (
    DeleteProductHandler,
    DiscontinueProductHandler,
    SunsetProductHandler,
)
from catalog.application.show_product_versions import ShowProductVersionsHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import ProductPatch
from catalog.domain.model.value_objects import Money
from catalog.infrastructure.bootstrap import (
    order_item_repository,
    product_repository,
    unit_of_work,
)


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--sku", required=True, help="SKU, e.g. TPC-PUMP-A01-V01.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Base price (e.g. 15.00).")
@click.option("--slug", default=None, help="URL slug (derived from the name if omitted).")
@click.option("--component-price", default=None, help="Price when used as a component.")
@click.option(
    "--type", "product_type",
    type=click.Choice(["standalone", "bundle", "component"]),
    default="standalone",
    show_default=True,
)
@click.option("--image", "images", multiple=True, help="Image URL (repeatable).")
def product_add(
    product_id: str,
    sku: str,
    name: str,
    price: str,
    slug: str | None,
    component_price: str | None,
    product_type: str,
    images: tuple[str, ...],
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(
            product_id=product_id,
            sku=sku,
            name=name,
            price=price,
            slug=slug,
            component_price=component_price,
            product_type=product_type,
            image_urls=list(images),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all product rows, every version included."""
    products = product_repository().list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<16} {'SKU':<18} {'Name':<24} {'Ver':>4} {'Status':<13} {'Price':>10}")
    click.echo("-" * 90)
    for p in products:
        click.echo(
            f"{p.id:<16} {p.sku:<18} {p.name:<24} {p.version:>4} "
            f"{p.status.value:<13} {str(p.price):>10}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New base price.")
@click.option("--component-price", default=None, help="New component price.")
@click.option("--clear-component-price", is_flag=True, help="Remove the component price.")
@click.option("--slug", default=None, help="New slug.")
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    component_price: str | None,
    clear_component_price: bool,
    slug: str | None,
) -> None:
    """Edit a product; forks a new version if it was already ordered."""
    handler = UpdateProductHandler(uow=unit_of_work())

    try:
        patch = ProductPatch(
            name=name,
            price=Money.of(price) if price is not None else None,
            component_price=Money.of(component_price) if component_price is not None else None,
            clear_component_price=clear_component_price,
            slug=slug,
        )
        result = handler.handle(product_id=product_id, patch=patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.versioned:
        click.echo(
            f"Product {product_id} is in orders; created {result.product.id} "
            f"(version {result.product.version})"
        )
    else:
        click.echo(f"Product {result.product.id} updated in place")


@click.command("versions")
@click.option("--id", "product_id", required=True, help="Any product ID in the lineage.")
def product_versions(product_id: str) -> None:
    """Show every version of a product."""
    handler = ShowProductVersionsHandler(
        product_repo=product_repository(),
        order_item_repo=order_item_repository(),
    )

    try:
        versions = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for p, in_orders in versions:
        marker = " (in orders)" if in_orders else ""
        click.echo(f"v{p.version:<3} {p.id:<16} {p.slug:<24} {p.status.value:<13} {p.price}{marker}")


@click.command("sunset")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--reason", required=True, help="Why the product is being sunset.")
@click.option("--replacement", default=None, help="ID of the product replacing it.")
def product_sunset(product_id: str, reason: str, replacement: str | None) -> None:
    """Stop selling a product (ACTIVE -> SUNSET)."""
    handler = SunsetProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(product_id, reason, replacement)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} is now {product.status.value}")


@click.command("discontinue")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--reason", default=None, help="Optional reason.")
def product_discontinue(product_id: str, reason: str | None) -> None:
    """Retire a product for good (-> DISCONTINUED)."""
    handler = DiscontinueProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(product_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} is now {product.status.value}")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(product_id: str) -> None:
    """Delete a product that no order references."""
    handler = DeleteProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} deleted")
