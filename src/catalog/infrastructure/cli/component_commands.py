"""CLI commands for component relationships and pricing."""

from __future__ import annotations

import click

from catalog.application.dto import ComponentTreeNodeDTO
from catalog.application.manage_components import (
    AddComponentHandler,
    RemoveComponentHandler,
    UpdateComponentHandler,
)
from catalog.application.show_component_tree import ShowComponentTreeHandler
from catalog.application.show_price_breakdown import ShowPriceBreakdownHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.component import ComponentPatch
from catalog.domain.model.value_objects import Money
from catalog.infrastructure.bootstrap import (
    component_repository,
    product_repository,
    unit_of_work,
)


@click.command("add")
@click.option("--parent", "parent_id", required=True, help="Parent product ID.")
@click.option("--component", "component_id", required=True, help="Component product ID.")
@click.option("--qty", "quantity", type=int, default=1, show_default=True)
@click.option("--optional", is_flag=True, help="List the component as optional.")
@click.option("--not-required", is_flag=True, help="Component may be left out.")
@click.option("--price-override", default=None, help="Unit price under this parent.")
@click.option("--display-name", default=None, help="Label under this parent.")
@click.option("--sort-order", type=int, default=0, show_default=True)
def component_add(
    parent_id: str,
    component_id: str,
    quantity: int,
    optional: bool,
    not_required: bool,
    price_override: str | None,
    display_name: str | None,
    sort_order: int,
) -> None:
    """Attach a product as a component of another."""
    handler = AddComponentHandler(uow=unit_of_work())

    try:
        edge = handler.handle(
            parent_id,
            component_id,
            quantity=quantity,
            is_required=not not_required,
            is_included=not optional,
            price_override=price_override,
            display_name=display_name,
            sort_order=sort_order,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    kind = "included" if edge.is_included else "optional"
    click.echo(f"Added {component_id} x{edge.quantity} to {parent_id} ({kind})")


@click.command("remove")
@click.option("--parent", "parent_id", required=True, help="Parent product ID.")
@click.option("--component", "component_id", required=True, help="Component product ID.")
def component_remove(parent_id: str, component_id: str) -> None:
    """Detach a component from its parent."""
    handler = RemoveComponentHandler(uow=unit_of_work())

    try:
        handler.handle(parent_id, component_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Removed {component_id} from {parent_id}")


@click.command("update")
@click.option("--parent", "parent_id", required=True, help="Parent product ID.")
@click.option("--component", "component_id", required=True, help="Component product ID.")
@click.option("--qty", "quantity", type=int, default=None)
@click.option("--included/--optional", "is_included", default=None)
@click.option("--required/--not-required", "is_required", default=None)
@click.option("--price-override", default=None)
@click.option("--clear-price-override", is_flag=True)
@click.option("--display-name", default=None)
@click.option("--clear-display-name", is_flag=True)
@click.option("--sort-order", type=int, default=None)
def component_update(
    parent_id: str,
    component_id: str,
    quantity: int | None,
    is_included: bool | None,
    is_required: bool | None,
    price_override: str | None,
    clear_price_override: bool,
    display_name: str | None,
    clear_display_name: bool,
    sort_order: int | None,
) -> None:
    """Change attributes of an existing component relationship."""
    handler = UpdateComponentHandler(uow=unit_of_work())

    try:
        patch = ComponentPatch(
            quantity=quantity,
            is_required=is_required,
            is_included=is_included,
            price_override=Money.of(price_override) if price_override is not None else None,
            clear_price_override=clear_price_override,
            display_name=display_name,
            clear_display_name=clear_display_name,
            sort_order=sort_order,
        )
        handler.handle(parent_id, component_id, patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Updated {component_id} under {parent_id}")


def _echo_tree(nodes: list[ComponentTreeNodeDTO] | tuple[ComponentTreeNodeDTO, ...], indent: int = 0) -> None:
    for node in nodes:
        flags = "included" if node.is_included else "optional"
        if node.is_shared:
            flags += ", shared"
        click.echo(
            f"{'  ' * indent}- {node.name} [{node.component_id}] "
            f"x{node.quantity} @ {node.unit_price} ({flags})"
        )
        _echo_tree(node.children, indent + 1)


@click.command("tree")
@click.option("--id", "product_id", required=True, help="Root product ID.")
@click.option("--depth", type=int, default=None, help="Levels to show (default: all).")
def component_tree(product_id: str, depth: int | None) -> None:
    """Show the component tree below a product."""
    handler = ShowComponentTreeHandler(
        product_repo=product_repository(),
        component_repo=component_repository(),
    )

    try:
        tree = handler.handle(product_id, max_depth=depth)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not tree:
        click.echo(f"Product {product_id} has no components.")
        return
    _echo_tree(tree)


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
def component_price(product_id: str) -> None:
    """Show the component price breakdown of a product."""
    handler = ShowPriceBreakdownHandler(
        product_repo=product_repository(),
        component_repo=component_repository(),
    )

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"  {'Base price':<22} {dto.base_price:>12}")
    click.echo(f"  {'Included components':<22} {dto.included_price:>12}")
    click.echo(f"  {'Optional components':<22} {dto.optional_price:>12}")
    click.echo(f"  {'-' * 35}")
    click.echo(f"  {'Unit price':<22} {dto.unit_price:>12}")
