"""CLI commands for order lines."""

from __future__ import annotations

import click

from catalog.application.create_order_items import CreateOrderItemsHandler
from catalog.application.dto import OrderDTO, OrderItemSpec, order_dto
from catalog.application.show_order import ShowOrderHandler
from catalog.domain.exceptions import DomainException
from catalog.infrastructure.bootstrap import config, order_item_repository, unit_of_work


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'prod_a:3,prod_b:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order {dto.order_id}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Ver':>4} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<24} {line.product_version:>4} {line.quantity:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<24} {dto.item_count:>10} {dto.subtotal:>21}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--order-id", default=None, help="Order ID (generated if omitted).")
def order_create(items: str, order_id: str | None) -> None:
    """Snapshot the given products into a new order."""
    specs = _parse_items(items)
    handler = CreateOrderItemsHandler(
        uow=unit_of_work(),
        snapshot_depth=config().snapshot_depth,
    )

    try:
        result = handler.handle(specs, order_id=order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order_dto(result.order_id, result.snapshots, result.totals))


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show the frozen lines of an existing order."""
    handler = ShowOrderHandler(order_item_repo=order_item_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
