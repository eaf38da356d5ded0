import click

from catalog.infrastructure.bootstrap import config
from catalog.infrastructure.cli.component_commands import (
    component_add,
    component_price,
    component_remove,
    component_tree,
    component_update,
)
from catalog.infrastructure.cli.order_commands import order_create, order_show
from catalog.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_discontinue,
    product_list,
    product_sunset,
    product_update,
    product_versions,
)
from catalog.infrastructure.config import setup_logging


@click.group()
def cli() -> None:
    """Catalog — product composition and versioning"""
    setup_logging(config().log_level)


@cli.group()
def product() -> None:
    """Manage products and their versions."""


@cli.group()
def component() -> None:
    """Manage component relationships between products."""


@cli.group()
def order() -> None:
    """Capture and inspect order lines."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_discontinue)
product.add_command(product_list)
product.add_command(product_sunset)
product.add_command(product_update)
product.add_command(product_versions)
component.add_command(component_add)
component.add_command(component_price)
component.add_command(component_remove)
component.add_command(component_tree)
component.add_command(component_update)
order.add_command(order_create)
order.add_command(order_show)
