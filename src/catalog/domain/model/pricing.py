"""Price contribution rule shared by live pricing and order snapshots.

The top-level components of a product are split into two groups by their
own ``is_included`` flag. Each top-level component always counts its own
``unit price * quantity`` toward its group. Below the top level every
node is judged on its own flag: it adds its line price only when it is
included, and its children are visited whether or not it is.

Both groups are later added into the charged unit price of an order line;
"optional" is a display grouping, not an opt-out.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from catalog.domain.model.value_objects import Money


class PricedNode(Protocol):

    @property
    def is_included(self) -> bool: ...

    @property
    def line_price(self) -> Money: ...

    @property
    def children(self) -> Sequence[PricedNode]: ...


@dataclass(frozen=True)
class PriceBreakdown:
    included_price: Money
    optional_price: Money

    @property
    def total(self) -> Money:
        return self.included_price + self.optional_price


def calculate_breakdown(nodes: Iterable[PricedNode]) -> PriceBreakdown:
    included = Money.zero()
    optional = Money.zero()
    for node in nodes:
        contribution = node.line_price + nested_contribution(node.children)
        if node.is_included:
            included = included + contribution
        else:
            optional = optional + contribution
    return PriceBreakdown(included_price=included, optional_price=optional)


def nested_contribution(nodes: Iterable[PricedNode]) -> Money:
    total = Money.zero()
    for node in nodes:
        if node.is_included:
            total = total + node.line_price
        total = total + nested_contribution(node.children)
    return total
