"""Domain service: component pricing.

Read-only. Nothing is cached: every call walks the graph as it is at
query time, so it never takes a lock and can run concurrently with
anything else.
"""

from __future__ import annotations

import logging

from catalog.domain.model.pricing import PriceBreakdown, calculate_breakdown
from catalog.domain.service.component_graph_service import ComponentGraphService

logger = logging.getLogger(__name__)


class PricingService:

    def __init__(self, graph: ComponentGraphService) -> None:
        self._graph = graph

    def calculate_components_price(self, product_id: str) -> PriceBreakdown:
        """Price the full component graph below *product_id*.

        The product's own base price is not part of the result.
        """
        tree = self._graph.get_component_tree(product_id, mark_shared=False)
        breakdown = calculate_breakdown(tree)
        logger.debug(
            "Components of %s: included=%s optional=%s",
            product_id, breakdown.included_price, breakdown.optional_price,
        )
        return breakdown
