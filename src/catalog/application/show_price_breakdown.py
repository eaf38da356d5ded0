"""Application service: Show Price Breakdown use case (query).

Computed on demand from the live graph every time; there is no cache to
invalidate when an edge or a price changes.
"""

from __future__ import annotations

from catalog.application.dto import PriceBreakdownDTO
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.repository.component_repository import ComponentRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.component_graph_service import ComponentGraphService
from catalog.domain.service.pricing_service import PricingService


class ShowPriceBreakdownHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        component_repo: ComponentRepository,
    ) -> None:
        self._product_repo = product_repo
        self._pricing = PricingService(ComponentGraphService(product_repo, component_repo))

    def handle(self, product_id: str) -> PriceBreakdownDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: {product_id!r}")

        breakdown = self._pricing.calculate_components_price(product.id)
        return PriceBreakdownDTO(
            product_id=product.id,
            base_price=str(product.price),
            included_price=str(breakdown.included_price),
            optional_price=str(breakdown.optional_price),
            components_total=str(breakdown.total),
            unit_price=str(product.price + breakdown.total),
        )
