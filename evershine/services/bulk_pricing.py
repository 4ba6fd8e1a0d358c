"""
Catalog-wide pricing.

Rates are resolved once per request; each product then only costs a
calculator call, with the agent's category override (if any) swapped in
from the already-resolved agent record.

A product that cannot be priced is returned at its raw base price with
commission_info.error set. Failing to load the product page aborts the
whole request.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from evershine.errors import InvalidArgument
from evershine.models import ConsultantLevel
from evershine.repositories import ProductFilter, ProductRepository
from evershine.services.pricing import PriceCalculator, RateBreakdown
from evershine.services.rate_resolver import RateResolver, ResolvedRates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommissionInfo:
    """How a listed price was derived."""
    agent_commission_rate: Decimal
    consultant_level_rate: Decimal
    total_rate: Decimal
    is_global_rate: bool
    has_category_override: bool
    consultant_level: ConsultantLevel
    consultant_name: str
    breakdown: Optional[RateBreakdown] = None
    error: bool = False
    error_message: Optional[str] = None


@dataclass(frozen=True)
class PricedProduct:
    """A product with its commission-inclusive price layered on top."""
    product_id: int
    name: Optional[str]
    category: Optional[str]
    original_price: Any
    calculated_price: Any
    commission_info: CommissionInfo


class BulkPricingPipeline:
    def __init__(
        self,
        resolver: RateResolver,
        calculator: PriceCalculator,
        products: Optional[ProductRepository] = None,
    ):
        self.resolver = resolver
        self.calculator = calculator
        self.products = products

    async def price_all(
        self,
        products: Sequence[Any],
        client_id: Optional[int] = None,
        agent_id: Optional[int] = None,
    ) -> List[PricedProduct]:
        """Price every product for one client/agent pair.

        Input order is preserved and input objects are not modified.
        """
        rates = await self.resolver.resolve(client_id, agent_id)
        return [self.price_one(product, rates) for product in products]

    async def price_page(
        self,
        product_filter: ProductFilter,
        page: int = 1,
        limit: int = 20,
        client_id: Optional[int] = None,
        agent_id: Optional[int] = None,
    ) -> Tuple[List[PricedProduct], int]:
        """Load one catalog page and price it. Returns (items, total)."""
        rates = await self.resolver.resolve(client_id, agent_id)
        products, total = await self.products.find_many(product_filter, page, limit)
        return [self.price_one(product, rates) for product in products], total

    def price_one(self, product: Any, rates: ResolvedRates) -> PricedProduct:
        category = getattr(product, "category", None)
        has_override = rates.has_category_override(category)
        inputs = rates.for_category(category)

        try:
            breakdown = self.calculator.calculate(product.base_price, inputs)
        except InvalidArgument as e:
            logger.warning(f"Could not price product {product.id}: {e.message}")
            return PricedProduct(
                product_id=product.id,
                name=getattr(product, "name", None),
                category=category,
                original_price=product.base_price,
                calculated_price=product.base_price,
                commission_info=CommissionInfo(
                    agent_commission_rate=inputs.agent_commission_rate,
                    consultant_level_rate=inputs.consultant_level_rate,
                    total_rate=inputs.agent_commission_rate + inputs.consultant_level_rate,
                    is_global_rate=rates.is_global_rate,
                    has_category_override=has_override,
                    consultant_level=rates.consultant_level,
                    consultant_name=rates.consultant_name,
                    error=True,
                    error_message=e.message,
                ),
            )

        return PricedProduct(
            product_id=product.id,
            name=getattr(product, "name", None),
            category=category,
            original_price=product.base_price,
            calculated_price=breakdown.final_price,
            commission_info=CommissionInfo(
                agent_commission_rate=breakdown.agent_commission_rate,
                consultant_level_rate=breakdown.consultant_level_rate,
                total_rate=breakdown.total_rate,
                is_global_rate=rates.is_global_rate,
                has_category_override=has_override,
                consultant_level=rates.consultant_level,
                consultant_name=rates.consultant_name,
                breakdown=breakdown,
            ),
        )
