"""
Price snapshots on cart, wishlist and order lines.

A line's price and breakdown are written only by:
- add-to-cart / add-to-wishlist (attach_to_*)
- an explicit refresh requested by the user (refresh_*_pricing)

Checkout copies the cart snapshot into the order verbatim
(freeze_for_order) without touching rates, so an order always shows
the prices the client accepted.
"""

import copy
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from evershine.models import CartItem, OrderItem, WishlistItem
from evershine.repositories import CartRepository, ProductRepository, WishlistRepository
from evershine.services.pricing import ZERO, PriceCalculator, RateBreakdown, round2
from evershine.services.rate_resolver import RateResolver, ResolvedRates

logger = logging.getLogger(__name__)

PricedLine = Union[CartItem, WishlistItem]


def apply_breakdown(item: PricedLine, breakdown: RateBreakdown) -> PricedLine:
    """Overwrite the price snapshot of a line, leaving everything else alone."""
    item.base_price = breakdown.base_price
    item.price = breakdown.final_price
    item.breakdown = breakdown.to_dict()
    return item


def line_total(price: Decimal, quantity: int) -> Decimal:
    return round2(price * quantity)


def order_total(items: Sequence[OrderItem]) -> Decimal:
    return sum((line_total(i.price, i.quantity) for i in items), ZERO)


class PriceSnapshotStore:
    """Attaches, refreshes and freezes price snapshots."""

    def __init__(
        self,
        carts: CartRepository,
        products: ProductRepository,
        resolver: RateResolver,
        calculator: PriceCalculator,
        wishlists: Optional[WishlistRepository] = None,
    ):
        self.carts = carts
        self.products = products
        self.resolver = resolver
        self.calculator = calculator
        self.wishlists = wishlists

    async def attach_to_cart_item(self, item: CartItem, breakdown: RateBreakdown) -> CartItem:
        """Store a freshly calculated price on a cart line and persist it."""
        apply_breakdown(item, breakdown)
        await self.carts.save([item])
        return item

    async def attach_to_wishlist_item(self, item: WishlistItem, breakdown: RateBreakdown) -> WishlistItem:
        apply_breakdown(item, breakdown)
        await self.wishlists.save([item])
        return item

    def freeze_for_order(self, cart_items: Sequence[CartItem]) -> List[OrderItem]:
        """Copy cart lines into new order lines.

        Price, base price and breakdown are deep-copied exactly as stored.
        Rates are never consulted here.
        """
        return [
            OrderItem(
                product_id=item.product_id,
                quantity=item.quantity,
                base_price=item.base_price,
                price=item.price,
                breakdown=copy.deepcopy(item.breakdown),
                custom_fields=copy.deepcopy(item.custom_fields),
            )
            for item in cart_items
        ]

    async def refresh_cart_pricing(
        self,
        client_id: Optional[int],
        agent_id: Optional[int],
        cart_items: Sequence[CartItem],
    ) -> List[CartItem]:
        """Re-price carted lines against current rates and base prices.

        Only called when the user explicitly asks for fresh prices.
        """
        rates = await self.resolver.resolve(client_id, agent_id)
        items = await self._reprice(cart_items, rates)
        await self.carts.save(items)
        logger.info(f"Refreshed pricing of {len(items)} cart items for client {client_id}")
        return items

    async def refresh_wishlist_pricing(
        self,
        client_id: Optional[int],
        agent_id: Optional[int],
        wishlist_items: Sequence[WishlistItem],
    ) -> List[WishlistItem]:
        rates = await self.resolver.resolve(client_id, agent_id)
        items = await self._reprice(wishlist_items, rates)
        await self.wishlists.save(items)
        logger.info(f"Refreshed pricing of {len(items)} wishlist items for client {client_id}")
        return items

    async def _reprice(self, items: Sequence[PricedLine], rates: ResolvedRates) -> List[PricedLine]:
        products = await self.products.find_by_ids(i.product_id for i in items)
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                # Deleted product: stored snapshot stays as is
                logger.warning(f"Product {item.product_id} no longer exists, keeping stored price")
                continue
            breakdown = self.calculator.calculate(
                product.base_price,
                rates.for_category(product.category),
            )
            apply_breakdown(item, breakdown)
        return list(items)
