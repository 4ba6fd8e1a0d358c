"""
Cart, wishlist and checkout workflows.

Add-to-cart runs resolve -> calculate -> attach for the line.
Checkout copies the cart lines as they are into an order and clears the
cart; it never re-resolves rates.
"""

import logging
from typing import List, Optional

from evershine.errors import InvalidArgument, NotFound
from evershine.models import CartItem, Client, Order, Product, WishlistItem
from evershine.repositories import (
    CartRepository,
    ClientRepository,
    OrderRepository,
    ProductRepository,
    WishlistRepository,
)
from evershine.services.pricing import PriceCalculator
from evershine.services.rate_resolver import RateResolver, validate_id
from evershine.services.snapshot import PriceSnapshotStore, order_total

logger = logging.getLogger(__name__)


class CheckoutService:
    def __init__(
        self,
        products: ProductRepository,
        clients: ClientRepository,
        carts: CartRepository,
        wishlists: WishlistRepository,
        orders: OrderRepository,
        resolver: RateResolver,
        calculator: PriceCalculator,
        store: PriceSnapshotStore,
    ):
        self.products = products
        self.clients = clients
        self.carts = carts
        self.wishlists = wishlists
        self.orders = orders
        self.resolver = resolver
        self.calculator = calculator
        self.store = store

    async def _require_client(self, client_id: int) -> Client:
        validate_id(client_id, "client_id")
        client = await self.clients.find_by_id(client_id)
        if client is None:
            raise NotFound(f"Client {client_id} not found")
        return client

    async def _require_product(self, product_id: int) -> Product:
        validate_id(product_id, "product_id")
        product = await self.products.find_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFound(f"Product {product_id} not found")
        return product

    async def add_to_cart(
        self,
        client_id: int,
        product_id: int,
        quantity: int = 1,
        agent_id: Optional[int] = None,
        custom_fields: Optional[dict] = None,
    ) -> CartItem:
        """Add a product to the cart (or grow an existing line) and price it.

        Adding always re-prices the line with the current rates.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidArgument(f"quantity must be a positive integer, got {quantity!r}")

        await self._require_client(client_id)
        product = await self._require_product(product_id)

        rates = await self.resolver.resolve(client_id, agent_id)
        breakdown = self.calculator.calculate(
            product.base_price,
            rates.for_category(product.category),
        )

        item = await self.carts.find_for_product(client_id, product_id)
        if item is None:
            item = CartItem(client_id=client_id, product_id=product_id, quantity=quantity)
        else:
            item.quantity += quantity
        if custom_fields is not None:
            item.custom_fields = custom_fields

        await self.store.attach_to_cart_item(item, breakdown)
        logger.info(
            f"Client {client_id} carted product {product_id} x{item.quantity} "
            f"at {breakdown.final_price}"
        )
        return item

    async def update_cart_item(
        self,
        item_id: int,
        quantity: Optional[int] = None,
        custom_fields: Optional[dict] = None,
    ) -> CartItem:
        """Change quantity or custom fields. The price snapshot is kept."""
        item = await self.carts.find_item(item_id)
        if item is None:
            raise NotFound(f"Cart item {item_id} not found")

        if quantity is not None:
            if quantity < 1:
                raise InvalidArgument(f"quantity must be a positive integer, got {quantity!r}")
            item.quantity = quantity
        if custom_fields is not None:
            item.custom_fields = custom_fields

        await self.carts.save([item])
        return item

    async def refresh_cart(self, client_id: int, agent_id: Optional[int] = None) -> List[CartItem]:
        await self._require_client(client_id)
        items = await self.carts.find_by_client_id(client_id)
        if not items:
            return []
        return await self.store.refresh_cart_pricing(client_id, agent_id, items)

    async def add_to_wishlist(
        self,
        client_id: int,
        product_id: int,
        agent_id: Optional[int] = None,
    ) -> WishlistItem:
        await self._require_client(client_id)
        product = await self._require_product(product_id)

        rates = await self.resolver.resolve(client_id, agent_id)
        breakdown = self.calculator.calculate(
            product.base_price,
            rates.for_category(product.category),
        )

        item = await self.wishlists.find_for_product(client_id, product_id)
        if item is None:
            item = WishlistItem(client_id=client_id, product_id=product_id)
        return await self.store.attach_to_wishlist_item(item, breakdown)

    async def refresh_wishlist(self, client_id: int, agent_id: Optional[int] = None) -> List[WishlistItem]:
        await self._require_client(client_id)
        items = await self.wishlists.find_by_client_id(client_id)
        if not items:
            return []
        return await self.store.refresh_wishlist_pricing(client_id, agent_id, items)

    async def place_order(self, client_id: int, agent_id: Optional[int] = None) -> Order:
        """Turn the client's cart into an order with frozen prices.

        Raises:
            NotFound: unknown client
            InvalidArgument: the cart is empty
        """
        client = await self._require_client(client_id)
        validate_id(agent_id, "agent_id")

        cart_items = await self.carts.find_by_client_id(client_id)
        if not cart_items:
            raise InvalidArgument("Cart is empty")

        order_items = self.store.freeze_for_order(cart_items)
        order = await self.orders.create(
            client_id=client_id,
            order_items=order_items,
            total_amount=order_total(order_items),
            agent_id=agent_id if agent_id is not None else client.agent_id,
        )
        await self.carts.clear(client_id)

        logger.info(
            f"Order {order.id} placed by client {client_id}: "
            f"{len(order_items)} items, total {order.total_amount}"
        )
        return order
