"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-12

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _price_snapshot():
    return [
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("breakdown", sa.JSON(), nullable=False),
    ]


def upgrade() -> None:
    """Create all initial tables."""

    # Products table
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_category", "products", ["category"])
    op.create_index("ix_products_is_active", "products", ["is_active"])

    # Agents table
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("commission_rate", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("category_commissions", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    # Clients table
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("mobile", sa.String(20), nullable=True),
        sa.Column("agent_id", sa.Integer(), sa.ForeignKey("agents.id"), nullable=True),
        sa.Column(
            "consultant_level",
            sa.Enum("none", "red", "yellow", "purple", name="consultantlevel"),
            nullable=False,
            server_default="none",
        ),
        *_timestamps(),
    )
    op.create_index("ix_clients_mobile", "clients", ["mobile"])
    op.create_index("ix_clients_agent_id", "clients", ["agent_id"])

    # Cart items table
    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("custom_fields", sa.JSON(), nullable=True),
        *_price_snapshot(),
        *_timestamps(),
        sa.UniqueConstraint("client_id", "product_id", name="uq_cart_client_product"),
    )
    op.create_index("ix_cart_items_client_id", "cart_items", ["client_id"])

    # Wishlist items table
    op.create_table(
        "wishlist_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        *_price_snapshot(),
        *_timestamps(),
        sa.UniqueConstraint("client_id", "product_id", name="uq_wishlist_client_product"),
    )
    op.create_index("ix_wishlist_items_client_id", "wishlist_items", ["client_id"])

    # Orders table
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("agent_id", sa.Integer(), sa.ForeignKey("agents.id"), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "cancelled", name="orderstatus"),
            nullable=False,
        ),
        sa.Column(
            "shipping_status",
            sa.Enum("pending", "dispatched", "in_transit", "delivered", name="shippingstatus"),
            nullable=False,
        ),
        sa.Column("total_amount", sa.Numeric(18, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_orders_client_id", "orders", ["client_id"])
    op.create_index("ix_orders_agent_id", "orders", ["agent_id"])

    # Order items table
    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("custom_fields", sa.JSON(), nullable=True),
        *_price_snapshot(),
        *_timestamps(),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    # System settings table
    op.create_table(
        "system_settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=False),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("system_settings")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("wishlist_items")
    op.drop_table("cart_items")
    op.drop_table("clients")
    op.drop_table("agents")
    op.drop_table("products")

    sa.Enum(name="shippingstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="orderstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="consultantlevel").drop(op.get_bind(), checkfirst=True)
