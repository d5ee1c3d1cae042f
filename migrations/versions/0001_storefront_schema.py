"""Storefront schema: categories, products, cart/order items, reviews."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# Alembic identifiers
revision = "0001_storefront_schema"
down_revision = None
branch_labels = None
depends_on = None


def _ts(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True)


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        _ts("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
    )
    # functional index works on both PostgreSQL and SQLite
    op.create_index(
        "ix_categories_name_lower", "categories", [sa.text("lower(name)")], unique=True
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("short_description", sa.String(500), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("regular_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("min_stock_alert", sa.Integer, nullable=False, server_default="5"),
        sa.Column("unit_of_measurement", sa.String(50), nullable=True),
        sa.Column("package_size", sa.String(100), nullable=True),
        sa.Column("category_id", sa.Integer, nullable=True),
        sa.Column("subcategory_id", sa.Integer, nullable=True),
        sa.Column("brand", sa.String(100), nullable=True),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("barcode", sa.String(64), nullable=True),
        sa.Column("tags", sa.String(500), nullable=False, server_default=""),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("gallery_images", sa.JSON, nullable=True),
        sa.Column("video_url", sa.String(1000), nullable=True),
        sa.Column("meta_title", sa.String(255), nullable=True),
        sa.Column("meta_description", sa.String(500), nullable=True),
        sa.Column("free_shipping", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("shipping_time", sa.String(100), nullable=True),
        sa.Column("warranty_period", sa.Integer, nullable=True),
        sa.Column("weight_for_shipping", sa.Numeric(10, 3), nullable=True),
        sa.Column("dimensions", sa.String(100), nullable=True),
        sa.Column("delivery_time_estimate", sa.String(100), nullable=True),
        sa.Column("is_returnable", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_cod_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("eco_friendly", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("eco_friendly_details", sa.String(255), nullable=True),
        sa.Column("is_featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_best_seller", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_new_arrival", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_by", sa.Integer, nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            ondelete="RESTRICT",
            name="fk_products_category_id_categories",
        ),
        sa.CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'draft', 'out_of_stock')",
            name="ck_products_status_valid",
        ),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_slug", "products", ["slug"])
    op.create_index("ix_products_price", "products", ["price"])
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_name_lower", "products", [sa.text("lower(name)")])

    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("product_id", sa.Integer, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id", name="pk_cart_items"),
        sa.ForeignKeyConstraint(
            ["product_id"], ["products.id"], ondelete="RESTRICT",
            name="fk_cart_items_product_id_products",
        ),
    )
    op.create_index("ix_cart_items_product_id", "cart_items", ["product_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("order_id", sa.Integer, nullable=False),
        sa.Column("product_id", sa.Integer, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_order_items"),
        sa.ForeignKeyConstraint(
            ["product_id"], ["products.id"], ondelete="RESTRICT",
            name="fk_order_items_product_id_products",
        ),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("product_id", sa.Integer, nullable=False),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False, server_default="Review"),
        sa.Column("content", sa.Text, nullable=False),
        _ts("created_at"),
        _ts("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_reviews"),
        sa.ForeignKeyConstraint(
            ["product_id"], ["products.id"], ondelete="CASCADE",
            name="fk_reviews_product_id_products",
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_product_id_created_at", "reviews", ["product_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_reviews_product_id_created_at", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("ix_order_items_product_id", table_name="order_items")
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("ix_cart_items_product_id", table_name="cart_items")
    op.drop_table("cart_items")
    for ix in (
        "ix_products_name_lower",
        "ix_products_category_id",
        "ix_products_price",
        "ix_products_slug",
        "ix_products_sku",
    ):
        op.drop_index(ix, table_name="products")
    op.drop_table("products")
    op.drop_index("ix_categories_name_lower", table_name="categories")
    op.drop_table("categories")
