"""Create products table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `products` table and its created_at DESC index.
How:   Generic column types (Uuid, DateTime with time zone) matching
       product_api/models/product.py.

Rollback: downgrade() drops the table (all product data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Newest-first listing: ORDER BY created_at DESC
    op.create_index(
        "idx_products_created_at",
        "products",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_products_created_at", table_name="products")
    op.drop_table("products")
