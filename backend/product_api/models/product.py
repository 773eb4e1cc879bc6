"""
Product API — Product SQLAlchemy Model
=======================================

What:  ORM model representing the `products` table.
How:   Inherits from the declarative Base; Alembic and `Database.connect`
       read its metadata.
Who:   Used by ProductService for CRUD operations.

Table Design:
    - UUID primary key: opaque, assigned at creation, never reused
    - name: stored already trimmed (validated non-empty by the schemas)
    - price: floating point number
    - description: empty string when omitted
    - created_at / updated_at: UTC, set by the service on create and on
      every update
    - Index on created_at DESC for the newest-first listing

    Column types are the generic SQLAlchemy ones (Uuid, DateTime with time
    zone) so the same model runs on PostgreSQL and on SQLite in tests.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from product_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    A product record.

    Lifecycle:
        1. Created by POST /products (created_at == updated_at)
        2. Mutated in place by PUT /products/{id} (updated_at refreshed)
        3. Removed by DELETE /products/{id} (hard delete, no versioning)
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_products_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
