"""
Product API — Product Service (Persistence Gateway)
====================================================

What:  The five Product operations: create, find_all, find_by_id,
       update_by_id, delete_by_id.
How:   Validates raw request fields with the Pydantic schemas, parses path
       ids, runs the SQLAlchemy statements on the session it is given, and
       returns ProductResponse models.
Who:   Called by route handlers; receives the request's AsyncSession.

Failure modes (all raised, never returned):
    ValidationError  — fields missing or malformed (create, update)
    InvalidIdError   — id is not a UUID (get, update, delete)
    NotFoundError    — well-formed id, no such record (get, update, delete)
    DatabaseError    — any SQLAlchemy failure, driver detail kept in context

The service is stateless: the session is the only resource it touches, so a
single module-level instance serves every request.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional
from uuid import UUID, uuid4

import pydantic
from sqlalchemy import asc, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    ValidationError,
)
from product_api.models.product import Product
from product_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)


def parse_id(product_id: str) -> UUID:
    """Parse a path id, raising InvalidIdError for anything that is not a UUID."""
    try:
        return UUID(str(product_id))
    except ValueError:
        raise InvalidIdError(value=str(product_id))


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """
    Current UTC time, bumped past `previous` if the clock has not moved.

    Keeps updated_at strictly increasing across updates issued within the
    same clock tick.
    """
    now = datetime.now(timezone.utc)
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    return max(now, previous + timedelta(microseconds=1))


class ProductService:
    """
    Persistence gateway for products.

    Every public method takes the request session as its first argument and
    flushes its writes; the commit is issued by `get_db_session` when the
    handler returns.
    """

    # ── Validation helpers ────────────────────────────────────────────────

    @staticmethod
    def _validate(schema: type, fields: Mapping[str, Any]) -> Any:
        try:
            return schema.model_validate(dict(fields))
        except pydantic.ValidationError as e:
            raise ValidationError.from_errors(e.errors())

    # ── Operations ────────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, fields: Mapping[str, Any]) -> ProductResponse:
        """
        Validate and persist a new product.

        Raises:
            ValidationError: name or price missing/malformed
            DatabaseError: insert failed
        """
        data: ProductCreate = self._validate(ProductCreate, fields)
        now = datetime.now(timezone.utc)
        product = Product(
            id=uuid4(),
            name=data.name,
            price=data.price,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(product)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating product: %s", str(e))
            raise DatabaseError(context={"operation": "create", "error": str(e)})

        logger.info("Product created: %s", product.id)
        return ProductResponse.model_validate(product)

    async def find_all(
        self, db: AsyncSession, sort: str = "created_at_desc"
    ) -> List[ProductResponse]:
        """All products, newest first unless sort='created_at_asc'."""
        order = asc(Product.created_at) if sort == "created_at_asc" else desc(Product.created_at)
        try:
            result = await db.execute(select(Product).order_by(order))
            products = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing products: %s", str(e))
            raise DatabaseError(context={"operation": "find_all", "error": str(e)})

        return [ProductResponse.model_validate(p) for p in products]

    async def _get(self, db: AsyncSession, product_id: str, operation: str) -> Product:
        uid = parse_id(product_id)
        try:
            product = await db.get(Product, uid)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product %s: %s", uid, str(e))
            raise DatabaseError(context={"operation": operation, "error": str(e)})
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(uid))
        return product

    async def find_by_id(self, db: AsyncSession, product_id: str) -> ProductResponse:
        """
        Fetch one product.

        Raises:
            InvalidIdError: product_id is not a UUID
            NotFoundError: no product with that id
        """
        product = await self._get(db, product_id, "find_by_id")
        return ProductResponse.model_validate(product)

    async def update_by_id(
        self, db: AsyncSession, product_id: str, fields: Mapping[str, Any]
    ) -> ProductResponse:
        """
        Apply a partial update and refresh updated_at.

        The id is checked before the body, so a malformed id reports
        "Invalid id format" even when the body is also invalid. Concurrent
        updates are last-write-wins.
        """
        uid = parse_id(product_id)
        changes = self._validate(ProductUpdate, fields).changes()
        product = await self._get(db, str(uid), "update_by_id")

        for key, value in changes.items():
            setattr(product, key, value)
        product.updated_at = next_timestamp(product.updated_at)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating product %s: %s", uid, str(e))
            raise DatabaseError(context={"operation": "update_by_id", "error": str(e)})

        logger.info("Product updated: %s (%s)", uid, ", ".join(sorted(changes)) or "no fields")
        return ProductResponse.model_validate(product)

    async def delete_by_id(self, db: AsyncSession, product_id: str) -> ProductResponse:
        """Remove a product and return it as it was before deletion."""
        product = await self._get(db, product_id, "delete_by_id")
        deleted = ProductResponse.model_validate(product)
        try:
            await db.delete(product)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting product %s: %s", product.id, str(e))
            raise DatabaseError(context={"operation": "delete_by_id", "error": str(e)})

        logger.info("Product deleted: %s", deleted.id)
        return deleted


# ── Singleton Instance ────────────────────────────────────────────────────
product_service = ProductService()
