"""
Product API — Product Route Handlers
=====================================

What:  POST/GET /products and GET/PUT/DELETE /products/{product_id}.
How:   Each handler passes the request body / path id to ProductService and
       wraps the result in a success envelope. Failures are raised by the
       service and answered by the handlers registered in main.py, so no
       route catches anything itself.

The path id is accepted as a plain string on purpose: a malformed id must
reach the service and come back as 400 "Invalid id format", not as a
framework-level path validation error.

The collection is served on both "/products" and "/products/"; the app turns
off slash redirects, so either form gets an envelope.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.database import get_db_session
from product_api.responses import ok
from product_api.schemas.product import Envelope
from product_api.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

_ERRORS = {
    400: {"description": "Validation failure or malformed id", "model": Envelope},
    500: {"description": "Internal server error", "model": Envelope},
}
_ERRORS_WITH_404 = {**_ERRORS, 404: {"description": "Product not found", "model": Envelope}}


@router.post(
    "",
    status_code=201,
    responses={201: {"description": "Created product", "model": Envelope}, **_ERRORS},
    summary="Create a product",
)
@router.post("/", status_code=201, include_in_schema=False)
async def create_product(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    product = await product_service.create(db, payload)
    return ok("Create product successful", product, 201)


@router.get(
    "",
    responses={200: {"description": "All products, newest first", "model": Envelope}, **_ERRORS},
    summary="List products",
)
@router.get("/", include_in_schema=False)
async def list_products(
    sort: str = Query(
        default="created_at_desc",
        pattern="^created_at_(desc|asc)$",
        description="Sort order: 'created_at_desc' (newest first) or 'created_at_asc'",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    products = await product_service.find_all(db, sort=sort)
    return ok("Get products successful", products)


@router.get(
    "/{product_id}",
    responses={200: {"description": "The product", "model": Envelope}, **_ERRORS_WITH_404},
    summary="Get a product by id",
)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    product = await product_service.find_by_id(db, product_id)
    return ok("Get product successful", product)


@router.put(
    "/{product_id}",
    responses={200: {"description": "The updated product", "model": Envelope}, **_ERRORS_WITH_404},
    summary="Update a product (partial)",
)
async def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    product = await product_service.update_by_id(db, product_id, payload)
    return ok("Update product successful", product)


@router.delete(
    "/{product_id}",
    responses={200: {"description": "The deleted product", "model": Envelope}, **_ERRORS_WITH_404},
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    product = await product_service.delete_by_id(db, product_id)
    return ok("Delete product successful", product)
