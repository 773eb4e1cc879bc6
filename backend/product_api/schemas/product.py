"""
Product API — Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the wire contract of the product API.
How:   ProductService validates raw request fields against ProductCreate /
       ProductUpdate and serializes ORM rows through ProductResponse.
       Envelope documents the uniform {status, message, data} body for
       OpenAPI.
Who:   services/product_service.py, routes, tests.

Wire format:
    {
        "id": "6f1c7c1e-2b7a-4a59-9d5b-8c0f6a3b1d2e",
        "name": "Keyboard",
        "price": 49.9,
        "description": "",
        "createdAt": "2026-01-15T12:00:00.123456Z",
        "updatedAt": "2026-01-15T12:00:00.123456Z"
    }
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, FiniteFloat, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

# Trimmed before the length check, so "   " counts as missing.
ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models — fields accepted from clients
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """
    Fields accepted by POST /products.

    Unknown keys (including id, createdAt, updatedAt) are ignored.
    """
    name: ProductName = Field(description="Product name (trimmed, required)")
    price: FiniteFloat = Field(description="Unit price (required)")
    description: str = Field(default="", description="Free-text description")

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        return "" if v is None else v


class ProductUpdate(BaseModel):
    """
    Fields accepted by PUT /products/{id}.

    Every field is optional, but a field that is sent is validated with the
    same rules as on creation: name and price cannot be blanked or nulled.
    A null description resets it to "".
    """
    name: Optional[ProductName] = None
    price: Optional[FiniteFloat] = None
    description: Optional[str] = None

    @field_validator("name", "price")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Only runs for values actually supplied (defaults are not validated)
        if v is None:
            raise PydanticCustomError("missing", "Field required")
        return v

    def changes(self) -> dict:
        """Supplied fields only, ready to be applied to the ORM object."""
        data = self.model_dump(exclude_unset=True)
        if "description" in data and data["description"] is None:
            data["description"] = ""
        return data


# ══════════════════════════════════════════════════════════════════════════
# Response Models — what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """Full representation of a product, built from the ORM row."""
    id: uuid.UUID = Field(description="Unique product identifier (UUID)")
    name: str
    price: float
    description: str = ""
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Envelope(BaseModel):
    """
    Uniform body of every response.

    Example:
        {"status": false, "message": "Invalid id format", "data": null}
    """
    status: bool = Field(description="true on success, false on failure")
    message: str = Field(description="Human-readable outcome")
    data: Optional[Any] = Field(default=None, description="Payload or null")


class UptimeData(BaseModel):
    uptime: float = Field(description="Seconds since the process started")


class HealthData(BaseModel):
    """Readiness probe payload (GET /health)."""
    database: str = Field(description="Database connectivity: connected, disconnected")
    version: str = Field(description="Application version")
    uptime: float = Field(description="Seconds since the process started")
