"""
Product API — Custom Exception Hierarchy
=========================================

What:  Tagged error kinds raised by the persistence gateway (ProductService).
How:   Each exception carries a client-safe `message` and an optional
       `context` dict. The handlers registered in main.py match on the class
       and build the failure envelope with the right HTTP status.
Who:   Raised by services; caught only by the global handlers.

Exception Hierarchy:
    ProductAPIError (base)
    ├── ValidationError   → 400 (missing/malformed field, message = detail)
    ├── InvalidIdError    → 400 ("Invalid id format")
    ├── NotFoundError     → 404 ("Product not found")
    └── DatabaseError     → 500 ("Internal server error")

    Anything that is not a ProductAPIError is treated as unhandled → 500.
"""

from typing import Any, Dict, Iterable, Mapping, Optional


class ProductAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductAPIError):
    """
    Raised when client input fails validation before persistence.

    The message names every failing field, e.g.
        "Product validation failed: name: Field required, price: Field required"
    """

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[Iterable[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        self.fields = list(fields or [])
        if self.fields:
            ctx["fields"] = self.fields
        super().__init__(message=message, context=ctx)

    @classmethod
    def from_errors(
        cls, errors: Iterable[Mapping[str, Any]], resource: str = "Product"
    ) -> "ValidationError":
        """Build from a list of pydantic error dicts (ValidationError.errors())."""
        errors = list(errors)
        return cls(
            message=describe_errors(errors, prefix=f"{resource} validation failed"),
            fields=[_field_name(err) for err in errors],
        )


class InvalidIdError(ProductAPIError):
    """
    Raised when a path identifier is not a syntactically valid id.

    This is a format error, not absence: a well-formed id that matches no
    record raises NotFoundError instead.
    """

    def __init__(self, value: str = "", context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(message="Invalid id format", context=ctx)
        self.value = value


class NotFoundError(ProductAPIError):
    """Raised when a well-formed id matches no record."""

    def __init__(
        self,
        resource: str = "product",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)


class DatabaseError(ProductAPIError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always the generic
    "Internal server error"; `context` holds the driver error for the logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ── Error message formatting ──────────────────────────────────────────────

def _field_name(error: Mapping[str, Any]) -> str:
    # FastAPI prefixes request locations ("body", "query", "path")
    loc = [str(part) for part in error.get("loc", ())]
    if loc and loc[0] in {"body", "query", "path"}:
        loc = loc[1:]
    return ".".join(loc) or "body"


def describe_errors(errors: Iterable[Mapping[str, Any]], prefix: str) -> str:
    """Join pydantic error dicts into one line: '<prefix>: field: msg, ...'."""
    parts = [f"{_field_name(err)}: {err.get('msg', 'invalid value')}" for err in errors]
    if not parts:
        return prefix
    return f"{prefix}: " + ", ".join(parts)
