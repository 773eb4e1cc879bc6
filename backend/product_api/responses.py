"""
Product API — Response Envelope
================================

What:  The two constructors every handler uses to answer a request.
How:   Both wrap the payload in {status, message, data} and return a
       JSONResponse; pydantic models inside `data` are encoded with their
       serialization aliases (createdAt, updatedAt).

    ok("Get product successful", product)        → 200 {"status": true, ...}
    ok("Create product successful", product, 201)
    fail("Product not found", 404)               → 404 {"status": false, ...}
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(status: bool, message: str, data: Any = None) -> dict:
    return {"status": status, "message": message, "data": jsonable_encoder(data)}


def ok(message: str = "Success", data: Any = None, code: int = 200) -> JSONResponse:
    """Success envelope with the given HTTP status code."""
    return JSONResponse(status_code=code, content=envelope(True, message, data))


def fail(
    message: str = "Fail",
    code: int = 400,
    data: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Failure envelope with the given HTTP status code."""
    return JSONResponse(status_code=code, content=envelope(False, message, data), headers=headers)
