"""
Product API — Application Package Initializer
==============================================

What: Marks the `product_api` directory as a Python package.
Who:  Imported by uvicorn (`product_api.main:app`), Alembic, and pytest.

Architecture Note:
    The service is a thin layered CRUD backend:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs → service calls → envelope
    ├─────────────────────────────────────┤
    │         Services (Gateway)          │  ← validation, id parsing, persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← explicit async engine handle
    └─────────────────────────────────────┘

    Every failure travels up as a tagged exception (see exceptions.py) and is
    turned into an envelope by the handlers registered in main.py.
"""

__version__ = "1.0.0"
