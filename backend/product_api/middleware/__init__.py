# Middleware package init
"""
Product API — Middleware Package
=================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Response ← [Request ID] ← [Logging] ← Route Handler

    The request id is set before the logging middleware reads it, and added
    to the response headers on the way out.
"""
