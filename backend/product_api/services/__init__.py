# Services package init
"""
Product API — Services Layer
=============================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - ProductService: validation, id parsing and CRUD for products
"""
