# Routes package init
"""
Product API — Routes Package
=============================

Route Inventory:
    - health.py:    GET    /                  (liveness, uptime)
                    GET    /health            (readiness, database ping)
    - products.py:  POST   /products          (create)
                    GET    /products          (list, newest first)
                    GET    /products/{id}     (get one)
                    PUT    /products/{id}     (partial update)
                    DELETE /products/{id}     (delete)

Routes are thin: they hand the body / path id to ProductService and wrap the
result with `ok()`. Anything unmatched falls through to the route-not-found
handler in main.py.
"""
