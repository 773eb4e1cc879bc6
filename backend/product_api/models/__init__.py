# Models package init
from product_api.models.product import Product

__all__ = ["Product"]
