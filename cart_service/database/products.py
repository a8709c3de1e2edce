"""Storefront product catalog"""

from typing import Optional
from ..models.product import Product

# Hoodie line
PRODUCTS: dict[int, Product] = {
    1: Product(
        id=1,
        name="Midnight Classic Hoodie",
        description="Heavyweight cotton fleece pullover with kangaroo pocket.",
        price=65.00,
        image1="/images/hoodies/midnight-front.png",
        image2="/images/hoodies/midnight-back.png",
    ),
    2: Product(
        id=2,
        name="Gold Standard Zip Hoodie",
        description="Full-zip hoodie with embroidered chest logo.",
        price=80.00,
        image1="/images/hoodies/gold-front.png",
        image2="/images/hoodies/gold-back.png",
    ),
    3: Product(
        id=3,
        name="Stone Wash Oversized Hoodie",
        description="Relaxed drop-shoulder fit, garment dyed.",
        price=72.50,
        image1="/images/hoodies/stone-front.png",
        image2="/images/hoodies/stone-back.png",
    ),
    4: Product(
        id=4,
        name="Arctic White Hoodie",
        description="Brushed-back fleece in off-white with tonal print.",
        price=65.00,
        image1="/images/hoodies/arctic-front.png",
        image2="/images/hoodies/arctic-back.png",
    ),
    5: Product(
        id=5,
        name="Crimson Tech Hoodie",
        description="Lightweight performance knit with bonded seams.",
        price=95.00,
        image1="/images/hoodies/crimson-front.png",
        image2="/images/hoodies/crimson-back.png",
    ),
    6: Product(
        id=6,
        name="Forest Heritage Hoodie",
        description="Vintage washed hoodie with arched varsity lettering.",
        price=70.00,
        image1="/images/hoodies/forest-front.png",
        image2="/images/hoodies/forest-back.png",
    ),
    7: Product(
        id=7,
        name="Charcoal Essential Hoodie",
        description="Everyday midweight hoodie in heather charcoal.",
        price=55.00,
        image1="/images/hoodies/charcoal-front.png",
        image2="/images/hoodies/charcoal-back.png",
    ),
    8: Product(
        id=8,
        name="Sunset Gradient Hoodie",
        description="Dip-dyed gradient from amber to violet. Limited run.",
        price=110.00,
        image1="/images/hoodies/sunset-front.png",
        image2="/images/hoodies/sunset-back.png",
    ),
}


class ProductCatalog:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[int, Product]] = None):
        self.products = dict(products if products is not None else PRODUCTS)

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_all_products(self) -> list[Product]:
        """Get all products"""
        return list(self.products.values())


# Singleton instance
product_catalog = ProductCatalog()


def get_product_catalog() -> ProductCatalog:
    """FastAPI dependency returning the product catalog"""
    return product_catalog
