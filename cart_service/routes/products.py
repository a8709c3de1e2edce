"""Product API routes for the storefront"""

from fastapi import APIRouter, Depends

from ..core.errors import NotFound
from ..database.products import ProductCatalog, get_product_catalog
from ..models.product import Product, ProductListResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(catalog: ProductCatalog = Depends(get_product_catalog)):
    """List all products that can be added to a cart"""
    products = catalog.get_all_products()
    return ProductListResponse(products=products, total=len(products))


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Get a product by ID"""
    product = catalog.get_product(product_id)
    if not product:
        raise NotFound(f"Unknown product {product_id}", public_message="Product not found.")
    return product
