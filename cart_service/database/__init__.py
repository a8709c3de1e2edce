# Storage modules

from .blobs import BlobStore, MemoryBlobStore, LocalBlobStore, create_blob_store
from .products import product_catalog, ProductCatalog, get_product_catalog
from .carts import cart_store, CartStore, cart_path, get_cart_store

__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "LocalBlobStore",
    "create_blob_store",
    "product_catalog",
    "ProductCatalog",
    "get_product_catalog",
    "cart_store",
    "CartStore",
    "cart_path",
    "get_cart_store",
]
