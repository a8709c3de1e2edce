"""Shared fixtures for cart service tests"""

import httpx
import pytest
from fastapi.testclient import TestClient

from cart_service.core.config import Settings
from cart_service.core.errors import StorageFailure
from cart_service.database.blobs import BlobStore, MemoryBlobStore
from cart_service.database.carts import CartStore, get_cart_store
from cart_service.database.products import ProductCatalog, get_product_catalog
from cart_service.main import app as cart_app


class FailingBlobStore(BlobStore):
    """Blob store whose every operation fails"""

    async def exists(self, path: str) -> bool:
        raise StorageFailure(f"exists({path}) unavailable")

    async def download(self, path: str) -> bytes:
        raise StorageFailure(f"download({path}) unavailable")

    async def upload(self, path: str, data: bytes, content_type: str = "application/json") -> None:
        raise StorageFailure(f"upload({path}) unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="development", bucket_name="test-bucket")


@pytest.fixture
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def cart_store(blob_store: MemoryBlobStore, settings: Settings) -> CartStore:
    return CartStore(blob_store, settings)


@pytest.fixture
def catalog() -> ProductCatalog:
    return ProductCatalog()


@pytest.fixture
def app(cart_store: CartStore, catalog: ProductCatalog):
    cart_app.dependency_overrides[get_cart_store] = lambda: cart_store
    cart_app.dependency_overrides[get_product_catalog] = lambda: catalog
    yield cart_app
    cart_app.dependency_overrides.clear()


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def failing_client(app) -> TestClient:
    app.dependency_overrides[get_cart_store] = lambda: CartStore(FailingBlobStore())
    return TestClient(app)


@pytest.fixture
def asgi_transport(app) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=app)


@pytest.fixture
async def http_client(asgi_transport: httpx.ASGITransport):
    async with httpx.AsyncClient(transport=asgi_transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def other_device(asgi_transport: httpx.ASGITransport):
    """A second, independent client talking to the same service"""
    async with httpx.AsyncClient(transport=asgi_transport, base_url="http://testserver") as client:
        yield client
