"""Cart Service Configuration"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront Cart"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    environment: str = "development"
    cors_origins: list[str] = ["*"]

    # Blob storage
    storage_backend: str = "memory"  # "memory" or "local"
    storage_dir: str = "./data"
    bucket_name: str = "storefront-carts"
    public_base_url: str = "https://storage.googleapis.com"

    # Guest session cookie
    cart_cookie_name: str = "cart_session_id"
    cart_cookie_max_age: int = 60 * 60 * 24 * 30

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies are only issued in production"""
        return self.environment == "production"

    def cart_url(self, path: str) -> str:
        """Externally addressable URL of a cart document"""
        return f"{self.public_base_url.rstrip('/')}/{self.bucket_name}/{path}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
