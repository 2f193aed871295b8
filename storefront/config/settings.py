from typing import List

from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DATABASE: str = os.getenv("MONGO_DATABASE", "storefront")

    PLATFORM_NAME: str = os.getenv("PLATFORM_NAME", "Eclat")
    CLIENT_ORIGIN: str = os.getenv("CLIENT_ORIGIN", "http://localhost:5173")

    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_LIFETIME_SECONDS: int = 3600
    PASSWORD_MIN_LENGTH: int = 6

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    RATE_LIMITING_ENABLED: bool = False

    # "mongo" keeps carts in the StorageEntry collection, "memory" in-process only
    CART_STORAGE_BACKEND: str = "mongo"
    CART_STORAGE_KEY: str = "cart"
    SESSION_COOKIE_NAME: str = "storefront_session"
    # Idle sessions are dropped from memory; their carts reload from storage
    SESSION_IDLE_TTL_SECONDS: int = 1800
    SESSION_REGISTRY_MAX_SIZE: int = 10000

    CHECKOUT_PROCESSING_DELAY_SECONDS: float = 2.0
    ORDER_REFERENCE_PREFIX: str = "ECL"
    DEFAULT_COUNTRY: str = "Nigeria"
    CURRENCY_SYMBOL: str = "₦"

    PRODUCT_LIST_LIMIT: int = 20
    RELATED_PRODUCTS_LIMIT: int = 4

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CLIENT_ORIGIN.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


# create a singleton instance
settings = Settings()
