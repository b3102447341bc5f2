"""
Product Proxy Service configuration
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the product proxy directory path
PRODUCT_PROXY_DIR = Path(__file__).parent.parent.parent
ENV_FILE = PRODUCT_PROXY_DIR / ".env"


class ProxySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Product Proxy Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Service specific
    SERVICE_NAME: str = "product-proxy"
    API_PREFIX: str = "/api/products"

    # Upstream product collection
    UPSTREAM_BASE_URL: str = "https://api.restful-api.dev"
    UPSTREAM_COLLECTION_PATH: str = "/objects"
    REQUEST_TIMEOUT: int = 30  # seconds

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = False
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_HEADERS: List[str] = ["*"]

    # Logging
    ENABLE_REQUEST_LOGGING: bool = True

    @property
    def file_logging_enabled(self) -> bool:
        return self.ENVIRONMENT.lower() in ["production", "staging"]


# Create a singleton instance
_settings_instance = None


def get_settings() -> ProxySettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = ProxySettings()
    return _settings_instance
