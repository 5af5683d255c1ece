"""Configuration management for the payment proxy."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from payment_proxy.models.payment import Credentials

PRODUCTION_API_BASE = "https://api.airwallex.com"
SANDBOX_API_BASE = "https://api-demo.airwallex.com"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at startup and handed to ``create_app``. Instances are frozen so
    request handlers can share one without copying.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Airwallex
    airwallex_client_id: str = Field(default="", description="Airwallex client ID")
    airwallex_api_key: str = Field(default="", description="Airwallex API key")
    airwallex_base_url: str | None = Field(
        default=None, description="Override for the environment-selected API base URL"
    )
    airwallex_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for every outbound Airwallex call"
    )
    airwallex_webhook_secret: str | None = Field(
        default=None, description="Webhook secret; enables signature verification when set"
    )
    webhook_tolerance_seconds: int = Field(
        default=300, description="Max age of a signed webhook timestamp"
    )

    # Token cache
    token_cache_enabled: bool = Field(
        default=False, description="Reuse login tokens across requests until near expiry"
    )
    token_refresh_margin_seconds: int = Field(
        default=60, description="Refresh cached tokens this long before they expire"
    )
    token_cache_default_ttl_seconds: int = Field(
        default=1500, description="Cache lifetime when the login response has no expiry"
    )

    # Orders
    product_name: str = Field(
        default="Vehicle History Report", description="Line item name sent with every order"
    )

    # CORS
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Origins allowed to make credentialed cross-origin requests",
    )

    # Service Configuration
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=5000, description="Listen port")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="Environment name")
    service_name: str = Field(default="payment-proxy", description="Service name")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def api_base_url(self) -> str:
        """Airwallex base URL: explicit override, else live API in production."""
        if self.airwallex_base_url:
            return self.airwallex_base_url.rstrip("/")
        return PRODUCTION_API_BASE if self.is_production else SANDBOX_API_BASE

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.airwallex_client_id,
            api_key=self.airwallex_api_key,
        )

    def missing_credentials(self) -> list[str]:
        """Names of credential variables that are unset."""
        missing = []
        if not self.airwallex_client_id:
            missing.append("AIRWALLEX_CLIENT_ID")
        if not self.airwallex_api_key:
            missing.append("AIRWALLEX_API_KEY")
        return missing


# Global settings instance
settings = Settings()
