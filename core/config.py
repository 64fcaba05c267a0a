"""
Application configuration.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class RedisSettings(BaseModel):
    url: Optional[str] = None
    max_connections: int = 10
    namespace: str = "checkout-payments"


class AppCredentialSettings(BaseModel):
    """Store-app OAuth credentials used by the auth callback."""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    token_url: str = "https://login.bigcommerce.com/oauth2/token"


class CheckoutSettings(BaseModel):
    # Storefront origin; successUrl / cancelUrl are built from it
    storefront_origin: str = "http://localhost:3000"
    session_backend: str = "memory"  # memory | redis
    session_ttl_seconds: int = 3600
    login_url: str = "/login.php"
    cart_url: str = "/cart.php"
    create_account_url: str = "/login.php?action=create_account"


class Settings(BaseSettings):
    """Project settings"""

    PROJECT_NAME: str = Field(default="Checkout Payment Extension")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=True)
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: Optional[str] = Field(default=None)

    redis: RedisSettings = Field(default_factory=RedisSettings)
    app: AppCredentialSettings = Field(default_factory=AppCredentialSettings)
    checkout: CheckoutSettings = Field(default_factory=CheckoutSettings)

    CORS_ORIGINS: list = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # Request body logging
    LOG_REQUEST_BODY_ENABLE_BY_DEFAULT: bool = Field(default=True)
    LOG_REQUEST_BODY_MAX_BYTES: int = Field(default=2048)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """Accept a JSON list or a comma separated string."""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v


settings = Settings()
