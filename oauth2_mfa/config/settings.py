from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Settings shared by the MFA exchange handlers and the token server."""

    # Attach a console handler to the library logger instead of deferring
    # to the host application's logging configuration
    log_enabled: bool = False
    log_level: str = "INFO"

    # Token type reported in every successful token response
    token_type: str = "Bearer"

    # Request scope key holding the authenticated OAuth client
    user_property: str = Field("user", min_length=1)

    token_path: str = "/oauth/token"

    model_config = SettingsConfigDict(
        env_prefix="OAUTH2_MFA_", env_file=".env", env_file_encoding="utf-8"
    )


# Usage: instantiate once and inject as needed
settings = ExchangeSettings()


def get_settings() -> ExchangeSettings:
    """Get the active exchange settings."""
    return settings
