"""
Application configuration using Pydantic Settings.

Loads environment variables for the listening port, the subscription
verify token and the shared app secret used for signature validation.
The settings object is frozen: it is built once at process entry and
handed to the application factory.
"""

from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Name of the application.
        debug: Enable debug mode (verbose payload logging, OpenAPI docs).
        api_host: Host to bind the API server.
        port: Port to bind the API server.
        verify_token: Token the platform echoes during the subscription handshake.
        app_secret: Shared secret for validating X-Hub-Signature-256 headers.
        reject_invalid_signatures: Answer 401 on a failed signature check
            instead of only logging it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application Settings
    app_name: str = Field(default="HubHook", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server Configuration
    api_host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="API server port",
        json_schema_extra={"env": "PORT"},
    )

    # Webhook Configuration
    verify_token: SecretStr = Field(
        default=SecretStr(""),
        description="Token expected in hub.verify_token during subscription",
        json_schema_extra={"env": "VERIFY_TOKEN"},
    )
    app_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Secret for validating webhook signatures",
        json_schema_extra={"env": "APP_SECRET"},
    )
    reject_invalid_signatures: bool = Field(
        default=False,
        description="Reject deliveries whose signature does not verify",
        json_schema_extra={"env": "REJECT_INVALID_SIGNATURES"},
    )

    @field_validator("verify_token", "app_secret", mode="before")
    @classmethod
    def strip_secret(cls, v: Any) -> Any:
        """Drop surrounding whitespace picked up from .env files or shells."""
        if isinstance(v, str):
            return v.strip()
        return v

    def missing_fields(self) -> list[str]:
        """Return the environment names of required secrets that are unset."""
        missing = []
        if not self.verify_token.get_secret_value():
            missing.append("VERIFY_TOKEN")
        if not self.app_secret.get_secret_value():
            missing.append("APP_SECRET")
        return missing


def load_settings(**overrides: Any) -> Settings:
    """
    Build the application settings.

    Called once at process entry. Keyword overrides take precedence
    over the environment, which keeps tests free of env mutation.

    Returns:
        Settings: The immutable settings instance.
    """
    return Settings(**overrides)
