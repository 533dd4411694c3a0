"""Client configuration with environment variable loading.

Pydantic-based configuration for the Remote Chat Service client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _env_timeout() -> float:
    return float(os.getenv("API_TIMEOUT", "30"))


class ClientConfig(BaseModel):
    """Configuration for the chat service client.

    Attributes:
        api_base_url: Base URL of the REST API, without trailing slash.
        api_token: Bearer token sent with every request (None to send none).
        timeout: Request timeout in seconds.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:7000/api"),
        description="Base URL of the chat service API",
    )
    api_token: str | None = Field(
        default_factory=lambda: os.getenv("API_TOKEN") or None,
        description="Bearer token for the chat service",
    )
    timeout: float = Field(
        default_factory=_env_timeout,
        gt=0.0,
        le=300.0,
        description="Request timeout in seconds",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("api_token")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If API_BASE_URL or API_TIMEOUT is invalid.
    """
    return ClientConfig()
