import functools

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IDCS_SCOPE = "urn:opc:resource:consumer::all"


class HttpTimeouts(BaseModel):
    """Timeout configuration for outbound HTTP calls."""

    token: float = 15.0
    workflow: float = 20.0

    @field_validator("token", "workflow")
    @classmethod
    def validate_positive_float(cls, v: float, info) -> float:
        """Ensure timeout values are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive, got {v}")
        return v


class LimitsConfig(BaseModel):
    """Configuration for input limits."""

    max_action_value_size: int = 4096  # Max JSON payload in a button value
    max_private_metadata_size: int = 3000  # Slack view private_metadata limit


class Config(BaseSettings):
    """
    Application configuration loaded from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Slack configuration
    SLACK_BOT_TOKEN: str = ""
    SLACK_APP_TOKEN: str = ""  # Socket Mode when set, HTTP mode otherwise
    SLACK_SIGNING_SECRET: str = ""
    PORT: int = 3000

    # OAuth2 client-credentials (IDCS)
    IDCS_TOKEN_URL: str = ""
    IDCS_CLIENT_ID: str = ""
    IDCS_CLIENT_SECRET: str = ""
    IDCS_SCOPE: str = DEFAULT_IDCS_SCOPE

    # Workflow engine REST trigger (full URL, query string is appended)
    OIC_REST_ENDPOINT: str = ""

    # HTTP timeout overrides from environment
    IDCS_TOKEN_TIMEOUT: float = 15.0
    OIC_REQUEST_TIMEOUT: float = 20.0

    MAX_ACTION_VALUE_SIZE: int = 4096

    LOG_LEVEL: str = Field(default="INFO")

    @functools.cached_property
    def timeouts(self) -> HttpTimeouts:
        """Build HttpTimeouts from environment variables."""
        return HttpTimeouts(
            token=self.IDCS_TOKEN_TIMEOUT,
            workflow=self.OIC_REQUEST_TIMEOUT,
        )

    @functools.cached_property
    def limits(self) -> LimitsConfig:
        return LimitsConfig(max_action_value_size=self.MAX_ACTION_VALUE_SIZE)

    @property
    def socket_mode(self) -> bool:
        return bool(self.SLACK_APP_TOKEN)

    def validate_required(self) -> list[str]:
        """Validate required configuration."""
        errors = []
        if not self.SLACK_BOT_TOKEN:
            errors.append("SLACK_BOT_TOKEN is required")
        if not self.SLACK_SIGNING_SECRET:
            errors.append("SLACK_SIGNING_SECRET is required")
        if not self.IDCS_TOKEN_URL:
            errors.append("IDCS_TOKEN_URL is required")
        if not self.IDCS_CLIENT_ID or not self.IDCS_CLIENT_SECRET:
            errors.append("IDCS_CLIENT_ID and IDCS_CLIENT_SECRET are required")
        if not self.OIC_REST_ENDPOINT:
            errors.append("OIC_REST_ENDPOINT is required")
        return errors


config = Config()
