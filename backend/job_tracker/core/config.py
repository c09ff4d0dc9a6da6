"""Settings, read from the environment (and ``.env``) by pydantic-settings.

Field names map to upper-case variables: ``pagination_max_limit`` is
PAGINATION_MAX_LIMIT, and so on. Invalid combinations fail at import.
"""

import uuid

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Shipped in docker-compose for local use; refused in production.
_INSECURE_DEFAULT_PASSWORD = "job_tracker_dev_password"  # nosec B105

# HS256 key floor in production: 32 bytes.
_MIN_AUTH_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # PostgreSQL
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "job_tracker"
    database_user: str = "job_tracker_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # Browser origins allowed to call the API with credentials
    allowed_origins: list[str] = ["http://localhost:3000"]

    environment: str = "development"
    log_level: str = "INFO"

    # Identity. With auth disabled every request belongs to default_user_id;
    # with it enabled the owner is the sub of the session cookie JWT.
    default_user_id: uuid.UUID | None = None
    auth_enabled: bool = False
    auth_secret: SecretStr = SecretStr("")
    auth_issuer: str = "job-tracker"
    auth_audience: str = "job-tracker"
    auth_cookie_name: str = "job-tracker.session-token"

    # Page sizes
    pagination_default_limit: int = 10
    pagination_max_limit: int = 200
    activity_log_default_limit: int = 50

    # slowapi limit string for bulk update / bulk delete
    rate_limit_bulk: str = "30/minute"
    rate_limit_enabled: bool = True

    @property
    def database_url(self) -> str:
        """asyncpg URL used by the application engine."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_page_sizes(self) -> "Settings":
        """All limits positive; the default page fits under the clamp."""
        if self.pagination_default_limit < 1 or self.pagination_max_limit < 1:
            msg = (
                "PAGINATION_DEFAULT_LIMIT and PAGINATION_MAX_LIMIT must be positive "
                f"(got {self.pagination_default_limit}, {self.pagination_max_limit})"
            )
            raise ValueError(msg)
        if self.pagination_default_limit > self.pagination_max_limit:
            msg = (
                "PAGINATION_DEFAULT_LIMIT cannot exceed PAGINATION_MAX_LIMIT "
                f"({self.pagination_default_limit} > {self.pagination_max_limit})"
            )
            raise ValueError(msg)
        if self.activity_log_default_limit < 1:
            msg = (
                "ACTIVITY_LOG_DEFAULT_LIMIT must be positive "
                f"(got {self.activity_log_default_limit})"
            )
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def check_cors(self) -> "Settings":
        """The session cookie needs credentialed CORS, which forbids '*'."""
        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must list explicit origins; a wildcard '*' "
                "cannot be combined with cookie credentials"
            )
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def check_production_secrets(self) -> "Settings":
        """Production refuses the dev password and weak or missing JWT keys."""
        if self.environment != "production":
            return self

        if self.database_password == _INSECURE_DEFAULT_PASSWORD:
            msg = (
                "Cannot use default database password in production; "
                "set DATABASE_PASSWORD"
            )
            raise ValueError(msg)

        if self.auth_enabled:
            secret = self.auth_secret.get_secret_value()
            if not secret:
                msg = "AUTH_SECRET must be set when AUTH_ENABLED=true in production"
                raise ValueError(msg)
            if len(secret) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters"
                )
                raise ValueError(msg)
        return self


settings = Settings()
