"""Settings loading and its validators."""

import pytest
from pydantic import ValidationError

from job_tracker.core.config import _INSECURE_DEFAULT_PASSWORD, Settings

_SECURE_DB_PASSWORD = "correct-horse-battery-staple-7"
_STRONG_SECRET = "s" * 48
_PRODUCTION = "production"


class TestDefaults:
    """Default values."""

    def test_pagination_defaults(self):
        """10 rows per page, 200 at most, 50 activity entries."""
        s = Settings()
        assert s.pagination_default_limit == 10
        assert s.pagination_max_limit == 200
        assert s.activity_log_default_limit == 50

    def test_database_url_uses_asyncpg(self):
        """The runtime URL targets the asyncpg driver."""
        s = Settings(database_host="db", database_port=5433, database_name="jt")
        assert s.database_url.startswith("postgresql+asyncpg://")
        assert s.database_url.endswith("@db:5433/jt")

    def test_env_file_keys_without_a_setting_ignored(self, tmp_path):
        """Leftover deployment keys (API_HOST, API_PORT) don't break loading."""
        env_file = tmp_path / ".env"
        env_file.write_text("API_HOST=0.0.0.0\nAPI_PORT=8000\nPAGINATION_MAX_LIMIT=150\n")
        s = Settings(_env_file=env_file)
        assert s.pagination_max_limit == 150
        assert not hasattr(s, "api_host")


class TestPaginationValidation:
    """Pagination bounds must be consistent."""

    def test_default_above_max_rejected(self):
        """The default page size can't exceed the clamp."""
        with pytest.raises(ValidationError, match="cannot exceed"):
            Settings(pagination_default_limit=300, pagination_max_limit=200)

    def test_non_positive_rejected(self):
        """Zero is not a page size."""
        with pytest.raises(ValidationError, match="must be positive"):
            Settings(pagination_default_limit=0)

    def test_activity_limit_positive(self):
        """The activity default must be positive."""
        with pytest.raises(ValidationError, match="ACTIVITY_LOG_DEFAULT_LIMIT"):
            Settings(activity_log_default_limit=0)


class TestCorsValidation:
    """Wildcard origins are incompatible with credentialed requests."""

    def test_wildcard_rejected(self):
        """'*' is rejected in every environment."""
        with pytest.raises(ValidationError, match="wildcard"):
            Settings(allowed_origins=["*"])


class TestProductionChecks:
    """Production refuses the dev password and weak JWT keys."""

    def test_dev_password_fine_outside_production(self):
        s = Settings(database_password=_INSECURE_DEFAULT_PASSWORD)
        assert s.environment == "development"
        assert s.database_password == _INSECURE_DEFAULT_PASSWORD

    def test_dev_password_refused(self):
        """Exactly one error, naming the password problem."""
        with pytest.raises(ValidationError) as caught:
            Settings(
                environment=_PRODUCTION,
                database_password=_INSECURE_DEFAULT_PASSWORD,
            )
        (only,) = caught.value.errors()
        assert "Cannot use default database password in production" in only["msg"]

    @pytest.mark.parametrize(
        ("secret", "match"),
        [("", "AUTH_SECRET must be set"), ("short", "at least 32")],
    )
    def test_hosted_mode_secret(self, secret, match):
        with pytest.raises(ValidationError, match=match):
            Settings(
                environment=_PRODUCTION,
                database_password=_SECURE_DB_PASSWORD,
                auth_enabled=True,
                auth_secret=secret,
            )

    def test_local_mode_needs_no_secret(self):
        s = Settings(environment=_PRODUCTION, database_password=_SECURE_DB_PASSWORD)
        assert s.auth_enabled is False

    def test_complete_production_config_loads(self):
        s = Settings(
            environment=_PRODUCTION,
            database_password=_SECURE_DB_PASSWORD,
            auth_enabled=True,
            auth_secret=_STRONG_SECRET,
        )
        assert s.auth_secret.get_secret_value() == _STRONG_SECRET
