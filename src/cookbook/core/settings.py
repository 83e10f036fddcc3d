"""Runtime configuration for the cookbook service.

Every option maps to an environment variable (or a `.env` entry) of the
same upper-case name.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service, database and entity-resolution options."""

    # Application metadata
    app_name: str = Field(default="Cookbook", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./cookbook.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    sqlite_busy_timeout_seconds: float = Field(
        default=30.0,
        alias="SQLITE_BUSY_TIMEOUT_SECONDS",
    )

    # Entity resolution
    id_allocation_attempts: int = Field(default=5, ge=1, alias="ID_ALLOCATION_ATTEMPTS")
    fuzzy_match_enabled: bool = Field(default=True, alias="FUZZY_MATCH_ENABLED")
    fuzzy_match_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        alias="FUZZY_MATCH_THRESHOLD",
    )
    suggestion_limit_default: int = Field(default=20, alias="SUGGESTION_LIMIT_DEFAULT")
    suggestion_limit_max: int = Field(default=100, alias="SUGGESTION_LIMIT_MAX")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def sqlalchemy_url(self) -> str:
        """Return the active database URL with an explicit psycopg 3 driver.

        Bare ``postgres://`` and ``postgresql://`` URLs would otherwise select
        psycopg2, which is not a dependency.
        """
        url = self.effective_database_url
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the configured URL, or the test URL when testing is switched on."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
