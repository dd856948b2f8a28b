"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT_JWT_SECRET = "commerflow-development-secret-change-me"

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class JWTConfig(BaseModel):
    """JSON Web Token signing configuration."""

    secret: str = Field(
        default=DEVELOPMENT_JWT_SECRET, alias="JWT_SECRET", description="HMAC secret used to sign access tokens"
    )
    expires_in: str = Field(
        default="24h", alias="JWT_EXPIRES_IN", description="Token lifetime (e.g. '30m', '24h', '7d', or seconds)"
    )
    issuer: str = Field(default="ecommerce-api", alias="JWT_ISSUER", description="Value of the 'iss' claim")
    audience: str = Field(default="ecommerce-users", alias="JWT_AUDIENCE", description="Value of the 'aud' claim")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM", description="Signing algorithm")

    model_config = {"populate_by_name": True}

    @property
    def lifetime(self) -> timedelta:
        """Token lifetime as a timedelta."""
        from commerflow.core.security import parse_duration

        return parse_duration(self.expires_in)


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
        description="Comma separated list of allowed CORS origins (use * for all)",
    )
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: str = Field(
        default="*", alias="CORS_ALLOW_METHODS", description="Comma separated HTTP methods (use * for all)"
    )
    allow_headers: str = Field(
        default="*", alias="CORS_ALLOW_HEADERS", description="Comma separated HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def origin_list(self) -> List[str]:
        return self._split(self.origins)

    @property
    def method_list(self) -> List[str]:
        return self._split(self.allow_methods)

    @property
    def header_list(self) -> List[str]:
        return self._split(self.allow_headers)


class AdminConfig(BaseModel):
    """Bootstrap administrator account configuration."""

    email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL", description="Administrator email address")
    password: str = Field(default="admin123", alias="ADMIN_PASSWORD", description="Administrator password")
    name: str = Field(default="Admin User", alias="ADMIN_NAME", description="Administrator display name")

    model_config = {"populate_by_name": True}


class PostgreSQLConfig(BaseModel):
    """PostgreSQL database configuration used when DATABASE_URL is not set explicitly."""

    db: str = Field(default="ecommerce_db", alias="POSTGRES_DB", description="PostgreSQL database name")
    user: str = Field(default="postgres", alias="POSTGRES_USER", description="PostgreSQL database user")
    password: str = Field(default="postgres", alias="POSTGRES_PASSWORD", description="PostgreSQL database password")
    host: str = Field(default="localhost", alias="POSTGRES_HOST", description="PostgreSQL database host address")
    port: int = Field(default=5432, alias="POSTGRES_PORT", description="PostgreSQL database port number")

    model_config = {"populate_by_name": True}

    def build_url(self) -> str:
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # CommerFlow Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="CommerFlow server host address to bind to",
        alias="COMMERFLOW_SERVER_HOST",
    )
    server_port: int = Field(
        default=3001,
        description="CommerFlow server port number",
        alias="COMMERFLOW_SERVER_PORT",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment (development, production, test)",
        alias="COMMERFLOW_ENV",
    )
    log_level: str = Field(
        default="INFO",
        description="CommerFlow server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="COMMERFLOW_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="LOG_FORMAT",
    )
    log_file_dir: str = Field(default="logs", description="Directory for the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Write DEBUG logs to a file as well", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="Async connection URL for the application database",
        alias="DATABASE_URL",
    )
    postgres_db: str = Field(default="ecommerce_db", alias="POSTGRES_DB")
    postgres_user: str = Field(default="postgres", alias="POSTGRES_USER")
    postgres_password: str = Field(default="postgres", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    # =====================================================================
    # Authentication Configuration
    # =====================================================================
    jwt_secret: str = Field(default=DEVELOPMENT_JWT_SECRET, alias="JWT_SECRET")
    jwt_expires_in: str = Field(default="24h", alias="JWT_EXPIRES_IN")
    jwt_issuer: str = Field(default="ecommerce-api", alias="JWT_ISSUER")
    jwt_audience: str = Field(default="ecommerce-users", alias="JWT_AUDIENCE")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    admin_email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL")
    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")
    admin_name: str = Field(default="Admin User", alias="ADMIN_NAME")

    # =====================================================================
    # HTTP Configuration
    # =====================================================================
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: str = Field(default="*", alias="CORS_ALLOW_METHODS")
    cors_allow_headers: str = Field(default="*", alias="CORS_ALLOW_HEADERS")

    cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="Lifetime of cached catalogue responses in seconds",
        alias="CACHE_TTL_SECONDS",
    )

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def jwt(self) -> JWTConfig:
        """Get JWT configuration from environment variables."""
        return JWTConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def admin(self) -> AdminConfig:
        """Get bootstrap administrator configuration from environment variables."""
        return AdminConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def postgres(self) -> PostgreSQLConfig:
        """Get PostgreSQL configuration from environment variables."""
        return PostgreSQLConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def resolved_database_url(self) -> str:
        """DATABASE_URL when provided, otherwise a URL assembled from the POSTGRES_* values."""
        return self.database_url or self.postgres.build_url()

    def validate_for_environment(self) -> None:
        """
        Check settings that must be provided explicitly outside development.

        Raises:
            ValueError: If production runs without DATABASE_URL or with the development JWT secret.
        """
        if not self.is_production:
            return
        missing = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if not self.jwt_secret or self.jwt_secret == DEVELOPMENT_JWT_SECRET:
            missing.append("JWT_SECRET")
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


settings = Settings()
