"""
Configuration Module for the Federation Service

This module defines the configuration system for the StellarPress Federation service,
using Pydantic for settings validation and dependency injection through AppKeys.

The Settings class is loaded from environment variables with defaults suitable for
development. All application components access settings and shared resources
through typed AppKeys rather than module globals.

Key configuration areas include:
- Site identity (the URL whose host the resolver answers for)
- Federation protocol details (document name, resolver path, attribute key)
- Database connection
- Monitoring and error reporting
"""

from typing import Final, Optional
import logging
from urllib.parse import urlparse
from pydantic import (
    AliasChoices,
    Field,
    field_validator,
    PostgresDsn,
)
from pydantic_settings import BaseSettings
from aiohttp import web
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    AsyncSession,
)

from org.stellarpress.federation.app.metrics import MetricsClient
from org.stellarpress.federation.directory.base import UserDirectory
from org.stellarpress.federation.model.health import HealthGauge
from org.stellarpress.federation.protocol.discovery import federation_server_url
from org.stellarpress.federation.protocol.resolver import FederationResolver


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the federation service.

    Environment variables are mapped to fields automatically. The database
    connection string can be set with either PG_DSN or DATABASE_URL.
    """

    # Environment and debugging settings
    debug: bool = False
    """
    Enable debug mode for verbose logging and detailed error responses.
    Set with DEBUG=true environment variable.
    """

    # Network and site identification settings
    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    site_url: str = "https://localhost"
    """
    Public URL of the site. Its host is the only domain the resolver answers
    for, and the advertised resolver URL is built from it.
    Set with SITE_URL environment variable.
    """

    # Federation protocol settings
    federation_name: str = "StellarPress"
    """Name shown in the header comment of stellar.toml."""

    federation_path: str = ".federation"
    """
    Path of the resolver endpoint relative to the site URL.
    Set with FEDERATION_PATH environment variable.
    """

    account_identifier_key: str = "stellar_address"
    """
    User metadata key holding a user's Stellar account identifier.
    Set with ACCOUNT_IDENTIFIER_KEY environment variable.
    """

    # Monitoring and error reporting
    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    # Database connection
    pg_dsn: PostgresDsn = Field(
        "postgresql+asyncpg://postgres:password@db/federation",
        validation_alias=AliasChoices("pg_dsn", "database_url"),
    )  # type: ignore
    """
    PostgreSQL connection string for the user directory.
    Set with PG_DSN or DATABASE_URL environment variables.
    """

    # Monitoring and observability settings
    metrics_backend: str = "telegraf"
    """
    Metrics backend, either 'telegraf' or 'none'.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """

    statsd_prefix: str = "federation"
    """
    Prefix for all StatsD metrics from this service.
    Set with STATSD_PREFIX environment variable.
    """

    @field_validator("site_url", mode="after")
    @classmethod
    def validate_site_url(cls, v: str) -> str:
        """
        Require an absolute http(s) URL with a host.

        Raises:
            ValueError: If the URL has no http(s) scheme or no host
        """
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError("site_url must be an absolute http(s) URL with a host")
        return v

    @property
    def site_host(self) -> str:
        """Lower-cased host of the site URL."""
        return (urlparse(self.site_url).hostname or "").lower()

    @property
    def federation_server(self) -> str:
        """Absolute https URL of the resolver endpoint."""
        return federation_server_url(self.site_url, self.federation_path)


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

DatabaseAppKey: Final = web.AppKey("database", AsyncEngine)
"""AppKey for accessing the SQLAlchemy async database engine"""

DatabaseSessionMakerAppKey: Final = web.AppKey(
    "database_session_maker", async_sessionmaker[AsyncSession]
)
"""AppKey for accessing the SQLAlchemy async session factory"""

UserDirectoryAppKey: Final = web.AppKey("user_directory", UserDirectory)
"""AppKey for accessing the user directory"""

FederationResolverAppKey: Final = web.AppKey(
    "federation_resolver", FederationResolver
)
"""AppKey for accessing the federation resolver"""

HealthGaugeAppKey: Final = web.AppKey("health_gauge", HealthGauge)
"""AppKey for accessing the health monitoring gauge"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for the metrics client"""
