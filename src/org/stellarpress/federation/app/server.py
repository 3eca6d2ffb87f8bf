import asyncio
import contextlib
import logging
from time import time
from typing import (
    Optional,
)
import jinja2
from aiohttp import web
import aiohttp_jinja2
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from org.stellarpress.federation.app.config import (
    DatabaseAppKey,
    DatabaseSessionMakerAppKey,
    FederationResolverAppKey,
    HealthGaugeAppKey,
    MetricsClientAppKey,
    Settings,
    SettingsAppKey,
    UserDirectoryAppKey,
)
from org.stellarpress.federation.app.handlers.federation import (
    handle_federation,
    handle_stellar_toml,
)
from org.stellarpress.federation.app.handlers.internal import (
    handle_internal_alive,
    handle_internal_ready,
)
from org.stellarpress.federation.app.metrics import (
    MetricsClient,
    create_metrics_client,
)
from org.stellarpress.federation.app.tasks import tick_health_task
from org.stellarpress.federation.directory.base import UserDirectory
from org.stellarpress.federation.directory.database import DatabaseUserDirectory
from org.stellarpress.federation.model.health import HealthGauge
from org.stellarpress.federation.protocol.discovery import STELLAR_TOML_PATH
from org.stellarpress.federation.protocol.resolver import FederationResolver

logger = logging.getLogger(__name__)


async def background_tasks(app):
    logger.info("Starting up")

    await app[MetricsClientAppKey].connect()
    tick_health = asyncio.create_task(tick_health_task(app))

    logger.info("Startup complete")

    yield

    logger.info("Shutting down background tasks")

    tick_health.cancel()
    with contextlib.suppress(asyncio.exceptions.CancelledError):
        await tick_health

    await app[MetricsClientAppKey].close()


async def database_engine(app):
    yield
    await app[DatabaseAppKey].dispose()


@web.middleware
async def sentry_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        raise e


@web.middleware
async def statsd_middleware(request: web.Request, handler):
    metrics_client = request.app[MetricsClientAppKey]
    prefix = request.app[SettingsAppKey].statsd_prefix
    request_method: str = request.method
    request_path = request.path

    start_time: float = time()
    response_status_code = 0

    try:
        response = await handler(request)
        response_status_code = response.status
        return response
    except web.HTTPException as e:
        response_status_code = e.status
        raise e
    except Exception as e:
        metrics_client.increment(
            f"{prefix}.server.request.exception",
            1,
            tag_dict={
                "exception": type(e).__name__,
                "path": request_path,
                "method": request_method,
            },
        )
        raise e
    finally:
        metrics_client.timer(
            f"{prefix}.server.request.time",
            time() - start_time,
            tag_dict={"path": request_path, "method": request_method},
        )
        metrics_client.increment(
            f"{prefix}.server.request.count",
            1,
            tag_dict={
                "path": request_path,
                "method": request_method,
                "status": response_status_code,
            },
        )


def create_app(
    settings: Settings,
    directory: Optional[UserDirectory] = None,
    metrics_client: Optional[MetricsClient] = None,
) -> web.Application:
    """
    Build the federation web application.

    Without an explicit ``directory`` the application connects to the PostgreSQL
    user directory named by ``settings.pg_dsn``. Without an explicit
    ``metrics_client`` one is created for ``settings.metrics_backend``.
    """
    app = web.Application(middlewares=[statsd_middleware, sentry_middleware])

    app[SettingsAppKey] = settings
    app[HealthGaugeAppKey] = HealthGauge()

    if metrics_client is None:
        metrics_client = create_metrics_client(
            settings.metrics_backend,
            host=settings.statsd_host,
            port=settings.statsd_port,
            debug=settings.debug,
        )
    app[MetricsClientAppKey] = metrics_client

    if directory is None:
        engine = create_async_engine(str(settings.pg_dsn))
        app[DatabaseAppKey] = engine
        database_session = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        app[DatabaseSessionMakerAppKey] = database_session
        directory = DatabaseUserDirectory(database_session)
        app.cleanup_ctx.append(database_engine)

    app[UserDirectoryAppKey] = directory
    app[FederationResolverAppKey] = FederationResolver(
        settings.site_host, directory, settings.account_identifier_key
    )

    app.add_routes([web.get(STELLAR_TOML_PATH, handle_stellar_toml)])
    app.add_routes(
        [web.get("/" + settings.federation_path.lstrip("/"), handle_federation)]
    )

    app.add_routes(
        [
            web.get("/internal/alive", handle_internal_alive),
            web.get("/internal/ready", handle_internal_ready),
        ]
    )

    _ = aiohttp_jinja2.setup(
        app,
        enable_async=True,
        loader=jinja2.PackageLoader("org.stellarpress.federation.app", "templates"),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
        keep_trailing_newline=True,
    )

    app.cleanup_ctx.append(background_tasks)

    return app


async def start_web_server(settings: Optional[Settings] = None):

    if settings is None:
        settings = Settings()  # type: ignore
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            send_default_pii=True,
            integrations=[AioHttpIntegration()]
        )

    logger.info(
        "Serving federation for %s at %s",
        settings.site_host,
        settings.federation_server,
    )
    return create_app(settings)
