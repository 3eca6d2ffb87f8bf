"""
Stellar Federation Handlers

This module adapts the federation protocol to HTTP. It provides two public endpoints:

- GET /.well-known/stellar.toml - discovery document advertising the resolver URL
- GET /.federation - the resolver itself (``type=name`` queries)

Both endpoints are readable from any origin, as the Stellar protocol requires.
Resolution happens in ``FederationResolver``; the handler only maps its result to a
status code and JSON body. Faults raised by the user directory become a generic
500 response, are reported to Sentry and count against the readiness gauge.
"""

import json
import logging
import traceback
from aiohttp import web
import aiohttp_jinja2
import sentry_sdk

from org.stellarpress.federation.app.config import (
    FederationResolverAppKey,
    HealthGaugeAppKey,
    MetricsClientAppKey,
    SettingsAppKey,
)
from org.stellarpress.federation.app.cors import get_cors_headers
from org.stellarpress.federation.protocol.discovery import STELLAR_TOML_CONTENT_TYPE
from org.stellarpress.federation.protocol.result import (
    FederationError,
    FederationResult,
)

logger = logging.getLogger(__name__)


def result_outcome(result: FederationResult) -> str:
    if isinstance(result, FederationError):
        return result.code.value
    return "success"


async def handle_stellar_toml(request: web.Request):
    settings = request.app[SettingsAppKey]
    response = await aiohttp_jinja2.render_template_async(
        "stellar.toml",
        request,
        context={
            "federation_name": settings.federation_name,
            "federation_server": settings.federation_server,
        },
    )
    response.content_type = STELLAR_TOML_CONTENT_TYPE
    response.headers.update(get_cors_headers(request.path, settings.federation_path))
    return response


async def handle_federation(request: web.Request):
    settings = request.app[SettingsAppKey]
    resolver = request.app[FederationResolverAppKey]
    metrics_client = request.app[MetricsClientAppKey]
    headers = get_cors_headers(request.path, settings.federation_path)

    try:
        result = await resolver.resolve(
            request.query.get("type"), request.query.get("q")
        )
    except Exception as e:
        logger.error(
            f"Unexpected error in handle_federation: {type(e).__name__}: {str(e)}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )
        sentry_sdk.capture_exception(e)
        await request.app[HealthGaugeAppKey].record_fault()
        metrics_client.increment(
            "federation.lookup.fault", 1, tag_dict={"exception": type(e).__name__}
        )

        if settings.debug:
            response_body = json.dumps(
                {
                    "error": "Internal Server Error",
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "traceback": traceback.format_exc(),
                }
            )
        else:
            response_body = json.dumps(
                {"error": "Internal Server Error", "error_type": type(e).__name__}
            )

        raise web.HTTPInternalServerError(
            body=response_body,
            content_type="application/json",
            headers=headers,
        )

    metrics_client.increment(
        "federation.lookup.count", 1, tag_dict={"outcome": result_outcome(result)}
    )
    return web.json_response(result.body(), status=result.status, headers=headers)
