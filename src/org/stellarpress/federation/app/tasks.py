import asyncio
import logging
from typing import NoReturn
from aiohttp import web

from org.stellarpress.federation.app.config import HealthGaugeAppKey

logger = logging.getLogger(__name__)

HEALTH_DRAIN_INTERVAL = 10


async def tick_health_task(
    app: web.Application, interval: float = HEALTH_DRAIN_INTERVAL
) -> NoReturn:
    """
    Drain one recorded fault from the health gauge every ``interval`` seconds.
    """

    logger.info("Starting health gauge task")

    health_gauge = app[HealthGaugeAppKey]
    while True:
        await health_gauge.drain()
        await asyncio.sleep(interval)
