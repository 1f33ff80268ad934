import asyncio
import contextlib
import json
import logging
from contextlib import asynccontextmanager

import httpx

from careerpilot.ai.cache import ResultCache
from careerpilot.ai.client import ProviderClient
from careerpilot.ai.factory import ProviderRegistry
from careerpilot.analytics.db import init_db, purge_old_records
from careerpilot.core.config import settings
from careerpilot.integrations.github import GitHubClient
from careerpilot.services.generation_service import GuidanceEngine

logger = logging.getLogger(__name__)


def build_engine(http_client: httpx.AsyncClient) -> tuple[GuidanceEngine, ProviderRegistry]:
    registry = ProviderRegistry.from_settings(settings)
    engine = GuidanceEngine(
        ProviderClient(http_client, timeout_s=settings.ai_timeout_s),
        registry,
        ResultCache(settings.result_cache_capacity),
        max_retries=settings.ai_max_retries,
    )
    return engine, registry


@asynccontextmanager
async def lifespan(app):
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.ai_timeout_s))
    engine, registry = build_engine(http_client)
    app.state.engine = engine
    app.state.registry = registry
    app.state.github = GitHubClient(http_client)
    logger.info(json.dumps({"event": "providers_configured", "providers": registry.describe()}))

    init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover - purge failures must not stop the app
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    try:
        yield
    finally:
        stop_event.set()
        if not purge_task.done():
            purge_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await purge_task
        await http_client.aclose()
