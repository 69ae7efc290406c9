"""FastAPI host — binds cache refresh handlers for the lifetime of the process."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from cachebinder.config import BinderSettings
from cachebinder.domain.binder import DistributedCacheBinder
from cachebinder.domain.bus import EventBus
from cachebinder.domain.models import CacheCommand
from cachebinder.domain.routing import NotificationRouter
from cachebinder.services.messenger import ClusterMessenger, LocalCacheNode

logger = logging.getLogger(__name__)


def _setup_logging(settings: BinderSettings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: BinderSettings = app.state.settings
    binder: DistributedCacheBinder = app.state.binder

    binder.start(support_teardown=settings.support_teardown)
    yield
    # Without teardown support the handlers live until the process exits
    if settings.support_teardown:
        binder.stop()


def create_app(settings: BinderSettings | None = None) -> FastAPI:
    """Build the bus, messenger, router and binder and the app that hosts them."""
    settings = settings or BinderSettings()
    _setup_logging(settings)

    bus = EventBus()
    messenger = ClusterMessenger(
        supports_batch=settings.batch_invalidation,
        journal_size=settings.journal_size,
    )
    for i in range(settings.cluster_nodes):
        messenger.register(LocalCacheNode(name=f"node-{i}"))
    router = NotificationRouter(messenger)

    app = FastAPI(title="Distributed Cache Binder", lifespan=lifespan)
    app.state.settings = settings
    app.state.bus = bus
    app.state.messenger = messenger
    app.state.router = router
    app.state.binder = DistributedCacheBinder(bus=bus, router=router)

    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route(
        "/cache/journal",
        cache_journal,
        methods=["GET"],
        response_model=list[CacheCommand],
    )
    return app


# ── Routes ────────────────────────────────────────────────────────────


def health(request: Request) -> dict:
    """Report whether cache refresh handlers are bound."""
    state = request.app.state
    return {"bound": state.binder.is_bound, "nodes": len(state.messenger.nodes)}


def cache_journal(request: Request) -> list[CacheCommand]:
    """Return the most recent commands broadcast to the cluster."""
    return request.app.state.messenger.journal()


app = create_app()
