import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from alias_proxy.config import ProxyConfig, load_config
from alias_proxy.forwarder import Forwarder
from alias_proxy.host_map import HostMap
from alias_proxy.route import ProxyContext, router
from alias_proxy.telemetry import configure_tracing, instrument_app
from alias_proxy.vars import CONFIG_PATH


def build_context(
    config: ProxyConfig,
    logger: Optional[logging.Logger] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProxyContext:
    logger = logger or logging.getLogger("uvicorn.error")
    return ProxyContext(
        config=config,
        host_map=HostMap(config.host_rules),
        forwarder=Forwarder(config.upstream_proxy, logger=logger, transport=transport),
        logger=logger,
    )


def create_app(
    config: Optional[ProxyConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the proxy application. Without an explicit config, it is loaded
    from CONFIG_PATH at startup and a broken file stops the server.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = build_context(config or load_config(CONFIG_PATH), transport=transport)
        app.state.proxy = ctx
        try:
            yield
        finally:
            await ctx.forwarder.aclose()

    configure_tracing()
    # Every path belongs to the proxied origins, so no docs routes
    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.include_router(router)
    instrument_app(app)
    return app
