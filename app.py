"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import (
    handle_health,
    handle_healthz,
    handle_proxy,
    handle_send,
    handle_send_file,
    handle_telegram_file,
    handle_telegram_update,
)
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.targets import TelegramTarget, WebhookTarget
from services.upstream import UpstreamClient

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``http_client`` is given the caller owns it; otherwise one is opened
    for the lifetime of the app.
    """
    header_builder = HeaderBuilder()

    def install(app: FastAPI, client: httpx.AsyncClient) -> None:
        app.state.upstream_client = UpstreamClient(client, logger, header_builder)
        app.state.telegram_target = TelegramTarget(config, header_builder)
        app.state.webhook_target = WebhookTarget(config, header_builder)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if http_client is not None:
            yield
            return
        limits = httpx.Limits(
            max_connections=config.upstream.max_connections,
            max_keepalive_connections=config.upstream.max_keepalive_connections,
        )
        client = httpx.AsyncClient(timeout=config.upstream.timeout, limits=limits)
        install(app, client)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Telegram Gateway", version="0.1.0", lifespan=lifespan)
    if http_client is not None:
        install(app, http_client)

    @app.get("/")
    async def health():
        return handle_health()

    @app.get("/healthz")
    async def healthz():
        return handle_healthz()

    @app.api_route("/proxy", methods=PROXY_METHODS)
    async def proxy(request: Request):
        return await handle_proxy(request, config)

    @app.post("/telegram")
    async def telegram_update(request: Request):
        return await handle_telegram_update(request, config, logger)

    @app.post("/send")
    async def send_message(request: Request):
        return await handle_send(request, config, logger)

    @app.post("/send-file")
    async def send_file(request: Request):
        return await handle_send_file(request, config, logger)

    @app.get("/telegram-file")
    async def telegram_file(request: Request):
        return await handle_telegram_file(request)

    return app
