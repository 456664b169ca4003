"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.forwarding import ForwardingService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    forwarding = ForwardingService(config, HeaderBuilder())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client)
        app.state.forwarding_service = forwarding
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Ollama HTTPS Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.exception_handler(Exception)
    async def listener_error(request: Request, exc: Exception):
        message = str(exc) or type(exc).__name__
        logger.log_error(500, message)
        return forwarding.build_error_response(message)

    async def proxy(request: Request):
        return await handle_proxy(request, logger)

    # No method list: every verb reaches the handler.
    app.router.add_route("/{path:path}", proxy, methods=None, include_in_schema=False)

    return app
