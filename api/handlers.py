"""FastAPI route handlers."""

from urllib.parse import quote

from fastapi import Request, Response
from starlette.requests import ClientDisconnect

from core.exceptions import ClientBodyError, ProxyError
from core.protocols import RequestLogger
from services.forwarding import BODY_METHODS

# Reserved and already-escaped characters stay as the client sent them.
RAW_PATH_SAFE = "/%:@!$&'()*+,;="


async def _read_body(request: Request) -> bytes | None:
    """Read the inbound body for methods that carry one."""
    if request.method not in BODY_METHODS:
        return None
    try:
        return await request.body()
    except ClientDisconnect as e:
        raise ClientBodyError("Client disconnected while sending body") from e


def _request_path(request: Request) -> str:
    """Path as sent by the client, percent-encoding intact.

    Raw bytes outside ASCII are percent-encoded byte for byte.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return quote(raw_path.split(b"?", 1)[0], safe=RAW_PATH_SAFE)
    return quote(request.url.path, safe=RAW_PATH_SAFE)


async def handle_proxy(request: Request, logger: RequestLogger) -> Response:
    """Forward one request upstream, or answer a CORS preflight."""
    forwarding = request.app.state.forwarding_service
    path = request.url.path

    if request.method == "OPTIONS":
        logger.log_preflight(path)
        return forwarding.build_preflight_response()

    upstream = request.app.state.upstream_client
    try:
        body = await _read_body(request)
        prepared = forwarding.prepare(
            request.method,
            _request_path(request),
            request.url.query,
            request.headers.items(),
            body,
        )
        logger.log_forward(prepared.method, prepared.target_url, prepared.headers, prepared.body)

        response = await upstream.send(prepared)
        logger.log_response(request.method, path, response.status_code)

        return forwarding.build_response(response)
    except ProxyError as e:
        logger.log_error(500, str(e))
        return forwarding.build_error_response(str(e))
