"""Request preparation and response shaping for the forwarding pipeline."""

from collections.abc import Iterable

import httpx
from fastapi import Response
from fastapi.responses import JSONResponse

from core import cors
from core.config import Config
from core.exceptions import InvalidUpstreamJSON
from core.headers import HeaderBuilder
from core.request_types import PreparedRequest
from core.target import build_target_url

BODY_METHODS = frozenset({"POST", "PUT"})


class ForwardingService:
    """Turn inbound requests into upstream requests and back."""

    def __init__(self, config: Config, header_builder: HeaderBuilder) -> None:
        self._config = config
        self._headers = header_builder

    def prepare(
        self,
        method: str,
        path: str,
        query: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None = None,
    ) -> PreparedRequest:
        """Build the upstream request for one inbound request."""
        return PreparedRequest(
            method=method,
            target_url=build_target_url(self._config.upstream.base_url, path, query),
            headers=self._headers.build_upstream_headers(headers),
            body=body if method in BODY_METHODS else None,
        )

    def build_response(self, upstream: httpx.Response) -> Response:
        """Re-encode the upstream JSON body with CORS headers attached."""
        try:
            data = upstream.json()
        except ValueError as e:
            raise InvalidUpstreamJSON(
                f"Invalid JSON from upstream: {e}",
                status_code=upstream.status_code,
            ) from e

        overrides = cors.response_headers(self._config.cors)
        overrides["Content-Type"] = "application/json"

        response = JSONResponse(content=data, status_code=upstream.status_code)
        for key, value in self._headers.copy_response_headers(
            upstream.headers.multi_items(), replaced=overrides
        ):
            response.headers.append(key, value)
        response.headers.update(overrides)
        return response

    def build_preflight_response(self) -> Response:
        return Response(status_code=204, headers=cors.preflight_headers(self._config.cors))

    def build_error_response(self, message: str, status_code: int = 500) -> Response:
        return JSONResponse(
            content={"error": message},
            status_code=status_code,
            headers=cors.response_headers(self._config.cors),
        )
