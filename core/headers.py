"""Header handling for upstream requests and client responses."""

from collections.abc import Iterable

# Never forwarded upstream.
STRIPPED_REQUEST_HEADERS = frozenset({"host", "referer", "origin"})
# Recomputed by the HTTP client for the body actually sent.
REQUEST_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})
# Describe the upstream connection or encoding, not the re-serialized JSON
# body; the listener writes its own Date and Server.
SKIPPED_RESPONSE_HEADERS = frozenset(
    {
        "content-length",
        "content-encoding",
        "transfer-encoding",
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "upgrade",
        "date",
        "server",
    }
)


class HeaderBuilder:
    """Build upstream request headers and client response headers."""

    def build_upstream_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Drop Host/Referer/Origin and force a JSON Accept header."""
        upstream = []
        for key, value in headers:
            key_lower = key.lower()
            if key_lower in STRIPPED_REQUEST_HEADERS or key_lower in REQUEST_FRAMING_HEADERS:
                continue
            if key_lower == "accept":
                continue
            upstream.append((key, value))
        upstream.append(("Accept", "application/json"))
        return upstream

    def copy_response_headers(
        self,
        headers: Iterable[tuple[str, str]],
        replaced: Iterable[str] = (),
    ) -> list[tuple[str, str]]:
        """Copy upstream response headers, keeping duplicates such as Set-Cookie."""
        skipped = SKIPPED_RESPONSE_HEADERS | {key.lower() for key in replaced}
        return [(key, value) for key, value in headers if key.lower() not in skipped]
