"""Upstream target URL construction."""

import httpx


def build_target_url(base_url: str, path: str, query: str = "") -> str:
    """Combine the upstream origin with the inbound path and query.

    Only scheme, host and port of ``base_url`` survive; its own path and
    query are replaced.
    """
    base = httpx.URL(base_url)
    target = f"{base.scheme}://{base.netloc.decode('ascii')}{path or '/'}"
    if query:
        target += f"?{query}"
    return str(httpx.URL(target))
