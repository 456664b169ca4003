"""CORS header sets derived from the configured policy."""

from core.config import CorsSettings


def response_headers(cors: CorsSettings) -> dict[str, str]:
    """Headers attached to every proxied (non-preflight) response."""
    return {
        "Access-Control-Allow-Origin": cors.allow_origin,
        "Access-Control-Allow-Methods": ", ".join(cors.allow_methods),
        "Access-Control-Allow-Headers": ", ".join(cors.allow_headers),
        "Access-Control-Allow-Credentials": "true" if cors.allow_credentials else "false",
    }


def preflight_headers(cors: CorsSettings) -> dict[str, str]:
    """Headers for the OPTIONS short-circuit response."""
    headers = response_headers(cors)
    headers["Access-Control-Max-Age"] = str(cors.max_age)
    return headers
