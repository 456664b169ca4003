"""Custom exception hierarchy for the HTTPS proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class UpstreamError(ProxyError):
    """Raised when the upstream API cannot be reached or misbehaves.

    Attributes:
        message: Error message
        status_code: HTTP status code from upstream (optional)
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream request times out."""


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the upstream."""


class InvalidUpstreamJSON(UpstreamError):
    """Upstream response body is not valid JSON."""


class ClientBodyError(ProxyError):
    """Inbound request body could not be read."""
