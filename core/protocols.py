"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_forward(
        self,
        method: str,
        target_url: str,
        headers: list[tuple[str, str]],
        body: bytes | None,
    ) -> None: ...
    def log_response(self, method: str, path: str, status: int) -> None: ...
    def log_preflight(self, path: str) -> None: ...
    def log_error(self, status: int, message: str) -> None: ...
