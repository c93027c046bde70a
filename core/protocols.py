"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_update(self, update: Any, status: int | None) -> None: ...
    def log_outbound(self, method: str, chat_id: Any, status: int) -> None: ...
    def log_relay(self, method: str, url: str, status: int, *, route: str = "proxy") -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
