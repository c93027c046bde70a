"""Test doubles for the gateway: a recording logger, a mock upstream and chunked bodies."""

from typing import Any, Callable

import httpx

TOKEN = "123456:TEST-token_abcdefgh"
WEBHOOK = "https://n8n.example.test/webhook/telegram"
API = f"https://api.telegram.org/bot{TOKEN}"


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self) -> None:
        self.updates: list[tuple[Any, int | None]] = []
        self.outbound: list[tuple[str, Any, int]] = []
        self.relays: list[tuple[str, str, int, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_update(self, update: Any, status: int | None) -> None:
        self.updates.append((update, status))

    def log_outbound(self, method: str, chat_id: Any, status: int) -> None:
        self.outbound.append((method, chat_id, status))

    def log_relay(self, method: str, url: str, status: int, *, route: str = "proxy") -> None:
        self.relays.append((method, url, status, route))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


class ChunkedStream(httpx.AsyncByteStream):
    """Upstream body that yields chunks one by one and can fail part way."""

    def __init__(self, chunks: list[bytes], fail_after: int | None = None) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.produced = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            if self.fail_after is not None and self.produced >= self.fail_after:
                raise httpx.ReadError("connection reset by upstream")
            self.produced += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class MockUpstream:
    """Callable for httpx.MockTransport that records outbound requests."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.handler(request)

    def respond(self, response: httpx.Response) -> None:
        self.handler = lambda request: response

    def fail(self, exc: Exception) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        self.handler = handler
