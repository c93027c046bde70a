"""HTTP proxying utilities for upstream requests."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
from fastapi.responses import StreamingResponse

from core.exceptions import (
    StreamTransferError,
    UpstreamConnectError,
    UpstreamError,
    UpstreamStatusError,
    ValidationError,
)
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import PreparedRequest, ProxyRequest
from ui.log_utils import redact_url


class UpstreamClient:
    """Send outbound requests, streaming response bodies straight to the caller.

    One ``httpx.AsyncClient`` is shared by every request; each relay checks out its
    own pooled connection and holds no other state.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        logger: RequestLogger,
        header_builder: HeaderBuilder,
    ) -> None:
        self._client = client
        self._logger = logger
        self._headers = header_builder

    async def relay(self, proxy_request: ProxyRequest) -> StreamingResponse:
        """Issue one upstream request and stream its response back.

        Only the response headers are awaited here. The body is copied chunk by
        chunk while the returned response is being sent.

        Raises:
            ValidationError: httpx cannot build a request from the description.
            UpstreamConnectError: the target failed before answering with headers.
        """
        try:
            req = self._client.build_request(
                proxy_request.method,
                proxy_request.url,
                headers=self._headers.build_proxy_headers(proxy_request.headers),
                json=proxy_request.body if proxy_request.has_body else None,
            )
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            raise ValidationError(f"Invalid request: {e}") from e
        response = await self._open(req, route="proxy")
        self._logger.log_relay(proxy_request.method, redact_url(proxy_request.url), response.status_code)

        return StreamingResponse(
            self._stream_body(response, route="proxy"),
            status_code=response.status_code,
            headers=self._headers.relayed_headers(response.headers),
        )

    async def stream_file(self, url: str) -> StreamingResponse:
        """Stream a file download as an attachment.

        Raises:
            UpstreamConnectError: the file server could not be reached.
            UpstreamStatusError: the file server answered with a non-2xx status.
        """
        response = await self._open(self._client.build_request("GET", url), route="telegram-file")
        if not response.is_success:
            await response.aclose()
            self._logger.log_error("telegram-file", response.status_code, f"GET {redact_url(url)}")
            raise UpstreamStatusError(
                "Failed to fetch file from Telegram",
                status=response.status_code,
                url=redact_url(url),
            )

        self._logger.log_relay("GET", redact_url(url), response.status_code, route="telegram-file")
        return StreamingResponse(
            self._stream_body(response, route="telegram-file"),
            status_code=response.status_code,
            headers=self._headers.attachment_headers(response.headers),
        )

    async def call_json(self, prepared: PreparedRequest) -> tuple[int, Any]:
        """Send a prepared request and decode its JSON reply.

        Raises:
            UpstreamConnectError: the target could not be reached.
            UpstreamError: the reply is not JSON.
        """
        response = await self._send(prepared)
        try:
            return response.status_code, response.json()
        except ValueError as e:
            self._logger.log_error(prepared.route_name, response.status_code, response.text[:200])
            raise UpstreamError(
                f"{prepared.route_name} returned invalid JSON: {e}",
                url=redact_url(prepared.target_url),
            ) from e

    async def forward(self, prepared: PreparedRequest) -> int:
        """Send a prepared request, returning only the status."""
        response = await self._send(prepared)
        if not response.is_success:
            self._logger.log_error(prepared.route_name, response.status_code, response.text[:200])
        return response.status_code

    async def _send(self, prepared: PreparedRequest) -> httpx.Response:
        try:
            return await self._client.request(
                prepared.method,
                prepared.target_url,
                headers=prepared.headers,
                json=prepared.body,
                content=prepared.content,
            )
        except httpx.TimeoutException as e:
            self._logger.log_error(prepared.route_name, 500, "Upstream timeout")
            raise UpstreamConnectError(f"Upstream timeout: {e}", url=redact_url(prepared.target_url)) from e
        except httpx.RequestError as e:
            self._logger.log_error(prepared.route_name, 500, redact_url(str(e)))
            raise UpstreamConnectError(
                f"Upstream connection error: {e}",
                url=redact_url(prepared.target_url),
            ) from e

    async def _open(self, req: httpx.Request, *, route: str) -> httpx.Response:
        """Send a request without reading its body."""
        url = redact_url(str(req.url))
        try:
            return await self._client.send(req, stream=True)
        except httpx.TimeoutException as e:
            self._logger.log_error(route, 500, f"Upstream timeout: {url}")
            raise UpstreamConnectError(f"Upstream timeout: {e}", url=url) from e
        except httpx.RequestError as e:
            self._logger.log_error(route, 500, f"{url}: {e}")
            raise UpstreamConnectError(f"Upstream connection error: {e}", url=url) from e

    async def _stream_body(self, response: httpx.Response, *, route: str) -> AsyncIterator[bytes]:
        """Relay raw body bytes, closing the upstream response however the copy ends."""
        try:
            async for chunk in response.aiter_raw():
                yield chunk
        except (httpx.HTTPError, httpx.StreamError) as e:
            # Status and headers are already on the wire; aborting is all that is left.
            self._logger.log_error(route, response.status_code, f"Stream aborted: {e}")
            raise StreamTransferError(
                f"Upstream stream aborted: {e}",
                url=redact_url(str(response.request.url)),
            ) from e
        finally:
            await response.aclose()
