"""FastAPI route handlers."""

import json
import time
from json import JSONDecodeError
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from core.config import Config
from core.exceptions import UpstreamError, UpstreamStatusError, ValidationError
from core.protocols import RequestLogger
from core.request_types import FileRequest, MessageRequest, PreparedRequest, ProxyRequest
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB

HEALTH_TEXT = "Telegram Gateway is running ✅"


def _json_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _parse_json_body(
    request: Request,
    config: Config,
    *,
    empty: Any = None,
) -> Any:
    """Parse request body as JSON, return the body or an error Response."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        return _json_error("Request body too large", 413)

    if not raw_body.strip() and empty is not None:
        return empty

    try:
        body = json.loads(raw_body)
    except (JSONDecodeError, ValueError) as e:
        return _json_error(f"Invalid JSON: {e}", 400)

    if config.server.debug:
        write_incoming_log(request.method, request.url.path, dict(request.headers), body)
    return body


def handle_health() -> PlainTextResponse:
    """Static liveness text."""
    return PlainTextResponse(HEALTH_TEXT)


def handle_healthz() -> JSONResponse:
    return JSONResponse({"ok": True, "time": int(time.time())})


async def handle_proxy(request: Request, config: Config) -> Response | StreamingResponse:
    """Handle /proxy: relay an arbitrary request and stream the answer back."""
    body = await _parse_json_body(request, config, empty={})
    if isinstance(body, Response):
        return body

    try:
        proxy_request = ProxyRequest.from_payload(body)
        return await request.app.state.upstream_client.relay(proxy_request)
    except (ValidationError, UpstreamError) as e:
        return _json_error(str(e), e.status_code)


async def handle_telegram_update(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> PlainTextResponse:
    """Forward a Telegram update to the automation webhook."""
    raw_body = await request.body()
    if config.server.debug:
        text_body = raw_body.decode("utf-8", errors="replace")
        write_incoming_log(request.method, request.url.path, dict(request.headers), text_body)
    try:
        update = json.loads(raw_body)
    except (JSONDecodeError, ValueError) as e:
        logger.log_error("telegram", 400, f"Invalid JSON update: {e}")
        return PlainTextResponse("Invalid JSON", status_code=400)

    prepared = request.app.state.webhook_target.prepare_update(raw_body)
    try:
        status = await request.app.state.upstream_client.forward(prepared)
    except UpstreamError:
        logger.log_update(update, None)
        return PlainTextResponse("ERROR", status_code=500)

    logger.log_update(update, status)
    return PlainTextResponse("OK", status_code=200)


async def handle_send(request: Request, config: Config, logger: RequestLogger) -> Response:
    """Send a text message through the Bot API and echo its reply."""
    body = await _parse_json_body(request, config, empty={})
    if isinstance(body, Response):
        return body

    try:
        message = MessageRequest.from_payload(body)
    except ValidationError as e:
        return _json_error(str(e), e.status_code)

    prepared = request.app.state.telegram_target.prepare_message(message)
    return await _call_telegram(request, prepared, message.chat_id, logger)


async def handle_send_file(request: Request, config: Config, logger: RequestLogger) -> Response:
    """Send a photo/document/audio/voice/video by URL and echo the reply."""
    body = await _parse_json_body(request, config, empty={})
    if isinstance(body, Response):
        return body

    try:
        file_request = FileRequest.from_payload(body)
    except ValidationError as e:
        return _json_error(str(e), e.status_code)

    prepared = request.app.state.telegram_target.prepare_file(file_request)
    return await _call_telegram(request, prepared, file_request.chat_id, logger)


async def handle_telegram_file(request: Request) -> Response:
    """Stream a file from Telegram storage as an attachment."""
    file_path = request.query_params.get("file_path")
    if not file_path:
        return PlainTextResponse("Missing file_path", status_code=400)

    url = request.app.state.telegram_target.file_url(file_path)
    try:
        return await request.app.state.upstream_client.stream_file(url)
    except UpstreamStatusError as e:
        return PlainTextResponse(str(e), status_code=500)
    except UpstreamError:
        return PlainTextResponse("File proxy error", status_code=500)


async def _call_telegram(
    request: Request,
    prepared: PreparedRequest,
    chat_id: Any,
    logger: RequestLogger,
) -> Response:
    try:
        status, data = await request.app.state.upstream_client.call_json(prepared)
    except UpstreamError:
        return _json_error("Telegram send failed", 500)

    logger.log_outbound(prepared.route_name, chat_id, status)
    # Always 200; Telegram's ok flag carries the outcome.
    return JSONResponse(data)
