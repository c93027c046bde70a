"""Shared logging utilities."""

import json
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "gateway.log"

# Bot API URLs embed the token: /bot<id>:<secret>/ and /file/bot<id>:<secret>/
_BOT_TOKEN_RE = re.compile(r"/bot(\d+):([A-Za-z0-9_-]+)")


def redact_url(url: str) -> str:
    """Mask a bot token embedded in a Telegram URL."""
    return _BOT_TOKEN_RE.sub(lambda m: f"/bot{m.group(1)}:{_mask(m.group(2))}", url)


def describe_update(update: Any) -> str:
    """Short summary of a Telegram update: its kind and chat."""
    if not isinstance(update, dict):
        return "?"
    kind = next((k for k in update if k != "update_id"), "?")
    payload = update.get(kind)
    chat_id = None
    if isinstance(payload, dict):
        chat = payload.get("chat")
        if not isinstance(chat, dict) and isinstance(payload.get("message"), dict):
            chat = payload["message"].get("chat")
        if isinstance(chat, dict):
            chat_id = chat.get("id")
    return f"{kind} chat={chat_id}" if chat_id is not None else kind


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    body: Any,
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "body": body,
    }
    return _write_json(log_root / "incoming" / path.strip("/").replace("/", "_"), payload)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    CLI_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    line = format_log_line(timestamp, level, message, **extra) + "\n"
    with CLI_LOG_FILE.open("a") as f:
        f.write(line)


def format_log_line(timestamp: str, level: str, message: str, **extra: Any) -> str:
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    return line


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        lowered = key.lower()
        if "token" in lowered or "authorization" in lowered or "cookie" in lowered:
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:3] + "..." + value[-3:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
