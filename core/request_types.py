"""Shared request data types."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from urllib.parse import urlsplit

from core.exceptions import ValidationError


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    route_name: str
    target_url: str
    headers: dict[str, str]
    body: dict[str, Any] | None = None
    content: bytes | None = None
    method: str = "POST"


class MediaKind(StrEnum):
    """Media types accepted by /send-file."""

    PHOTO = "photo"
    DOCUMENT = "document"
    AUDIO = "audio"
    VOICE = "voice"
    VIDEO = "video"


SEND_METHODS: dict[MediaKind, str] = {
    MediaKind.PHOTO: "sendPhoto",
    MediaKind.DOCUMENT: "sendDocument",
    MediaKind.AUDIO: "sendAudio",
    MediaKind.VOICE: "sendVoice",
    MediaKind.VIDEO: "sendVideo",
}


@dataclass(frozen=True)
class ProxyRequest:
    """Description of an arbitrary request to relay."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @classmethod
    def from_payload(cls, payload: Any) -> "ProxyRequest":
        """Validate a /proxy request body.

        Raises:
            ValidationError: before any network I/O is attempted.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        url = payload.get("url")
        if not url:
            raise ValidationError("Missing url")
        if not isinstance(url, str) or not _is_absolute_http(url):
            raise ValidationError("Invalid url")

        method = payload.get("method") or "GET"
        if not isinstance(method, str):
            raise ValidationError("method must be a string")

        headers = payload.get("headers") or {}
        if not isinstance(headers, dict):
            raise ValidationError("headers must be an object")

        forwarded = {str(k): str(v) for k, v in headers.items()}
        if not all(k.isascii() and v.isascii() for k, v in forwarded.items()):
            raise ValidationError("headers must be ASCII")

        return cls(
            url=url,
            method=method.upper(),
            headers=forwarded,
            body=payload.get("body"),
        )


@dataclass(frozen=True)
class MessageRequest:
    """Text message to send through the Bot API."""

    chat_id: Any
    text: str

    @classmethod
    def from_payload(cls, payload: Any) -> "MessageRequest":
        data = payload if isinstance(payload, dict) else {}
        chat_id, text = data.get("chat_id"), data.get("text")
        if not chat_id or not text:
            raise ValidationError("chat_id and text are required")
        return cls(chat_id=chat_id, text=text)


@dataclass(frozen=True)
class FileRequest:
    """Media attachment to send through the Bot API."""

    chat_id: Any
    kind: MediaKind
    file_url: str
    caption: str | None = None

    @property
    def api_method(self) -> str:
        return SEND_METHODS[self.kind]

    @classmethod
    def from_payload(cls, payload: Any) -> "FileRequest":
        data = payload if isinstance(payload, dict) else {}
        chat_id, kind, file_url = data.get("chat_id"), data.get("type"), data.get("file_url")
        if not chat_id or not kind or not file_url:
            raise ValidationError("chat_id, type and file_url are required")
        try:
            media_kind = MediaKind(kind)
        except ValueError:
            raise ValidationError(f"Unsupported type: {kind}") from None
        return cls(
            chat_id=chat_id,
            kind=media_kind,
            file_url=file_url,
            caption=data.get("caption") or None,
        )


def _is_absolute_http(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)
