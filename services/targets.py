"""Upstream target handlers for the Telegram Bot API and the automation webhook."""

from core.config import Config
from core.headers import HeaderBuilder
from core.request_types import FileRequest, MessageRequest, PreparedRequest


class TelegramTarget:
    """Telegram Bot API request preparation."""

    def __init__(self, config: Config, header_builder: HeaderBuilder) -> None:
        self._config = config
        self._headers = header_builder

    def method_url(self, method: str) -> str:
        return f"{self._config.telegram.api_url}/{method}"

    def file_url(self, file_path: str) -> str:
        """Download URL for a file_path returned by getFile."""
        return f"{self._config.telegram.file_url}/{file_path.lstrip('/')}"

    def prepare_message(self, message: MessageRequest) -> PreparedRequest:
        """Prepare sendMessage."""
        return PreparedRequest(
            "sendMessage",
            self.method_url("sendMessage"),
            self._headers.build_json_headers(),
            {"chat_id": message.chat_id, "text": message.text},
        )

    def prepare_file(self, request: FileRequest) -> PreparedRequest:
        """Prepare sendPhoto/sendDocument/... with the file passed by URL."""
        body = {"chat_id": request.chat_id, request.kind.value: request.file_url}
        if request.caption:
            body["caption"] = request.caption
        return PreparedRequest(
            request.api_method,
            self.method_url(request.api_method),
            self._headers.build_json_headers(),
            body,
        )


class WebhookTarget:
    """Automation webhook request preparation."""

    def __init__(self, config: Config, header_builder: HeaderBuilder) -> None:
        self._config = config
        self._headers = header_builder

    def prepare_update(self, raw_update: bytes) -> PreparedRequest:
        """Forward a Telegram update byte for byte."""
        return PreparedRequest(
            "webhook",
            self._config.webhook.url,
            self._headers.build_json_headers(),
            content=raw_update,
        )
