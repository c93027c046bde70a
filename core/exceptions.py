"""Custom exception hierarchy for the Telegram gateway."""


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    status_code = 500


class ConfigurationError(GatewayError):
    """Raised when required startup configuration is missing or invalid."""


class ValidationError(GatewayError):
    """Raised when caller input is malformed or incomplete."""

    status_code = 400


class UpstreamError(GatewayError):
    """Raised when an outbound call fails.

    Attributes:
        message: Error message
        url: Target URL, already redacted (optional)
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UpstreamConnectError(UpstreamError):
    """Raised when the target cannot be reached or does not answer in time."""


class UpstreamStatusError(UpstreamError):
    """Raised when the target answers with a status the caller cannot use."""

    def __init__(self, message: str, status: int, url: str | None = None) -> None:
        super().__init__(message, url=url)
        self.status = status


class StreamTransferError(UpstreamError):
    """Raised when the upstream body stream fails after headers were relayed."""
