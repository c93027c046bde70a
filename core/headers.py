"""Header construction for upstream requests and relayed responses."""

from collections.abc import Mapping

RELAYED_RESPONSE_HEADERS = ("content-type", "content-disposition", "content-length")


class HeaderBuilder:
    """Build outbound headers and filter upstream response headers."""

    def build_proxy_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Pass caller headers through, asking for an unencoded body unless told otherwise."""
        upstream = dict(headers)
        if not any(key.lower() == "accept-encoding" for key in upstream):
            # Raw bytes are relayed, so they must match the upstream content-length.
            upstream["Accept-Encoding"] = "identity"
        return upstream

    def build_json_headers(self) -> dict[str, str]:
        """Headers for Bot API calls and webhook forwards."""
        return {"Content-Type": "application/json"}

    def relayed_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Copy only the allow-listed response headers that are present."""
        relayed: dict[str, str] = {}
        for name in RELAYED_RESPONSE_HEADERS:
            value = headers.get(name)
            if value is not None:
                relayed[name] = value
        return relayed

    def attachment_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Headers for a forced file download."""
        relayed = {
            "content-type": headers.get("content-type") or "application/octet-stream",
            "content-disposition": "attachment",
        }
        length = headers.get("content-length")
        if length is not None:
            relayed["content-length"] = length
        return relayed
