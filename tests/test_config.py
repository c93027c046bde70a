import pytest
from pydantic import ValidationError as PydanticValidationError

from core.config import load_config
from core.exceptions import ConfigurationError
from helpers import TOKEN, WEBHOOK

REQUIRED = {"TELEGRAM_TOKEN": TOKEN, "N8N_WEBHOOK": WEBHOOK}


def test_defaults():
    config = load_config(REQUIRED)

    assert config.server.port == 3000
    assert config.server.host == "0.0.0.0"
    assert config.server.debug is False
    assert config.upstream.timeout == 30.0
    assert config.webhook.url == WEBHOOK
    assert config.telegram.api_url == f"https://api.telegram.org/bot{TOKEN}"
    assert config.telegram.file_url == f"https://api.telegram.org/file/bot{TOKEN}"


@pytest.mark.parametrize("missing", ["TELEGRAM_TOKEN", "N8N_WEBHOOK"])
def test_missing_required_variable_fails_fast(missing):
    env = {k: v for k, v in REQUIRED.items() if k != missing}

    with pytest.raises(ConfigurationError, match="Missing TELEGRAM_TOKEN or N8N_WEBHOOK"):
        load_config(env)


def test_blank_required_variable_counts_as_missing():
    with pytest.raises(ConfigurationError):
        load_config({**REQUIRED, "TELEGRAM_TOKEN": "  "})


def test_optional_overrides():
    config = load_config(
        {
            **REQUIRED,
            "PORT": "8443",
            "HOST": "127.0.0.1",
            "PROXY_TIMEOUT": "2.5",
            "GATEWAY_DEBUG": "true",
            "TELEGRAM_API_BASE": "http://localhost:8081/",
        }
    )

    assert config.server.port == 8443
    assert config.server.host == "127.0.0.1"
    assert config.upstream.timeout == 2.5
    assert config.server.debug is True
    assert config.telegram.api_url == f"http://localhost:8081/bot{TOKEN}"


@pytest.mark.parametrize(("name", "value"), [("PORT", "http"), ("PORT", "70000"), ("PROXY_TIMEOUT", "0")])
def test_malformed_values_are_configuration_errors(name, value):
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config({**REQUIRED, name: value})


def test_config_is_immutable():
    config = load_config(REQUIRED)

    with pytest.raises(PydanticValidationError):
        config.server.port = 1
