"""
Unit tests for client configuration and logging setup
"""

import json
import logging

import pytest

from fedisign_sdk.config import (
    ClientConfig,
    DEFAULT_BODY_LIMIT,
    configure_logging,
    get_default_config,
    set_default_config,
)
from fedisign_sdk.exceptions import ValidationError
from fedisign_sdk.version import __version__


class TestClientConfig:
    """Test configuration defaults and validation"""

    def test_defaults(self):
        config = ClientConfig()

        assert config.user_agent == f"fedisign-python-sdk/{__version__}"
        assert (config.connect_timeout, config.write_timeout, config.read_timeout) == (15.0, 20.0, 20.0)
        assert config.max_redirects == 2
        assert config.body_limit == DEFAULT_BODY_LIMIT == 1048576
        assert config.http_client_proxy == {}
        assert config.local_domain is None

    @pytest.mark.parametrize("kwargs, message", [
        ({"user_agent": ""}, "User agent cannot be empty"),
        ({"connect_timeout": 0}, "connect_timeout must be positive"),
        ({"read_timeout": -1}, "read_timeout must be positive"),
        ({"max_redirects": -1}, "max_redirects must be non-negative"),
        ({"body_limit": 0}, "body_limit must be positive"),
        ({"log_level": "CHATTY"}, "Invalid log level"),
        ({"http_client_proxy": "http://proxy"}, "http_client_proxy must be a dictionary"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            ClientConfig(**kwargs)

    def test_log_level_normalized(self):
        assert ClientConfig(log_level="debug").log_level == "DEBUG"

    def test_from_json(self):
        config = ClientConfig.from_json(json.dumps({
            "local_domain": "example.social",
            "http_client_proxy": {"proxies": {"https": "http://proxy.local:3128"}},
            "body_limit": 2048,
        }))

        assert config.local_domain == "example.social"
        assert config.http_client_proxy["proxies"]["https"] == "http://proxy.local:3128"
        assert config.body_limit == 2048

    def test_from_json_rejects_unknown_keys(self):
        with pytest.raises(ValidationError, match="Unknown configuration keys") as exc_info:
            ClientConfig.from_json('{"retries": 5}')

        assert exc_info.value.details["unknown_keys"] == ["retries"]

    def test_from_json_rejects_invalid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_json("{not json")

        assert exc_info.value.error_code == "PARSE_ERROR"

    def test_from_json_rejects_non_object(self):
        with pytest.raises(ValidationError):
            ClientConfig.from_json("[1, 2]")

    def test_from_file(self, tmp_path):
        path = tmp_path / "fedisign.json"
        path.write_text(json.dumps({"user_agent": "from-file/1.0"}), encoding="utf-8")

        assert ClientConfig.from_file(path).user_agent == "from-file/1.0"

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig.from_file(tmp_path / "missing.json")

        assert exc_info.value.error_code == "FILE_ERROR"

    def test_round_trip_dict(self):
        config = ClientConfig(local_domain="example.social")
        assert ClientConfig.from_dict(config.to_dict()) == config


class TestDefaultConfig:
    """Test the process-wide configuration"""

    def test_lazily_created(self):
        first = get_default_config()
        assert first is get_default_config()

    def test_replace_and_reset(self):
        custom = ClientConfig(user_agent="custom/1.0")
        set_default_config(custom)
        assert get_default_config() is custom

        set_default_config(None)
        assert get_default_config() is not custom


class TestConfigureLogging:
    """Test SDK logging setup"""

    def test_attaches_handler_once(self):
        handler = logging.NullHandler()
        try:
            sdk_logger = configure_logging("debug", handler=handler)
            configure_logging("debug", handler=handler)

            assert sdk_logger.name == "fedisign_sdk"
            assert sdk_logger.level == logging.DEBUG
            assert sdk_logger.handlers.count(handler) == 1
        finally:
            logging.getLogger("fedisign_sdk").removeHandler(handler)

    def test_uses_config_level(self):
        set_default_config(ClientConfig(log_level="ERROR"))
        handler = logging.NullHandler()
        try:
            assert configure_logging(handler=handler).level == logging.ERROR
        finally:
            logging.getLogger("fedisign_sdk").removeHandler(handler)
