"""
Client configuration for outbound federated requests

Holds the process-wide settings the request builder reads: the client
identifier sent as User-Agent, outbound proxy options, timeouts, the
redirect cap and the default response size limit.
"""

import json
import logging
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ValidationError
from ..version import __version__

DEFAULT_USER_AGENT = f"fedisign-python-sdk/{__version__}"
DEFAULT_CONNECT_TIMEOUT = 15.0
DEFAULT_WRITE_TIMEOUT = 20.0
DEFAULT_READ_TIMEOUT = 20.0
DEFAULT_MAX_REDIRECTS = 2
DEFAULT_BODY_LIMIT = 1024 * 1024

_LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


@dataclass
class ClientConfig:
    """
    Configuration for outbound signed requests.

    Attributes:
        user_agent: Fixed client identifier sent on every request
        local_domain: Domain of this server, used to build local actor URIs
        http_client_proxy: Transport options merged into every request
            (e.g. ``{"proxies": {"https": "http://proxy:3128"}}``)
        connect_timeout: Seconds allowed to establish a connection
        write_timeout: Seconds allowed per write on the socket
        read_timeout: Seconds allowed per read on the socket
        max_redirects: Maximum number of redirects followed
        body_limit: Default cap in bytes for bounded response reads
        log_level: Level applied by ``configure_logging``
    """
    user_agent: str = DEFAULT_USER_AGENT
    local_domain: Optional[str] = None
    http_client_proxy: Dict[str, Any] = field(default_factory=dict)
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    body_limit: int = DEFAULT_BODY_LIMIT
    log_level: str = 'WARNING'

    def __post_init__(self):
        """Validate client configuration."""
        if not self.user_agent:
            raise ValidationError("User agent cannot be empty")

        if not isinstance(self.http_client_proxy, dict):
            raise ValidationError("http_client_proxy must be a dictionary")

        for name in ('connect_timeout', 'write_timeout', 'read_timeout'):
            if getattr(self, name) <= 0:
                raise ValidationError(f"{name} must be positive")

        if self.max_redirects < 0:
            raise ValidationError("max_redirects must be non-negative")

        if self.body_limit <= 0:
            raise ValidationError("body_limit must be positive")

        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValidationError(f"Invalid log level: {self.log_level}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClientConfig':
        """Build configuration from a dictionary, rejecting unknown keys"""
        if not isinstance(data, dict):
            raise ValidationError("Configuration must be a JSON object", "INVALID_FORMAT")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                "INVALID_FORMAT",
                {"unknown_keys": unknown}
            )

        return cls(**data)

    @classmethod
    def from_json(cls, json_string: str) -> 'ClientConfig':
        """Load configuration from a JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'ClientConfig':
        """Load configuration from a JSON file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ValidationError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
        return cls.from_json(json_string)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_default_config: Optional[ClientConfig] = None


def get_default_config() -> ClientConfig:
    """Get the process-wide client configuration, creating it on first use"""
    global _default_config
    if _default_config is None:
        _default_config = ClientConfig()
    return _default_config


def set_default_config(config: Optional[ClientConfig]) -> None:
    """Replace the process-wide client configuration (``None`` resets it)"""
    global _default_config
    _default_config = config


def configure_logging(level: Optional[str] = None, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """
    Attach a handler to the SDK logger.

    Args:
        level: Log level name (defaults to the process-wide config level)
        handler: Handler to attach (defaults to a stream handler)

    Returns:
        logging.Logger: The configured ``fedisign_sdk`` logger
    """
    sdk_logger = logging.getLogger('fedisign_sdk')
    sdk_logger.setLevel((level or get_default_config().log_level).upper())

    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))

    if handler not in sdk_logger.handlers:
        sdk_logger.addHandler(handler)

    return sdk_logger
