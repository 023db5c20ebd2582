"""
Configuration management for fedisign Python SDK
"""

from .client_config import (
    ClientConfig,
    DEFAULT_USER_AGENT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_BODY_LIMIT,
    get_default_config,
    set_default_config,
    configure_logging,
)

__all__ = [
    'ClientConfig',
    'DEFAULT_USER_AGENT',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_WRITE_TIMEOUT',
    'DEFAULT_READ_TIMEOUT',
    'DEFAULT_MAX_REDIRECTS',
    'DEFAULT_BODY_LIMIT',
    'get_default_config',
    'set_default_config',
    'configure_logging',
]
