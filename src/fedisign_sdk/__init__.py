"""
fedisign Python SDK
Signed outbound HTTP requests for federated servers
"""

from .version import __version__
from .exceptions import (
    FedisignSDKError,
    ValidationError,
    InvalidActorError,
    TransportError,
    ResponseTooLargeError,
    RSAKeyError,
)
from .config import (
    ClientConfig,
    get_default_config,
    set_default_config,
    configure_logging,
)
from .actors import (
    Actor,
    uri_for,
)
from .signing import (
    REQUEST_TARGET,
    HttpMethod,
    KeyIdFormat,
    SignatureAlgorithm,
    SigningContext,
    SigningError,
    Signer,
    ActorSigner,
    identifier,
    calculate_digest,
    signed_string,
    signed_headers,
    sign,
)
from .transport import (
    TransportAdapter,
    TransportResponse,
    RequestsTransport,
)
from .response import BoundedResponse
from .request import Request

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'FedisignSDKError',
    'ValidationError',
    'InvalidActorError',
    'TransportError',
    'ResponseTooLargeError',
    'RSAKeyError',
    'SigningError',
    # Configuration
    'ClientConfig',
    'get_default_config',
    'set_default_config',
    'configure_logging',
    # Actors
    'Actor',
    'uri_for',
    # Signing
    'REQUEST_TARGET',
    'HttpMethod',
    'KeyIdFormat',
    'SignatureAlgorithm',
    'SigningContext',
    'Signer',
    'ActorSigner',
    'identifier',
    'calculate_digest',
    'signed_string',
    'signed_headers',
    'sign',
    # Transport
    'TransportAdapter',
    'TransportResponse',
    'RequestsTransport',
    # Requests and responses
    'BoundedResponse',
    'Request',
]
