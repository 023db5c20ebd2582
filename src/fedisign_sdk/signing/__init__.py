"""
fedisign Python SDK - Request Signing Module

HTTP Signatures (rsa-sha256) for outbound federation requests: the signed
string, the Digest header and the Signature header.
"""

from .types import (
    REQUEST_TARGET,
    HttpMethod,
    SignatureAlgorithm,
    KeyIdFormat,
    SigningContext,
    SigningError,
    SigningErrorCodes,
)

from .utils import (
    calculate_digest,
    normalize_url,
    build_request_target,
    format_http_date,
    normalize_header_name,
)

from .signer import (
    Signer,
    ActorSigner,
    identifier,
)

from .http_signature import (
    signed_string,
    signed_headers,
    sign,
)

# Public API exports
__all__ = [
    # Types
    'REQUEST_TARGET',
    'HttpMethod',
    'SignatureAlgorithm',
    'KeyIdFormat',
    'SigningContext',
    'SigningError',
    'SigningErrorCodes',
    # Utilities
    'calculate_digest',
    'normalize_url',
    'build_request_target',
    'format_http_date',
    'normalize_header_name',
    # Signers
    'Signer',
    'ActorSigner',
    'identifier',
    # Signature engine
    'signed_string',
    'signed_headers',
    'sign',
]
