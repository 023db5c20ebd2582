"""
Type definitions for request signing functionality

This module provides the enums, constants and data classes used to build
HTTP Signatures (draft-cavage style, ``rsa-sha256``) for outbound requests.
"""

from typing import Dict, List, Optional, Union, Any, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import FedisignSDKError

if TYPE_CHECKING:
    from .signer import Signer

# Synthetic signing-only header; signed first, never transmitted
REQUEST_TARGET = '(request-target)'


class HttpMethod(str, Enum):
    """HTTP methods supported for outbound requests"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, method: Union[str, 'HttpMethod']) -> 'HttpMethod':
        """Parse a method name case-insensitively"""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise SigningError(
                f"Unsupported HTTP method: {method}",
                SigningErrorCodes.INVALID_METHOD,
                {"method": method}
            ) from None


class SignatureAlgorithm(str, Enum):
    """Signature algorithm types"""
    RSA_SHA256 = "rsa-sha256"


class KeyIdFormat(str, Enum):
    """How the keyId of a signature identifies the signing actor"""
    ACCT = "acct"
    URI = "uri"


@dataclass
class SigningContext:
    """
    Signing context attached to a pending request

    Attributes:
        signer: Capability producing signatures and the keyId
        header_names: Header names covered by the signature, in signing order
    """
    signer: 'Signer'
    header_names: List[str] = field(default_factory=list)


class SigningError(FedisignSDKError):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Request errors
    INVALID_URL = "INVALID_URL"
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_HEADERS = "INVALID_HEADERS"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
    DIGEST_CALCULATION_FAILED = "DIGEST_CALCULATION_FAILED"


# Type aliases for convenience
RequestBody = Union[str, bytes, None]
