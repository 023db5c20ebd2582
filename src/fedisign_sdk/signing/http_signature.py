"""
HTTP Signatures (rsa-sha256) for outbound requests

Builds the signed string from an ordered header mapping and formats the
``Signature`` header that remote servers verify against the actor's public
key. Header order is part of the wire contract: the ``headers`` parameter
and the signed bytes enumerate the same names in the same order.
"""

import base64
import logging
from typing import Mapping

from .signer import Signer
from .types import SignatureAlgorithm, SigningError, SigningErrorCodes
from .utils import normalize_header_name

logger = logging.getLogger(__name__)

ALGORITHM = SignatureAlgorithm.RSA_SHA256


def signed_string(headers: Mapping[str, str]) -> str:
    """
    Build the string to sign.

    Args:
        headers: Ordered header mapping, ``(request-target)`` first

    Returns:
        str: ``"<lowercase name>: <value>"`` lines joined by newlines
    """
    return '\n'.join(f"{normalize_header_name(key)}: {value}" for key, value in headers.items())


def signed_headers(headers: Mapping[str, str]) -> str:
    """Lowercase header names joined by single spaces, in mapping order"""
    return ' '.join(normalize_header_name(key) for key in headers)


def sign(signer: Signer, headers: Mapping[str, str]) -> str:
    """
    Sign a header mapping and format the Signature header value.

    Args:
        signer: Signing capability
        headers: Ordered header mapping covered by the signature

    Returns:
        str: ``keyId="...",algorithm="rsa-sha256",headers="...",signature="..."``

    Raises:
        SigningError: If the header mapping is empty or signing fails
    """
    if not headers:
        raise SigningError(
            "Cannot sign an empty header set",
            SigningErrorCodes.INVALID_HEADERS
        )

    key_id = signer.identifier()
    names = signed_headers(headers)
    signature = base64.b64encode(signer.sign(signed_string(headers).encode('utf-8'))).decode('ascii')

    logger.debug(f"Signed headers [{names}] with keyId {key_id}")

    return (
        f'keyId="{key_id}",'
        f'algorithm="{ALGORITHM.value}",'
        f'headers="{names}",'
        f'signature="{signature}"'
    )
