"""
Signer capability for HTTP Signatures

A signer is the narrow contract the signature engine needs: produce an
``rsa-sha256`` signature over a byte string and name the key it used.
"""

import logging
from abc import ABC, abstractmethod
from typing import Union

from ..actors import Actor, uri_for
from ..crypto.rsa import sign_message
from ..exceptions import InvalidActorError, RSAKeyError
from .types import KeyIdFormat, SigningError, SigningErrorCodes

logger = logging.getLogger(__name__)


def identifier(actor: Actor, key_id_format: Union[str, KeyIdFormat] = KeyIdFormat.ACCT) -> str:
    """
    Format the keyId identifying an actor's signing key.

    Args:
        actor: Signing actor
        key_id_format: ``"acct"`` for ``user@host``, ``"uri"`` for
            ``<actor uri>#main-key``

    Returns:
        str: keyId value

    Raises:
        ValueError: If the format is not recognized
    """
    key_id_format = KeyIdFormat(key_id_format)

    if key_id_format is KeyIdFormat.ACCT:
        return actor.to_webfinger_s()
    return f"{uri_for(actor)}#main-key"


class Signer(ABC):
    """Capability producing RSA-SHA256 signatures for one key"""

    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Sign ``data`` with RSASSA-PKCS1-v1_5 over SHA-256"""

    @abstractmethod
    def identifier(self) -> str:
        """keyId to advertise in the Signature header"""


class ActorSigner(Signer):
    """
    Signer bound to a local actor's private key.

    Args:
        actor: Local actor holding an RSA private key
        key_id_format: keyId format, ``"acct"`` or ``"uri"``

    Raises:
        InvalidActorError: If the actor is not local
        ValueError: If the keyId format is not recognized
    """

    def __init__(self, actor: Actor, key_id_format: Union[str, KeyIdFormat] = KeyIdFormat.ACCT):
        if not actor.local:
            raise InvalidActorError(
                f"Cannot sign on behalf of remote actor {actor.to_webfinger_s()}",
                details={"actor": actor.to_webfinger_s()}
            )

        self.actor = actor
        self.key_id_format = KeyIdFormat(key_id_format)

    def sign(self, data: bytes) -> bytes:
        try:
            return sign_message(self.actor.keypair, data)
        except RSAKeyError as e:
            raise SigningError(
                f"Signing failed for {self.actor.to_webfinger_s()}: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"actor": self.actor.to_webfinger_s(), "original_error": str(e)}
            ) from e

    def identifier(self) -> str:
        return identifier(self.actor, self.key_id_format)

    def __repr__(self) -> str:
        return f"ActorSigner(actor={self.actor.to_webfinger_s()!r}, key_id_format={self.key_id_format.value!r})"
