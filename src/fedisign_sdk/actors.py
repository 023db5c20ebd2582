"""
Actor model for signed federation requests

An actor is the identity a request is sent on behalf of. Only local actors
carry private key material; remote actors are known by handle and URI alone.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .config import ClientConfig, get_default_config
from .crypto.rsa import load_private_key, load_public_key
from .exceptions import InvalidActorError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class Actor:
    """
    A federated actor.

    Attributes:
        username: Local part of the actor handle
        host: Domain the actor lives on
        local: Whether this process controls the actor's private key
        uri: Canonical actor URI (derived from host and username when unset)
        private_key_pem: PEM encoded RSA private key (local actors only)
        public_key_pem: PEM encoded RSA public key
    """
    username: str
    host: str
    local: bool = False
    uri: Optional[str] = None
    private_key_pem: Optional[str] = field(default=None, repr=False)
    public_key_pem: Optional[str] = field(default=None, repr=False)
    _private_key: Any = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.username:
            raise ValidationError("Actor username cannot be empty")
        if not self.host:
            raise ValidationError("Actor host cannot be empty")
        self.host = self.host.lower()

    @classmethod
    def local_actor(
        cls,
        username: str,
        private_key_pem: str,
        public_key_pem: Optional[str] = None,
        config: Optional[ClientConfig] = None
    ) -> 'Actor':
        """Create a local actor on the configured local domain"""
        config = config or get_default_config()
        if not config.local_domain:
            raise ValidationError("local_domain must be configured to create local actors")

        return cls(
            username=username,
            host=config.local_domain,
            local=True,
            private_key_pem=private_key_pem,
            public_key_pem=public_key_pem,
        )

    def to_webfinger_s(self) -> str:
        """Webfinger-style handle (``user@host``)"""
        return f"{self.username}@{self.host}"

    @property
    def keypair(self):
        """The actor's RSA private key, loaded on first access"""
        if not self.local:
            raise InvalidActorError(
                f"Remote actor {self.to_webfinger_s()} has no private key",
                details={"actor": self.to_webfinger_s()}
            )

        if self._private_key is None:
            if not self.private_key_pem:
                raise InvalidActorError(
                    f"Local actor {self.to_webfinger_s()} has no private key material",
                    details={"actor": self.to_webfinger_s()}
                )
            self._private_key = load_private_key(self.private_key_pem)
            logger.debug(f"Loaded private key for {self.to_webfinger_s()}")

        return self._private_key

    @property
    def public_key(self):
        """The actor's RSA public key"""
        if self.public_key_pem:
            return load_public_key(self.public_key_pem)
        return self.keypair.public_key()


def uri_for(actor: Actor) -> str:
    """Canonical URI of an actor"""
    if actor.uri:
        return actor.uri
    return f"https://{actor.host}/users/{actor.username}"
