"""
Signed outbound requests for federation

``Request`` assembles the headers of an outbound call, optionally signs them
on behalf of a local actor, sends the request and hands the caller a
size-capped view of the response inside a scope that always releases the
connection.

Example::

    request = Request('POST', 'https://remote.example/inbox', body=payload)
    request.on_behalf_of(actor).add_headers({'Content-Type': 'application/activity+json'})
    status = request.perform(lambda response: response.status_code)
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, TypeVar, Union

from .actors import Actor
from .config import ClientConfig, get_default_config
from .exceptions import InvalidActorError, TransportError
from .response import BoundedResponse
from .signing.http_signature import sign
from .signing.signer import ActorSigner, Signer
from .signing.types import REQUEST_TARGET, HttpMethod, KeyIdFormat, RequestBody, SigningContext
from .signing.utils import (
    build_request_target,
    calculate_digest,
    format_http_date,
    normalize_url,
    to_body_bytes,
    url_host,
)
from .transport import RequestsTransport, TransportAdapter, TransportResponse

logger = logging.getLogger(__name__)

T = TypeVar('T')
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Request:
    """
    A pending outbound request.

    Headers keep insertion order, which is also the order they are signed
    in: ``(request-target)``, ``User-Agent``, ``Host``, ``Date``, then
    ``Digest`` when a body is present, then caller headers.

    Args:
        method: HTTP method (case-insensitive)
        url: Absolute URL, or a reference resolved against ``base_url``
        body: Optional request body; its presence adds a ``Digest`` header
        config: Client configuration (process-wide default if None)
        transport: Transport adapter (``RequestsTransport`` if None)
        clock: Callable returning the current time, used for ``Date``
        base_url: Base for resolving relative ``url`` references
        **options: Transport options passed through (``proxies``,
            ``verify``, ``params``, ...)

    Raises:
        SigningError: If the method or URL is invalid
    """

    def __init__(
        self,
        method: Union[str, HttpMethod],
        url: str,
        body: RequestBody = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[TransportAdapter] = None,
        clock: Optional[Clock] = None,
        base_url: Optional[str] = None,
        **options: Any
    ):
        self.config = config or get_default_config()
        self.method = HttpMethod.parse(method)
        self.url = normalize_url(url, base_url)
        self.body = None if body is None else to_body_bytes(body)
        self.options: Dict[str, Any] = {**options, **self.config.http_client_proxy}

        self._transport = transport
        self._clock = clock or _utc_now
        self._headers: Dict[str, str] = {}
        self._signing: Optional[SigningContext] = None

        self._set_common_headers()
        if self.body is not None:
            self._set_digest()

    def on_behalf_of(self, actor: Actor, key_id_format: Union[str, KeyIdFormat] = KeyIdFormat.ACCT) -> 'Request':
        """
        Sign the request with a local actor's key.

        Args:
            actor: Local actor to sign as
            key_id_format: ``"acct"`` or ``"uri"``

        Returns:
            Request: self

        Raises:
            InvalidActorError: If the actor is not local
        """
        if not actor.local:
            raise InvalidActorError(
                f"Cannot sign on behalf of remote actor {actor.to_webfinger_s()}",
                details={"actor": actor.to_webfinger_s(), "url": self.url}
            )

        return self.signed_by(ActorSigner(actor, key_id_format))

    def signed_by(self, signer: Signer) -> 'Request':
        """Sign the request with an arbitrary signer capability"""
        self._signing = SigningContext(signer=signer)
        logger.debug(f"Request to {self.url} will be signed by {signer.identifier()}")
        return self

    @property
    def signing_context(self) -> Optional[SigningContext]:
        return self._signing

    def add_headers(self, new_headers: Mapping[str, str]) -> 'Request':
        """Merge caller headers; later values overwrite earlier ones"""
        self._headers.update(new_headers)
        return self

    def headers(self) -> Dict[str, str]:
        """
        Headers as transmitted.

        Includes ``Signature`` when a signer is attached, computed over the
        current header set; never includes ``(request-target)``.
        """
        headers = dict(self._headers)

        if self._signing is not None:
            self._signing.header_names = list(self._headers)
            headers['Signature'] = sign(self._signing.signer, self._headers)

        headers.pop(REQUEST_TARGET, None)
        return headers

    @contextmanager
    def stream(self) -> Iterator[BoundedResponse]:
        """
        Send the request and yield a bounded response.

        The connection is closed exactly once when the block exits, whether
        it returns or raises. A close failure while another exception is
        propagating is logged rather than raised.

        Raises:
            TransportError: On network failure, with the URL in the message
        """
        headers = self.headers()
        transport = self._transport or RequestsTransport(self.config)

        try:
            response = transport.send(self.method, self.url, headers, self.body, self.options)
        except TransportError as e:
            raise TransportError(
                f"{e} on {self.url}",
                e.error_code,
                {**e.details, "url": self.url},
                original_error=e.original_error or e
            ) from e

        logger.info(f"{self.method.value} {self.url} -> {response.status_code}")

        try:
            yield BoundedResponse(response, self.config.body_limit)
        except BaseException:
            self._close_quietly(response)
            raise
        else:
            response.close()

    def perform(self, handler: Callable[[BoundedResponse], T]) -> T:
        """
        Send the request and call ``handler`` with the bounded response.

        Args:
            handler: Callable receiving the response; its result is returned

        Returns:
            The handler's return value
        """
        with self.stream() as response:
            return handler(response)

    def _set_common_headers(self) -> None:
        self._headers[REQUEST_TARGET] = build_request_target(self.method, self.url)
        self._headers['User-Agent'] = self.config.user_agent
        self._headers['Host'] = url_host(self.url)
        self._headers['Date'] = format_http_date(self._clock())

    def _set_digest(self) -> None:
        self._headers['Digest'] = calculate_digest(self.body)

    def _close_quietly(self, response: TransportResponse) -> None:
        try:
            response.close()
        except Exception as e:
            logger.warning(f"Failed to close connection to {self.url}: {e}")

    def __repr__(self) -> str:
        return f"Request(method={self.method.value!r}, url={self.url!r}, signed={self._signing is not None})"
