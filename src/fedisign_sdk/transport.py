"""
Transport adapters for outbound requests

The request builder only needs to send method, URL, headers and body and get
back a status, headers and a chunked body it can close. ``RequestsTransport``
provides that on top of a ``requests.Session``.
"""

import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool
from urllib3.poolmanager import ProxyManager

from .config import ClientConfig, get_default_config
from .exceptions import TransportError
from .signing.types import HttpMethod

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16 * 1024


class TransportResponse(ABC):
    """Response handle owned by a transport; must be closed by the caller"""

    @property
    @abstractmethod
    def status_code(self) -> int:
        """HTTP status code"""

    @property
    @abstractmethod
    def headers(self) -> Mapping[str, str]:
        """Response headers (case-insensitive lookup)"""

    @abstractmethod
    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield body chunks until the stream ends"""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection"""


class TransportAdapter(ABC):
    """Performs the network call for a prepared request"""

    @abstractmethod
    def send(
        self,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> TransportResponse:
        """
        Send a request and return once response headers are available.

        Raises:
            TransportError: On any network-layer failure
        """


class RequestsResponse(TransportResponse):
    """``requests`` response streamed from its owning session"""

    def __init__(self, response: requests.Response, session: requests.Session):
        self.response = response
        self.session = session

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.response.headers

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        try:
            for chunk in self.response.iter_content(chunk_size=chunk_size):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            raise TransportError(
                f"Failed reading response body: {e}",
                details={"error_type": type(e).__name__},
                original_error=e
            ) from e

    def close(self) -> None:
        try:
            self.response.close()
        finally:
            self.session.close()
            logger.debug("HTTP session closed")


class _WriteTimeoutMixin:
    """
    Switch the socket to the write timeout while the request is sent.

    urllib3 keeps the connect timeout on the socket until the request has
    been written and only then applies the read timeout.
    """

    def __init__(self, *args, write_timeout: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.write_timeout = write_timeout

    def _apply_write_timeout(self) -> None:
        if self.write_timeout is not None and self.sock is not None:
            self.sock.settimeout(self.write_timeout)

    def connect(self):
        super().connect()
        self._apply_write_timeout()

    def request(self, *args, **kwargs):
        # reused connections still carry the previous read timeout
        self._apply_write_timeout()
        return super().request(*args, **kwargs)


class WriteTimeoutHTTPConnection(_WriteTimeoutMixin, HTTPConnection):
    pass


class WriteTimeoutHTTPSConnection(_WriteTimeoutMixin, HTTPSConnection):
    pass


class WriteTimeoutHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = WriteTimeoutHTTPConnection

    def __init__(self, *args, write_timeout: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.conn_kw['write_timeout'] = write_timeout


class WriteTimeoutHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = WriteTimeoutHTTPSConnection

    def __init__(self, *args, write_timeout: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.conn_kw['write_timeout'] = write_timeout


class WriteTimeoutAdapter(HTTPAdapter):
    """
    ``HTTPAdapter`` whose connections bound request writes separately.

    ``requests`` only knows ``(connect, read)`` timeouts; the write timeout is
    applied to the socket by the connection classes above.

    Args:
        write_timeout: Seconds allowed for each socket write of the request
    """

    def __init__(self, write_timeout: float, **kwargs):
        self.write_timeout = write_timeout
        super().__init__(**kwargs)

    @property
    def pool_classes(self) -> Dict[str, Any]:
        return {
            'http': functools.partial(WriteTimeoutHTTPConnectionPool, write_timeout=self.write_timeout),
            'https': functools.partial(WriteTimeoutHTTPSConnectionPool, write_timeout=self.write_timeout),
        }

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = self.pool_classes

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        # SOCKS managers bring their own connection classes
        if isinstance(manager, ProxyManager):
            manager.pool_classes_by_scheme = self.pool_classes
        return manager


class FederationSession(requests.Session):
    """``requests.Session`` that lets each redirect hop derive its own Host"""

    def rebuild_auth(self, prepared_request, response):
        super().rebuild_auth(prepared_request, response)
        if prepared_request.headers.pop('Host', None) is not None:
            logger.debug(f"Dropped Host header for redirect to {prepared_request.url}")


class RequestsTransport(TransportAdapter):
    """
    Transport backed by a fresh ``FederationSession`` per request.

    Connect and read timeouts go to ``requests`` as ``(connect, read)``; the
    write timeout is applied by ``WriteTimeoutAdapter``. Redirects are
    followed up to ``max_redirects`` hops without re-signing, and the
    ``Host`` header is dropped on each hop.

    Args:
        config: Client configuration (timeouts, redirect cap)
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or get_default_config()

    def _create_session(self) -> requests.Session:
        session = FederationSession()
        session.max_redirects = self.config.max_redirects

        adapter = WriteTimeoutAdapter(self.config.write_timeout)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    @property
    def timeout(self):
        return (self.config.connect_timeout, self.config.read_timeout)

    def send(
        self,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> TransportResponse:
        session = self._create_session()
        kwargs = dict(options or {})
        kwargs.setdefault('allow_redirects', self.config.max_redirects > 0)

        logger.debug(f"Making {method.value} request to {url}")

        try:
            response = session.request(
                method.value,
                url,
                headers=dict(headers),
                data=body,
                timeout=self.timeout,
                stream=True,
                **kwargs
            )
        except requests.RequestException as e:
            session.close()
            raise TransportError(
                str(e),
                details={"error_type": type(e).__name__},
                original_error=e
            ) from e

        logger.debug(f"{method.value} {url} returned {response.status_code}")
        return RequestsResponse(response, session)
