"""
Bounded reads of remote response bodies

Remote servers may omit or misreport Content-Length, or stream without end,
so the size cap is enforced while the body streams in, not only against the
declared length.
"""

import codecs
import logging
from email.message import Message
from typing import Mapping, Optional, Union

from .config import DEFAULT_BODY_LIMIT
from .exceptions import ResponseTooLargeError
from .transport import TransportResponse

logger = logging.getLogger(__name__)


def parse_charset(content_type: Optional[str]) -> Optional[str]:
    """
    Extract a known charset from a Content-Type header value.

    Args:
        content_type: Content-Type header value

    Returns:
        str: Canonical codec name, or None when absent or unrecognized
    """
    if not content_type:
        return None

    message = Message()
    message['content-type'] = content_type
    charset = message.get_content_charset()
    if not charset:
        return None

    try:
        name = codecs.lookup(charset).name
        # rejects bytes-to-bytes codecs such as hex or zlib
        b"".decode(name)
    except LookupError:
        logger.debug(f"Unknown charset {charset!r}, falling back to binary")
        return None
    return name


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """Declared Content-Length, or None when absent or malformed"""
    if value is None:
        return None
    try:
        length = int(value.strip())
    except (ValueError, AttributeError):
        return None
    return length if length >= 0 else None


class BoundedResponse:
    """
    Response exposing only a size-capped body read.

    Args:
        response: Transport response to read from; closing it stays the
            responsibility of whoever opened it
        default_limit: Limit used when ``body_with_limit`` is given none
    """

    def __init__(self, response: TransportResponse, default_limit: int = DEFAULT_BODY_LIMIT):
        self._response = response
        self.default_limit = default_limit

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def charset(self) -> Optional[str]:
        return parse_charset(self.headers.get('Content-Type'))

    @property
    def content_length(self) -> Optional[int]:
        return parse_content_length(self.headers.get('Content-Length'))

    def body_with_limit(self, limit: Optional[int] = None) -> Union[str, bytes]:
        """
        Read the whole body, failing once it exceeds ``limit`` bytes.

        Args:
            limit: Maximum number of body bytes accepted (defaults to
                ``default_limit``)

        Returns:
            str: Body decoded with the declared charset, or
            bytes: Raw body when no known charset is declared

        Raises:
            ResponseTooLargeError: If the declared or streamed size exceeds
                the limit; no partial content is returned
        """
        if limit is None:
            limit = self.default_limit

        content_length = self.content_length
        if content_length is not None and content_length > limit:
            logger.warning(f"Declared Content-Length {content_length} exceeds limit of {limit} bytes")
            raise ResponseTooLargeError(
                f"Response Content-Length {content_length} exceeds limit of {limit} bytes",
                details={"limit": limit, "content_length": content_length}
            )

        charset = self.charset
        contents = bytearray()

        for chunk in self._response.iter_chunks():
            contents += chunk

            if len(contents) > limit:
                bytes_read = len(contents)
                contents.clear()
                logger.warning(f"Response body exceeded limit of {limit} bytes")
                raise ResponseTooLargeError(
                    f"Response body exceeds limit of {limit} bytes",
                    details={"limit": limit, "bytes_read": bytes_read}
                )

        if charset is None:
            return bytes(contents)
        return contents.decode(charset, errors='replace')
