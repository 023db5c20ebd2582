"""
Utility functions for request signing

This module provides URL normalization, request-target construction,
body digest calculation and HTTP-date formatting for HTTP Signatures.
"""

import base64
import hashlib
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from requests.utils import requote_uri

from .types import (
    SigningError,
    SigningErrorCodes,
    HttpMethod,
    RequestBody,
)

DIGEST_PREFIX = 'SHA-256='

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}


def to_body_bytes(body: RequestBody) -> bytes:
    """
    Coerce a request body to bytes.

    Args:
        body: Request body (string, bytes, or None)

    Returns:
        bytes: Body bytes; strings are UTF-8 encoded, None becomes empty

    Raises:
        SigningError: If the body has an unsupported type
    """
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode('utf-8')
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)

    raise SigningError(
        f"Body must be string, bytes, or None, got {type(body)}",
        SigningErrorCodes.DIGEST_CALCULATION_FAILED,
        {"body_type": str(type(body))}
    )


def calculate_digest(body: RequestBody) -> str:
    """
    Calculate the Digest header value for a request body.

    Args:
        body: Request body content (string, bytes, or None)

    Returns:
        str: ``SHA-256=`` followed by the base64 SHA-256 digest
    """
    digest = hashlib.sha256(to_body_bytes(body)).digest()
    return DIGEST_PREFIX + base64.b64encode(digest).decode('ascii')


def normalize_url(url: str, base_url: Optional[str] = None) -> str:
    """
    Parse and normalize a request URL.

    Relative references are resolved against ``base_url``. Scheme and host
    are lowercased, default ports dropped, dot segments removed, an empty
    path becomes ``/`` and percent-encoding is requoted.

    Args:
        url: URL to normalize
        base_url: Optional base for resolving relative references

    Returns:
        str: Normalized absolute URL

    Raises:
        SigningError: If the URL is not an absolute http(s) URL
    """
    if base_url:
        url = urljoin(base_url, url)

    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except (ValueError, AttributeError) as e:
        raise SigningError(
            f"Failed to parse URL: {e}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "original_error": str(e)}
        ) from e

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise SigningError(
            f"Unsupported URL scheme: {parsed.scheme or '(none)'}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "scheme": parsed.scheme}
        )

    host = parsed.hostname
    if not host:
        raise SigningError(
            f"Invalid URL format: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    netloc = f"[{host}]" if ':' in host else host
    if port is not None and port != DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parsed.path or '/'
    if not path.startswith('//'):
        # urljoin applies RFC 3986 dot-segment removal
        path = urlsplit(urljoin(f"{scheme}://{netloc}/", path)).path or '/'

    return requote_uri(urlunsplit((scheme, netloc, path, parsed.query, parsed.fragment)))


def url_host(url: str) -> str:
    """Host component of a normalized URL"""
    return urlsplit(url).hostname or ''


def url_path(url: str) -> str:
    """Path component of a normalized URL (``/`` when empty)"""
    return urlsplit(url).path or '/'


def build_request_target(method: HttpMethod, url: str) -> str:
    """
    Build the ``(request-target)`` pseudo-header value.

    Args:
        method: HTTP method
        url: Normalized request URL

    Returns:
        str: ``"<lowercase method> <path>"``
    """
    return f"{method.value.lower()} {url_path(url)}"


def format_http_date(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as an RFC 7231 HTTP-date.

    Args:
        moment: Time to format (current UTC time if None; naive values are
            treated as UTC)

    Returns:
        str: e.g. ``Sun, 18 Oct 2026 10:00:00 GMT``
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for signing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower()
