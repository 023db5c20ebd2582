"""
Test suite for bounded response reads
"""

import pytest

from fedisign_sdk.exceptions import ResponseTooLargeError
from fedisign_sdk.response import BoundedResponse, parse_charset, parse_content_length

ONE_MIB = 1024 * 1024


class TestCharsetParsing:
    """Test charset detection from Content-Type"""

    def test_declared_charset(self):
        assert parse_charset("text/html; charset=UTF-8") == "utf-8"

    def test_quoted_charset(self):
        assert parse_charset('application/json; charset="iso-8859-1"') == "iso8859-1"

    def test_missing_charset(self):
        assert parse_charset("application/activity+json") is None
        assert parse_charset(None) is None
        assert parse_charset("") is None

    def test_unknown_charset_falls_back(self):
        assert parse_charset("text/plain; charset=x-made-up-charset") is None

    def test_non_text_codec_falls_back(self):
        assert parse_charset("text/plain; charset=hex") is None
        assert parse_charset("text/plain; charset=zlib") is None


class TestContentLengthParsing:
    """Test Content-Length parsing"""

    def test_valid(self):
        assert parse_content_length("2000000") == 2000000

    def test_malformed_is_ignored(self):
        assert parse_content_length("lots") is None
        assert parse_content_length("-5") is None
        assert parse_content_length(None) is None


class TestBodyWithLimit:
    """Test size-capped body reads"""

    def test_declared_length_over_limit_fails_before_reading(self, make_response):
        raw = make_response(headers={"Content-Length": "2000000"}, chunks=[b"x" * 10])
        response = BoundedResponse(raw)

        with pytest.raises(ResponseTooLargeError) as exc_info:
            response.body_with_limit(ONE_MIB)

        assert raw.chunks_read == 0
        assert exc_info.value.details == {"limit": ONE_MIB, "content_length": 2000000}

    def test_streamed_volume_over_limit_fails(self, make_response):
        chunk = b"a" * 65536
        chunks = [chunk] * 16 + [b"b"]
        raw = make_response(chunks=chunks)

        with pytest.raises(ResponseTooLargeError) as exc_info:
            BoundedResponse(raw).body_with_limit(ONE_MIB)

        assert raw.chunks_read == 17
        assert exc_info.value.details["bytes_read"] == ONE_MIB + 1

    def test_exactly_at_limit_succeeds(self, make_response):
        chunks = [b"a" * 65536] * 16
        body = BoundedResponse(make_response(chunks=chunks)).body_with_limit(ONE_MIB)

        assert isinstance(body, bytes)
        assert len(body) == ONE_MIB

    def test_lying_content_length_still_capped(self, make_response):
        raw = make_response(headers={"Content-Length": "10"}, chunks=[b"x" * 64, b"y" * 64])

        with pytest.raises(ResponseTooLargeError):
            BoundedResponse(raw).body_with_limit(100)

    def test_default_limit_is_one_mib(self, make_response):
        raw = make_response(headers={"Content-Length": str(ONE_MIB + 1)})

        with pytest.raises(ResponseTooLargeError):
            BoundedResponse(raw).body_with_limit()

    def test_custom_default_limit(self, make_response):
        response = BoundedResponse(make_response(chunks=[b"hello"]), default_limit=4)

        with pytest.raises(ResponseTooLargeError):
            response.body_with_limit()

        assert BoundedResponse(make_response(chunks=[b"hello"]), default_limit=4).body_with_limit(5) == b"hello"

    def test_decodes_declared_charset(self, make_response):
        text = "héllo wörld"
        encoded = text.encode("utf-8")
        # split inside the two-byte "é"
        chunks = [encoded[:2], encoded[2:]]
        raw = make_response(headers={"Content-Type": "text/plain; charset=utf-8"}, chunks=chunks)

        assert BoundedResponse(raw).body_with_limit() == text

    def test_limit_counts_bytes_not_characters(self, make_response):
        raw = make_response(
            headers={"Content-Type": "text/plain; charset=utf-8"},
            chunks=["ééé".encode("utf-8")],
        )

        with pytest.raises(ResponseTooLargeError):
            BoundedResponse(raw).body_with_limit(5)

    def test_unknown_charset_returns_bytes(self, make_response):
        raw = make_response(
            headers={"Content-Type": "text/plain; charset=x-made-up-charset"},
            chunks=[b"\xff\xfe raw"],
        )

        assert BoundedResponse(raw).body_with_limit() == b"\xff\xfe raw"

    @pytest.mark.parametrize("charset", ["hex", "rot13", "base64", "zlib"])
    def test_non_text_codec_returns_bytes(self, make_response, charset):
        raw = make_response(
            headers={"Content-Type": f"text/plain; charset={charset}"},
            chunks=[b"hello"],
        )
        response = BoundedResponse(raw)

        assert response.charset is None
        assert response.body_with_limit() == b"hello"

    def test_invalid_bytes_do_not_fail_decoding(self, make_response):
        raw = make_response(headers={"Content-Type": "text/plain; charset=utf-8"}, chunks=[b"ok \xff"])

        assert BoundedResponse(raw).body_with_limit() == "ok �"

    def test_empty_body(self, make_response):
        assert BoundedResponse(make_response()).body_with_limit() == b""

    def test_exposes_status_and_headers(self, make_response):
        raw = make_response(status_code=404, headers={"content-type": "text/html; charset=utf-8"})
        response = BoundedResponse(raw)

        assert response.status_code == 404
        assert response.charset == "utf-8"
        assert response.content_length is None
