"""
Unit tests for HTTP response building.
"""

from dataclasses import FrozenInstanceError

import pytest

from mediaserver.http.response import (
    HTTPResponse,
    build_response,
    ok,
    partial_content,
)
from mediaserver.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test the status line carries code and reason phrase."""
        response = HTTPResponse(status=HTTPStatus.RANGE_NOT_SATISFIABLE)

        assert response.status_line == "HTTP/1.1 416 Range Not Satisfiable"

    def test_to_bytes(self):
        """Test exact wire format of a 200 response."""
        response = build_response(HTTPStatus.OK, "text/plain", b"hello")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello"
        )

    def test_empty_body(self):
        """Test an empty body still gets Content-Length: 0."""
        response = build_response(HTTPStatus.OK, "text/plain", b"")

        assert response.headers["Content-Length"] == "0"
        assert response.to_bytes().endswith(b"Content-Length: 0\r\n\r\n")

    def test_binary_body_untouched(self):
        """Test body bytes are written as-is."""
        body = bytes(range(256))
        response = build_response(HTTPStatus.OK, "image/png", body)

        assert response.to_bytes().endswith(b"\r\n\r\n" + body)

    def test_content_type(self):
        """Test the content_type accessor."""
        response = ok(b"x", "audio/mpeg")

        assert response.content_type == "audio/mpeg"

    def test_frozen(self):
        """Test a built response cannot be changed."""
        response = ok(b"x", "text/plain")

        with pytest.raises(FrozenInstanceError):
            response.body = b"y"

        with pytest.raises(TypeError):
            response.headers["Content-Length"] = "99"

    def test_summary(self):
        """Test the debug summary has no body."""
        response = ok(b"hello", "text/plain")

        assert response.summary() == (
            "HTTP/1.1 200 OK\n"
            "Content-Type: text/plain\n"
            "Content-Length: 5"
        )


class TestBuildResponse:
    """Tests for build_response()."""

    def test_header_order(self):
        """Test extra headers come first, then Content-Type and Content-Length."""
        response = build_response(
            HTTPStatus.OK,
            "text/plain",
            b"abc",
            {"X-One": "1", "X-Two": "2"},
        )

        assert list(response.headers) == [
            "X-One", "X-Two", "Content-Type", "Content-Length",
        ]

    def test_mandatory_headers_not_overridden(self):
        """Test extra Content-Type/Content-Length are ignored."""
        response = build_response(
            HTTPStatus.OK,
            "text/plain",
            b"abc",
            {"Content-Length": "999", "content-type": "text/html"},
        )

        assert response.headers["Content-Length"] == "3"
        assert response.headers["Content-Type"] == "text/plain"
        assert "content-type" not in response.headers

    def test_accepts_plain_int_status(self):
        """Test a registered status given as int becomes an HTTPStatus."""
        response = build_response(404, "text/html", b"")

        assert response.status is HTTPStatus.NOT_FOUND

    def test_unregistered_status(self):
        """Test an unknown status code is rejected."""
        with pytest.raises(ValueError):
            build_response(299, "text/plain", b"")


class TestConvenienceFunctions:
    """Tests for ok() and partial_content()."""

    def test_ok(self):
        """Test ok() builds a 200."""
        response = ok(b"a.txt\nb.png", "text/plain")

        assert response.status == HTTPStatus.OK
        assert response.body == b"a.txt\nb.png"
        assert response.headers["Content-Length"] == "11"

    def test_partial_content_wire_format(self):
        """Test exact wire format of a 206 response."""
        response = partial_content(b"ell", "text/plain", 1, 3, 5)

        assert response.to_bytes() == (
            b"HTTP/1.1 206 Partial Content\r\n"
            b"Accept-Ranges: bytes\r\n"
            b"Content-Range: bytes 1-3/5\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"ell"
        )

    def test_partial_content_length_is_slice_length(self):
        """Test Content-Length reports the slice, not the file size."""
        response = partial_content(b"x" * 10, "audio/mpeg", 100, 109, 5000)

        assert response.headers["Content-Length"] == "10"
        assert response.headers["Content-Range"] == "bytes 100-109/5000"


class TestHTTPStatus:
    """Tests for HTTPStatus helpers."""

    @pytest.mark.parametrize("status, phrase", [
        (HTTPStatus.OK, "OK"),
        (HTTPStatus.PARTIAL_CONTENT, "Partial Content"),
        (HTTPStatus.BAD_REQUEST, "Bad Request"),
        (HTTPStatus.NOT_FOUND, "Not Found"),
        (HTTPStatus.METHOD_NOT_ALLOWED, "Method Not Allowed"),
        (HTTPStatus.RANGE_NOT_SATISFIABLE, "Range Not Satisfiable"),
        (HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error"),
    ])
    def test_phrase(self, status: HTTPStatus, phrase: str):
        """Test reason phrases."""
        assert status.phrase == phrase

    def test_every_status_has_a_phrase(self):
        """Test no member is missing from the phrase table."""
        for status in HTTPStatus:
            assert status.phrase

    def test_classes(self):
        """Test status class helpers."""
        assert HTTPStatus.PARTIAL_CONTENT.is_success
        assert HTTPStatus.RANGE_NOT_SATISFIABLE.is_client_error
        assert HTTPStatus.RANGE_NOT_SATISFIABLE.is_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_server_error
        assert not HTTPStatus.OK.is_error
