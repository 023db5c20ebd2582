"""
Shared fixtures for the fedisign SDK test suite
"""

import threading
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from requests.structures import CaseInsensitiveDict

from fedisign_sdk.actors import Actor
from fedisign_sdk.config import ClientConfig, set_default_config
from fedisign_sdk.exceptions import TransportError
from fedisign_sdk.transport import TransportAdapter, TransportResponse

FIXED_NOW = datetime(2026, 10, 18, 10, 0, 0, tzinfo=timezone.utc)
FIXED_HTTP_DATE = "Sun, 18 Oct 2026 10:00:00 GMT"


class FakeResponse(TransportResponse):
    """In-memory transport response that records reads and closes"""

    def __init__(self, status_code=200, headers=None, chunks=(), close_error=None):
        self._status_code = status_code
        self._headers = CaseInsensitiveDict(headers or {})
        self._chunks = list(chunks)
        self.chunks_read = 0
        self.close_calls = 0
        self.close_error = close_error

    @property
    def status_code(self):
        return self._status_code

    @property
    def headers(self):
        return self._headers

    def iter_chunks(self, chunk_size=16 * 1024):
        for chunk in self._chunks:
            self.chunks_read += 1
            yield chunk

    def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeTransport(TransportAdapter):
    """Transport returning a canned response or raising a canned error"""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def send(self, method, url, headers, body=None, options=None):
        self.calls.append({
            'method': method,
            'url': url,
            'headers': dict(headers),
            'body': body,
            'options': options,
        })
        if self.error is not None:
            raise self.error
        return self.response


def _pem_pair(key):
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode('ascii')
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_key():
    """RSA private key shared across the session (generation is slow)"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_pem_pair(rsa_key):
    return _pem_pair(rsa_key)


@pytest.fixture(autouse=True)
def reset_default_config():
    """Keep the process-wide configuration isolated between tests"""
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def config():
    return ClientConfig(local_domain="example.social", user_agent="fedisign-test/1.0")


@pytest.fixture
def local_actor(rsa_pem_pair):
    private_pem, public_pem = rsa_pem_pair
    return Actor(
        username="alice",
        host="example.social",
        local=True,
        private_key_pem=private_pem,
        public_key_pem=public_pem,
    )


@pytest.fixture
def remote_actor():
    return Actor(username="bob", host="remote.example", local=False)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def refused_transport():
    return FakeTransport(error=TransportError("Connection refused"))


@pytest.fixture
def make_response():
    """Factory for in-memory transport responses"""
    return FakeResponse


@pytest.fixture
def make_transport():
    """Factory for fake transports"""
    return FakeTransport


class RecordingHandler(BaseHTTPRequestHandler):
    """Serves canned ``(status, headers, body)`` routes and records requests"""

    def do_GET(self):
        self._respond()

    def do_POST(self):
        self._respond()

    def _respond(self):
        length = int(self.headers.get('Content-Length') or 0)
        if length:
            self.rfile.read(length)
        self.server.received.append((self.path, self.headers))

        status, headers, body = self.server.routes.get(self.path, (404, {}, b"not found"))
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server():
    """Factory starting HTTP servers on 127.0.0.1; routes are filled in by the test"""
    servers = []

    def start():
        server = HTTPServer(('127.0.0.1', 0), RecordingHandler)
        server.routes = {}
        server.received = []
        server.base_url = f"http://127.0.0.1:{server.server_port}"
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()
