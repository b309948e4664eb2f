"""Pytest shared fixtures for the Authlete client tests."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from authlib.jose import JsonWebKey
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from authlete_client.config import CONFIGURATION_FILE_ENV


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code: int = 200, reason: str = "OK",
                 text: Optional[str] = None, headers: Optional[dict] = None):
        self.status_code = status_code
        self.reason = reason
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.content = text.encode("utf-8")
        self.headers = headers or {"Content-Type": "application/json"}

    def json(self):
        return json.loads(self.text)


class HttpRecorder:
    """Records outgoing requests and replays queued responses."""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.error: Optional[Exception] = None

    def respond(self, payload=None, **kwargs):
        """Queue one response for the next request."""
        self.responses.append(StubResponse(payload, **kwargs))

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return StubResponse({})

    @property
    def last(self):
        return self.calls[-1]


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Prevent unit tests from reaching a live Authlete API."""
    def _fail(method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests, "request", _fail)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Tests must not pick up a configuration override from the shell."""
    monkeypatch.delenv(CONFIGURATION_FILE_ENV, raising=False)


@pytest.fixture()
def http(monkeypatch):
    """Record Authlete API calls instead of sending them."""
    recorder = HttpRecorder()
    monkeypatch.setattr(requests, "request", recorder)
    return recorder


@pytest.fixture()
def write_properties():
    """Write a properties file into a directory and return its path."""
    def _write(directory: pathlib.Path, content: str, name: str = "authlete.properties") -> pathlib.Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# ─────────────────────────────────────────────────────────────────────────────
# RSA Key Pair for DPoP Testing
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate an RSA key pair for DPoP signing in tests."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return {"private_pem": private_pem, "public_pem": public_pem}


@pytest.fixture(scope="session")
def dpop_jwk(rsa_key_pair):
    """Private RSA JWK (JSON) with an 'alg' member, as configured in service.dpop_key."""
    jwk = JsonWebKey.import_key(rsa_key_pair["private_pem"], {"kty": "RSA"})
    jwk_dict = jwk.as_dict(is_private=True)
    jwk_dict["alg"] = "RS256"
    jwk_dict["kid"] = "dpop-test-key"
    return json.dumps(jwk_dict)
