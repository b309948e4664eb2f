"""DPoP proof generation (RFC 9449) for calls to the Authlete API."""
from __future__ import annotations
import json
import time
import uuid

from authlib.jose import JsonWebKey, jwt

DPOP_HEADER = "DPoP"


class DpopSigner:
    """Sign DPoP proof JWTs with a configured JWK.

    The JWK must be an asymmetric private key and must carry an ``alg``
    member naming the signing algorithm.
    """

    def __init__(self, jwk: str):
        """Parse the JWK.

        Args:
            jwk: JWK in JSON form

        Raises:
            ValueError: If the JWK cannot be parsed, is symmetric or lacks 'alg'
        """
        try:
            data = json.loads(jwk)
        except ValueError as exc:
            raise ValueError("DPoP JWK is not valid.") from exc
        if not isinstance(data, dict):
            raise ValueError("DPoP JWK is not valid.")
        if not data.get("alg"):
            raise ValueError("DPoP JWK must contain an 'alg' field.")
        if data.get("kty") == "oct":
            raise ValueError("DPoP JWK must be an asymmetric key.")

        try:
            self._key = JsonWebKey.import_key(data)
        except (ValueError, TypeError, KeyError) as exc:
            raise ValueError("DPoP JWK is not valid.") from exc

        self.algorithm = data["alg"]
        self.public_jwk = self._key.as_dict(is_private=False)

    def proof(self, method: str, url: str) -> str:
        """Create a DPoP proof for one HTTP request.

        Args:
            method: HTTP method (htm claim)
            url: Request URL without query string (htu claim)

        Returns:
            Compact-serialized signed JWT
        """
        header = {"typ": "dpop+jwt", "alg": self.algorithm, "jwk": self.public_jwk}
        payload = {
            "htm": method.upper(),
            "htu": url,
            "jti": str(uuid.uuid4()),
            "iat": int(time.time()),
        }
        # htu may carry long numeric IDs that trip the sensitive-value check
        token = jwt.encode(header, payload, self._key, check=False)
        return token.decode("ascii") if isinstance(token, bytes) else token
