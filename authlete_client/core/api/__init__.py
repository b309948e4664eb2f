"""Authlete API handles.

Architecture:
- client.py: transport, error mapping and the operations shared by all versions
- v2.py: API V2 paths and Basic credentials
- v3.py: API V3 paths and access-token credentials
- options.py: per-call request options
- dpop.py: DPoP proof signing

Usage:
    from authlete_client.core.api import AuthleteApiV3, RequestOptions

    api = AuthleteApiV3(configuration)
    api.get_client(1234, options=RequestOptions({"X-Request-Id": "abc"}))
"""
from .client import AuthleteApi, Settings, TokenStatus
from .dpop import DPOP_HEADER, DpopSigner
from .options import RequestOptions
from .v2 import AuthleteApiV2, basic_credentials
from .v3 import AuthleteApiV3

__all__ = [
    "AuthleteApi",
    "AuthleteApiV2",
    "AuthleteApiV3",
    "Settings",
    "TokenStatus",
    "RequestOptions",
    "DpopSigner",
    "DPOP_HEADER",
    "basic_credentials",
]
