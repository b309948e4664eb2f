"""Per-request options for Authlete API calls."""
from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional


class RequestOptions:
    """Custom request headers for a single API call.

    ``headers`` is either None (no custom headers, transport defaults only)
    or a read-only mapping over a private copy. An empty mapping is a
    distinct, explicit state and is never collapsed to None.

    Build the options before the call; the handle never modifies them.

    Usage:
        options = RequestOptions().set_headers({"X-Request-Id": "abc"})
        api.get_client(1234, options=options)
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._headers = self._freeze(headers)

    @staticmethod
    def _freeze(headers: Optional[Mapping[str, str]]) -> Optional[Mapping[str, str]]:
        # Copy so later changes to the caller's dict are not observed
        return None if headers is None else MappingProxyType(dict(headers))

    @property
    def headers(self) -> Optional[Mapping[str, str]]:
        return self._headers

    def get_headers(self) -> Optional[Mapping[str, str]]:
        """Return the custom headers as a read-only mapping, or None if unset."""
        return self._headers

    def set_headers(self, headers: Optional[Mapping[str, str]]) -> "RequestOptions":
        """Replace the custom headers on this instance.

        Args:
            headers: Header mapping (copied), or None to unset

        Returns:
            This instance, for chaining
        """
        self._headers = self._freeze(headers)
        return self

    def with_headers(self, headers: Optional[Mapping[str, str]]) -> "RequestOptions":
        """Return new options carrying ``headers``; this instance is unchanged."""
        return RequestOptions(headers)

    def merged(self, extra: Mapping[str, str]) -> "RequestOptions":
        """Return new options with ``extra`` layered over the current headers."""
        combined = dict(self._headers or {})
        combined.update(extra)
        return RequestOptions(combined)

    def __eq__(self, other):
        if not isinstance(other, RequestOptions):
            return NotImplemented
        if self._headers is None or other._headers is None:
            return self._headers is other._headers
        return dict(self._headers) == dict(other._headers)

    def __repr__(self):
        headers = None if self._headers is None else dict(self._headers)
        return f"RequestOptions(headers={headers!r})"
