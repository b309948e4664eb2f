"""Exceptions raised by the Authlete client access layer."""
from __future__ import annotations
from typing import Dict, Optional


class AuthleteError(Exception):
    """Base exception for all Authlete client operations."""
    pass


class ConfigurationError(AuthleteError):
    """Configuration could not be resolved."""
    pass


class ConfigurationNotFoundError(ConfigurationError):
    """No configuration source exists in any search location.
    
    Attributes:
        source: Configuration source name that was looked up
        searched: Directories that were searched, in order
    """
    
    def __init__(self, source: str, searched: Optional[list] = None):
        self.source = source
        self.searched = list(searched or [])
        super().__init__(f"Configuration file '{source}' not found")


class ConfigurationParseError(ConfigurationError):
    """Configuration source was found but its content is invalid.
    
    Attributes:
        source: Path of the offending source (may be None for env configuration)
        line: Line number of the offending statement, when known
    """
    
    def __init__(self, message: str, source: Optional[str] = None, line: Optional[int] = None):
        self.source = source
        self.line = line
        location = ""
        if source:
            location = f"{source}:{line}: " if line else f"{source}: "
        super().__init__(f"{location}{message}")


class AuthleteApiError(AuthleteError):
    """A call to the Authlete API failed.
    
    Attributes:
        status_code: HTTP status code (None if no response was received)
        status_message: HTTP reason phrase
        response_body: Raw response body
        response_headers: Response headers
    """
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_message: Optional[str] = None,
        response_body: Optional[str] = None,
        response_headers: Optional[Dict[str, str]] = None,
    ):
        self.status_code = status_code
        self.status_message = status_message
        self.response_body = response_body
        self.response_headers = dict(response_headers or {})
        super().__init__(message)
