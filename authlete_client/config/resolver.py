"""Locate and parse the Authlete configuration file.

Resolution order:
1. File named by the AUTHLETE_CONFIGURATION_FILE environment variable
2. Default file name ``authlete.properties``

The chosen name is looked up in the current working directory first and
then along the resource search path (``sys.path`` unless overridden).
The first match wins.
"""
from __future__ import annotations
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from dotenv.parser import parse_stream

from authlete_client.exceptions import ConfigurationNotFoundError, ConfigurationParseError
from .settings import AuthleteConfiguration

logger = logging.getLogger(__name__)

CONFIGURATION_FILE_ENV = "AUTHLETE_CONFIGURATION_FILE"
DEFAULT_CONFIGURATION_FILE = "authlete.properties"


def load_properties(path: Path) -> Dict[str, str]:
    """Parse a key=value properties file.

    Args:
        path: File to parse

    Returns:
        Mapping of property keys to values (a key without a value maps to "")

    Raises:
        ConfigurationParseError: If the file is not valid UTF-8 or contains
            a statement that cannot be parsed
    """
    properties: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for binding in parse_stream(handle):
                if binding.error:
                    raise ConfigurationParseError(
                        f"Cannot parse statement '{binding.original.string.strip()}'",
                        str(path),
                        binding.original.line,
                    )
                if binding.key is None:
                    continue
                properties[binding.key] = binding.value if binding.value is not None else ""
    except UnicodeDecodeError as exc:
        raise ConfigurationParseError(f"File is not valid UTF-8: {exc.reason}", str(path)) from exc
    return properties


class ConfigurationResolver:
    """Resolve the Authlete configuration from the filesystem.

    The resolver keeps no state between calls; caching the result is the
    caller's job.

    Usage:
        resolver = ConfigurationResolver()
        configuration = resolver.resolve()
    """

    def __init__(
        self,
        file_name: Optional[str] = None,
        search_path: Optional[Iterable[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the resolver.

        Args:
            file_name: Explicit configuration file name (skips the env lookup)
            search_path: Fallback directories (defaults to sys.path at resolve time)
            environ: Environment mapping (defaults to os.environ)
        """
        self.file_name = file_name
        self.search_path = list(search_path) if search_path is not None else None
        self.environ = environ

    def source_name(self) -> str:
        """Return the configuration file name to look for."""
        if self.file_name:
            return self.file_name
        env = os.environ if self.environ is None else self.environ
        override = env.get(CONFIGURATION_FILE_ENV)
        if override and override.strip():
            return override.strip()
        return DEFAULT_CONFIGURATION_FILE

    def search_locations(self) -> List[Path]:
        """Directories consulted in order: working directory, then search path."""
        locations = [Path.cwd()]
        entries = sys.path if self.search_path is None else self.search_path
        for entry in entries:
            locations.append(Path(entry) if entry else Path.cwd())
        return locations

    def locate(self) -> Path:
        """Find the configuration file.

        Raises:
            ConfigurationNotFoundError: If no location holds the file
        """
        name = self.source_name()
        candidate = Path(name)
        if candidate.is_absolute():
            if candidate.is_file():
                return candidate
            raise ConfigurationNotFoundError(name, [str(candidate.parent)])

        searched = []
        for directory in self.search_locations():
            path = directory / candidate
            if path.is_file():
                return path
            searched.append(str(directory))
        raise ConfigurationNotFoundError(name, searched)

    def resolve(self) -> AuthleteConfiguration:
        """Locate, parse and validate the configuration file.

        Raises:
            ConfigurationNotFoundError: No configuration file was found
            ConfigurationParseError: The file was found but is invalid
        """
        path = self.locate()
        logger.info("Loading Authlete configuration from %s", path)
        properties = load_properties(path)
        return AuthleteConfiguration.from_properties(properties, str(path))
