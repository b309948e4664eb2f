"""Creation and process-wide caching of Authlete API handles."""
from __future__ import annotations
import importlib
import inspect
import logging
import threading
from typing import Callable, Optional, Type, Union

from authlete_client.config.resolver import ConfigurationResolver
from authlete_client.config.settings import ApiVersion, AuthleteConfiguration
from .api import AuthleteApi, AuthleteApiV2, AuthleteApiV3

logger = logging.getLogger(__name__)

IMPLEMENTATIONS = {
    ApiVersion.V2: AuthleteApiV2,
    ApiVersion.V3: AuthleteApiV3,
}


def _load_class(name: str) -> type:
    """Import a class from 'package.module:Class' or 'package.module.Class'."""
    if ":" in name:
        module_name, _, attr = name.partition(":")
    else:
        module_name, _, attr = name.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"{name} is not a valid class name.")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise ValueError(f"{name} is not found.") from exc


def create_api(
    configuration: AuthleteConfiguration,
    implementation: Union[str, Type[AuthleteApi], None] = None,
) -> AuthleteApi:
    """Create an Authlete API handle.

    Args:
        configuration: Authlete configuration
        implementation: Handle class, or its import path; defaults to the
            class matching ``configuration.api_version``

    Returns:
        New AuthleteApi instance

    Raises:
        ValueError: If configuration is None or the class cannot be found
        TypeError: If the class is not a concrete AuthleteApi subclass
        RuntimeError: If the class constructor fails (e.g. invalid DPoP key)
    """
    if configuration is None:
        raise ValueError("configuration is None.")

    if implementation is None:
        cls = IMPLEMENTATIONS[configuration.api_version]
    elif isinstance(implementation, str):
        cls = _load_class(implementation)
    else:
        cls = implementation

    if not isinstance(cls, type) or not issubclass(cls, AuthleteApi):
        raise TypeError(f"{implementation} does not implement AuthleteApi.")
    if inspect.isabstract(cls):
        raise TypeError(f"{cls.__name__} is abstract and cannot be instantiated.")

    try:
        return cls(configuration)
    except Exception as exc:
        raise RuntimeError(f"Failed to create an instance of {cls.__name__}: {exc}") from exc


class ApiRegistry:
    """Lazily builds one AuthleteApi handle and serves it for its lifetime.

    The handle is constructed on the first ``get_instance`` call under a
    lock; later calls return it without locking. A failed construction
    stores nothing, so the next call retries from scratch. There is no
    reset: the handle lives as long as the registry.
    """

    def __init__(
        self,
        resolver: Optional[ConfigurationResolver] = None,
        factory: Callable[[AuthleteConfiguration], AuthleteApi] = create_api,
    ):
        self._resolver = resolver or ConfigurationResolver()
        self._factory = factory
        self._lock = threading.Lock()
        self._api: Optional[AuthleteApi] = None

    @property
    def initialized(self) -> bool:
        return self._api is not None

    def get_instance(self) -> AuthleteApi:
        """Return the cached handle, building it on first use.

        Raises:
            ConfigurationNotFoundError: No configuration file (first use only)
            ConfigurationParseError: Invalid configuration file (first use only)
        """
        api = self._api
        if api is not None:
            return api

        with self._lock:
            if self._api is not None:
                return self._api

            configuration = self._resolver.resolve()
            api = self._factory(configuration)
            logger.info(
                "Created %s for %s", type(api).__name__, configuration.base_url
            )
            # Publish only a fully constructed handle
            self._api = api
            return api


_default_registry = ApiRegistry()


def get_default_api() -> AuthleteApi:
    """Return the process-wide AuthleteApi built from authlete.properties.

    The file name can be changed with the AUTHLETE_CONFIGURATION_FILE
    environment variable. The working directory and then sys.path are
    searched.
    """
    return _default_registry.get_instance()
