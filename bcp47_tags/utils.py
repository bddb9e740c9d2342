"""Utility functions for locating the language subtag registry."""

import importlib.resources
import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import RegistryError

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "language-subtag-registry.txt"

# Explicit registry file to load instead of the cached or bundled copy:
BCP47_REGISTRY_PATH_ENV_VAR = "BCP47_REGISTRY_PATH"

BCP47_CACHE_PATH_ENV_VAR = "BCP47_CACHE_PATH"  # Registry download path

BCP47_REGISTRY_URL_ENV_VAR = "BCP47_REGISTRY_URL"

IANA_REGISTRY_URL = (
    "https://www.iana.org/assignments/language-subtag-registry/"
    "language-subtag-registry"
)


def get_registry_url() -> str:
    """
    Get the URL the registry is downloaded from.

    :return: The value of ``BCP47_REGISTRY_URL`` if set, otherwise the IANA URL.
    :rtype: str
    """
    return os.environ.get(BCP47_REGISTRY_URL_ENV_VAR, IANA_REGISTRY_URL)


def get_cache_path() -> Path:
    """
    Get the directory downloaded registries are stored in.
    This function retrieves the path from the environment variable
    specified by ``BCP47_CACHE_PATH_ENV_VAR``. If the environment variable is
    not set, it defaults to a path in the user's home directory under
    ``.cache/bcp47_tags``. The function ensures that the directory exists
    before returning it.

    :return: The download path for the registry.
    :rtype: Path
    """
    path = _cache_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def _cache_dir() -> Path:
    return Path(
        os.environ.get(
            BCP47_CACHE_PATH_ENV_VAR,
            str(Path.home() / ".cache" / "bcp47_tags"),
        )
    )


def get_cached_registry_path() -> Path:
    """
    Get the location of the downloaded registry, whether or not it exists.
    The cache directory is not created.

    :return: The path of the registry file in the cache directory.
    :rtype: Path
    """
    return _cache_dir() / REGISTRY_FILENAME


def get_bundled_registry_path() -> Path:
    """
    Get the registry snapshot shipped with the package.

    :return: The path of the bundled registry file.
    :rtype: Path
    """
    return Path(
        str(importlib.resources.files("bcp47_tags").joinpath("data", REGISTRY_FILENAME))
    )


def get_registry_path(path: Optional[str] = None) -> Path:
    """
    Resolve which registry file to load.
    An explicit ``path`` wins, then the ``BCP47_REGISTRY_PATH`` environment
    variable, then a previously downloaded registry in the cache directory,
    and finally the snapshot bundled with the package.

    :param path: Optional; An explicit registry file.
    :type path: Optional[str]
    :raises RegistryError: If an explicitly requested file does not exist.
    :return: The path of the registry file to load.
    :rtype: Path
    """
    explicit = path or os.environ.get(BCP47_REGISTRY_PATH_ENV_VAR)
    if explicit:
        registry_path = Path(explicit)
        if not registry_path.is_file():
            err = f"registry file does not exist: {registry_path}"
            raise RegistryError(err)
        logger.debug("Using registry file: %s", registry_path)
        return registry_path

    cached = get_cached_registry_path()
    if cached.is_file():
        logger.debug("Using downloaded registry: %s", cached)
        return cached

    bundled = get_bundled_registry_path()
    logger.debug("Using bundled registry: %s", bundled)
    return bundled
