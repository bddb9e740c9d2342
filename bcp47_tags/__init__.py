"""BCP 47 language tag validation against the IANA language subtag registry."""

__all__ = [
    "Tag",
    "TagError",
    "TagErrorCode",
    "Subtag",
    "Registry",
    "load_registry",
    "get_registry",
    "download_registry",
    "tag",
    "check",
    "types_of",
    "subtags_of",
    "filter_unknown",
    "search",
    "languages_of_macrolanguage",
    "language_of",
    "region_of",
    "type_of",
    "registry_snapshot_date",
    "exceptions",
    "utils",
]

import logging

from . import exceptions, utils
from .download_registry import download_registry
from .query import (
    check,
    filter_unknown,
    language_of,
    languages_of_macrolanguage,
    region_of,
    registry_snapshot_date,
    search,
    subtags_of,
    tag,
    type_of,
    types_of,
)
from .registry import Registry, get_registry, load_registry
from .subtag import Subtag
from .tag import Tag, TagError, TagErrorCode

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
