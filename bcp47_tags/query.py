"""Registry lookup and search functions."""

import logging
from typing import Callable, Iterable, List, Optional, Pattern, Tuple, Union

from .exceptions import NotAMacrolanguageError
from .registry import LANGUAGE, REGION, SUBTAG_TYPES, Registry, SubtagRecord, get_registry
from .subtag import Subtag
from .tag import Tag

logger = logging.getLogger(__name__)


def _registry_or_default(registry: Optional[Registry]) -> Registry:
    return registry if registry is not None else get_registry()


def tag(tag: str, registry: Optional[Registry] = None) -> Tag:
    return Tag(tag, _registry_or_default(registry))


def check(tag: str, registry: Optional[Registry] = None) -> bool:
    """
    Check whether a language tag is valid.

    :param tag: The language tag.
    :type tag: str
    :param registry: Optional; The registry to check against.
    :type registry: Optional[Registry]
    :return: True if the tag has no errors, False otherwise.
    :rtype: bool
    """
    return Tag(tag, _registry_or_default(registry)).valid()


def types_of(subtag: str, registry: Optional[Registry] = None) -> List[str]:
    """
    Return the types a subtag is registered under, in registry order.
    Grandfathered and redundant registrations are not subtags and are left out.

    :param subtag: The subtag, in any case.
    :type subtag: str
    :param registry: Optional; The registry to look the subtag up in.
    :type registry: Optional[Registry]
    :return: The registered types, empty if the subtag is unknown.
    :rtype: List[str]
    """
    types = _registry_or_default(registry).types(subtag)
    return [type for type in types if type in SUBTAG_TYPES]


def subtags_of(
    subtags: Union[str, Iterable[str]],
    registry: Optional[Registry] = None,
) -> List[Subtag]:
    """
    Resolve one or more subtags under every type they are registered under.

    :param subtags: A subtag or an iterable of subtags.
    :type subtags: Union[str, Iterable[str]]
    :param registry: Optional; The registry to resolve against.
    :type registry: Optional[Registry]
    :return: One Subtag per subtag and type, unknown subtags are skipped.
    :rtype: List[Subtag]
    """
    registry = _registry_or_default(registry)
    if isinstance(subtags, str):
        subtags = [subtags]
    return [
        Subtag(subtag, type, registry)
        for subtag in subtags
        for type in types_of(subtag, registry)
    ]


def filter_unknown(subtags: Iterable[str], registry: Optional[Registry] = None) -> List[str]:
    """
    Return the subtags that are not registered under any subtag type.
    """
    registry = _registry_or_default(registry)
    return [subtag for subtag in subtags if not types_of(subtag, registry)]


def _description_matcher(query: Union[str, Pattern[str]]) -> Callable[[str], bool]:
    if isinstance(query, str):
        # All-lowercase queries are case-insensitive.
        if query == query.lower():
            return lambda description: query in description.lower()
        return lambda description: query in description
    return lambda description: query.search(description) is not None


def search(
    query: Union[str, Pattern[str]],
    include_whole_tags: bool = False,
    registry: Optional[Registry] = None,
) -> List[Union[Subtag, Tag]]:
    """
    Search the registry by description.
    A string query matches descriptions containing it, ignoring case when
    the query is all lowercase. A compiled regular expression matches
    descriptions it can be found in with ``search``. Results are ordered by
    the length of their shortest matching description, so exact matches
    come first; ties keep registry order.

    :param query: The text or compiled pattern to look for.
    :type query: Union[str, Pattern[str]]
    :param include_whole_tags: Whether to include grandfathered and redundant tags in the results.
    :type include_whole_tags: bool
    :param registry: Optional; The registry to search.
    :type registry: Optional[Registry]
    :return: The matching subtags (and tags), best matches first.
    :rtype: List[Union[Subtag, Tag]]
    """
    registry = _registry_or_default(registry)
    matches = _description_matcher(query)
    logger.debug("Searching registry descriptions for %r", query)

    results: List[Tuple[int, Union[Subtag, Tag]]] = []
    for record in registry:
        matched = [len(d) for d in record.descriptions if matches(d)]
        if not matched:
            continue
        if isinstance(record, SubtagRecord):
            results.append((min(matched), Subtag(record.subtag, record.type, registry)))
        elif include_whole_tags:
            results.append((min(matched), Tag(record.name, registry)))

    results.sort(key=lambda result: result[0])
    return [result for _, result in results]


def languages_of_macrolanguage(
    macrolanguage: str,
    registry: Optional[Registry] = None,
) -> List[Subtag]:
    """
    Return the languages and extlangs encompassed by a macrolanguage.

    :param macrolanguage: The macrolanguage subtag, in any case.
    :type macrolanguage: str
    :param registry: Optional; The registry to look in.
    :type registry: Optional[Registry]
    :raises NotAMacrolanguageError: If the subtag is not a macrolanguage.
    :return: The encompassed subtags, in registry order.
    :rtype: List[Subtag]
    """
    registry = _registry_or_default(registry)
    macrolanguage = macrolanguage.lower()
    if macrolanguage not in registry.macrolanguages:
        err = f"'{macrolanguage}' is not a macrolanguage."
        raise NotAMacrolanguageError(err)

    return [
        Subtag(record.subtag, record.type, registry)
        for record in registry
        if isinstance(record, SubtagRecord)
        and record.macrolanguage is not None
        and record.macrolanguage.lower() == macrolanguage
    ]


def type_of(subtag: str, type: str, registry: Optional[Registry] = None) -> Optional[Subtag]:
    """
    Return the subtag registered under the given type, or None.
    """
    registry = _registry_or_default(registry)
    type = type.lower()
    if type not in SUBTAG_TYPES or type not in registry.types(subtag):
        return None
    return Subtag(subtag, type, registry)


def language_of(subtag: str, registry: Optional[Registry] = None) -> Optional[Subtag]:
    return type_of(subtag, LANGUAGE, registry)


def region_of(subtag: str, registry: Optional[Registry] = None) -> Optional[Subtag]:
    return type_of(subtag, REGION, registry)


def registry_snapshot_date(registry: Optional[Registry] = None) -> str:
    """
    Return the ``File-Date`` of the registry, e.g. ``2021-08-06``.
    """
    return _registry_or_default(registry).file_date
