"""Language tag parsing and validation module."""

from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .registry import (
    EXTLANG,
    GRANDFATHERED,
    LANGUAGE,
    REDUNDANT,
    REGION,
    SCRIPT,
    VARIANT,
    Registry,
    TagRecord,
    get_registry,
)
from .subtag import Subtag

PLAIN_TAG = "tag"

# Private-use and extension subtags are limited to 8 characters (RFC 5646 section 2.1).
MAX_SUBTAG_LENGTH = 8

# Canonical order of the subtag types within a tag.
SUBTAG_PRIORITY: Dict[str, int] = {
    LANGUAGE: 4,
    EXTLANG: 5,
    SCRIPT: 6,
    REGION: 7,
    VARIANT: 8,
}


class TagErrorCode(IntEnum):
    ERR_DEPRECATED = 1
    ERR_NO_LANGUAGE = 2
    ERR_UNKNOWN = 3
    ERR_TOO_LONG = 4
    ERR_EXTRA_REGION = 5
    ERR_EXTRA_EXTLANG = 6
    ERR_EXTRA_SCRIPT = 7
    ERR_DUPLICATE_VARIANT = 8
    ERR_WRONG_ORDER = 9
    ERR_SUPPRESS_SCRIPT = 10
    ERR_SUBTAG_DEPRECATED = 11
    ERR_EXTRA_LANGUAGE = 12


_EXTRA_SUBTAG_CODES: Dict[str, TagErrorCode] = {
    LANGUAGE: TagErrorCode.ERR_EXTRA_LANGUAGE,
    EXTLANG: TagErrorCode.ERR_EXTRA_EXTLANG,
    SCRIPT: TagErrorCode.ERR_EXTRA_SCRIPT,
    REGION: TagErrorCode.ERR_EXTRA_REGION,
}


@dataclass(frozen=True)
class TagError:
    """
    A single problem found while validating a tag. Validation errors are
    reported as values, never raised.
    """

    code: TagErrorCode
    """What kind of problem was found."""

    message: str
    """A human-readable description of the problem."""

    tag: str
    """The lowercase tag the problem was found in."""

    subtag: Optional[Union[Subtag, str]] = None
    """The offending subtag, or the raw component when it is not a registered subtag."""

    subtags: Tuple[Subtag, ...] = ()
    """For ``ERR_WRONG_ORDER``, the two subtags in the order they appear."""

    def __str__(self) -> str:
        return self.message


def is_singleton(code: str) -> bool:
    """
    Check whether a tag component introduces an extension or private-use
    sequence. The empty component is treated as one so that nothing after
    it is classified.
    """
    return len(code) < 2


@total_ordering
class Tag:
    """
    A language tag, validated against the language subtag registry.

    :param tag: The language tag, in any case.
    :type tag: str
    :param registry: Optional; The registry to validate against. Defaults to
                     the process-wide registry.
    :type registry: Optional[Registry]
    """

    ERR_DEPRECATED = TagErrorCode.ERR_DEPRECATED
    ERR_NO_LANGUAGE = TagErrorCode.ERR_NO_LANGUAGE
    ERR_UNKNOWN = TagErrorCode.ERR_UNKNOWN
    ERR_TOO_LONG = TagErrorCode.ERR_TOO_LONG
    ERR_EXTRA_REGION = TagErrorCode.ERR_EXTRA_REGION
    ERR_EXTRA_EXTLANG = TagErrorCode.ERR_EXTRA_EXTLANG
    ERR_EXTRA_SCRIPT = TagErrorCode.ERR_EXTRA_SCRIPT
    ERR_DUPLICATE_VARIANT = TagErrorCode.ERR_DUPLICATE_VARIANT
    ERR_WRONG_ORDER = TagErrorCode.ERR_WRONG_ORDER
    ERR_SUPPRESS_SCRIPT = TagErrorCode.ERR_SUPPRESS_SCRIPT
    ERR_SUBTAG_DEPRECATED = TagErrorCode.ERR_SUBTAG_DEPRECATED
    ERR_EXTRA_LANGUAGE = TagErrorCode.ERR_EXTRA_LANGUAGE

    _tag: str
    """The lowercase tag."""

    _record: Optional[TagRecord]
    """The grandfathered or redundant registration of the whole tag, if any."""

    _registry: Registry
    """The registry the tag is validated against."""

    def __init__(self, tag: str, registry: Optional[Registry] = None) -> None:
        # Matching is case-insensitive (RFC 5646 section 2.1.1).
        tag = tag.lower()
        registry = registry if registry is not None else get_registry()

        self._tag = tag
        self._registry = registry
        self._record = None

        types = registry.types(tag)
        for record_type in (GRANDFATHERED, REDUNDANT):
            if record_type in types:
                record = registry.records[types[record_type]]
                if isinstance(record, TagRecord):
                    self._record = record
                break

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._tag == other._tag

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._tag < other._tag

    def __hash__(self) -> int:
        return hash(self._tag)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f'<Tag "{self.format()}">'

    @property
    def tag(self) -> str:
        """The lowercase tag."""
        return self._tag

    @property
    def record(self) -> Optional[TagRecord]:
        """The grandfathered or redundant registration of the tag, if any."""
        return self._record

    def type(self) -> str:
        """
        Return ``grandfathered`` or ``redundant`` for tags registered as a
        whole, and ``tag`` for any other tag.
        """
        if self._record is not None:
            return self._record.type
        return PLAIN_TAG

    def added(self) -> Optional[str]:
        return self._record.added if self._record is not None else None

    def deprecated(self) -> Optional[str]:
        return self._record.deprecated if self._record is not None else None

    def descriptions(self) -> List[str]:
        """
        Return the descriptions of a grandfathered or redundant tag.

        :return: The descriptions in registry order, or an empty list for other tags.
        :rtype: List[str]
        """
        if self._record is None:
            return []
        return list(self._record.descriptions)

    def preferred(self) -> Optional["Tag"]:
        """
        Return the tag that should be used instead of a grandfathered or
        redundant tag, if the registry names one.

        :return: The preferred tag, or None.
        :rtype: Optional[Tag]
        """
        if self._record is None or not self._record.preferred_value:
            return None
        return Tag(self._record.preferred_value, self._registry)

    def _classify(self, code: str, first: bool) -> Optional[Subtag]:
        """
        Resolve a tag component to a subtag using its position and length.
        A code registered under several types gets the type its position
        makes possible, e.g. ``mt`` is a language first and a region after.
        """
        types = self._registry.types(code)
        if not types:
            return None

        if first and LANGUAGE in types:
            candidates: Tuple[str, ...] = (LANGUAGE,)
        elif len(code) == 2:
            # A language here is misplaced, and reported as such.
            candidates = (REGION, LANGUAGE)
        elif len(code) == 3:
            # Could be a numeric region code e.g. '001' for 'World'.
            candidates = (REGION, EXTLANG, LANGUAGE)
        elif len(code) == 4:
            # Could be a numeric variant e.g. '1996'.
            candidates = (VARIANT, SCRIPT)
        else:
            candidates = (VARIANT,)

        for candidate in candidates:
            if candidate in types:
                return Subtag(code, candidate, self._registry)
        return None

    def subtags(self) -> List[Subtag]:
        """
        Split the tag into its registered subtags.
        Each component yields at most one subtag, of the type its position
        allows; use :func:`bcp47_tags.subtags_of` for every registered type.
        Grandfathered tags do not decompose and have no subtags. Components
        that are not registered are skipped, and nothing from the first
        singleton (extensions and private use) onwards is included.

        :return: The subtags, in tag order.
        :rtype: List[Subtag]
        """
        if self._record is not None and self._record.type == GRANDFATHERED:
            return []

        subtags = []
        for i, code in enumerate(self._tag.split("-")):
            if is_singleton(code):
                break
            subtag = self._classify(code, i == 0)
            if subtag is not None:
                subtags.append(subtag)
        return subtags

    def _find(self, type: str) -> Optional[Subtag]:
        for subtag in self.subtags():
            if subtag.type() == type:
                return subtag
        return None

    def language(self) -> Optional[Subtag]:
        """
        Return the first language subtag of the tag (e.g. ``es`` in ``es-419``).
        """
        return self._find(LANGUAGE)

    def region(self) -> Optional[Subtag]:
        """
        Return the first region subtag of the tag (e.g. ``419`` in ``es-419``).
        """
        return self._find(REGION)

    def valid(self) -> bool:
        return not self.errors()

    def errors(self) -> List[TagError]:
        """
        Validate the tag against the grammar of RFC 5646 and the registry.

        Grandfathered and redundant tags are only checked for deprecation.
        Other tags are checked for unknown, empty and overlong components, a leading
        language subtag, extra or duplicate subtags, a redundant script, the
        order of the subtags and deprecated subtags, in that order.

        :return: The problems found, in the order described above. Empty for a valid tag.
        :rtype: List[TagError]
        """
        tag = self._tag
        errors: List[TagError] = []

        def error(
            code: TagErrorCode,
            message: str,
            subtag: Optional[Union[Subtag, str]] = None,
            subtags: Tuple[Subtag, ...] = (),
        ) -> None:
            errors.append(TagError(code, message, tag, subtag, subtags))

        record = self._record
        if record is not None:
            if record.deprecated:
                message = f"The tag '{tag}' is deprecated."

                # A deprecated record without a preferred value has no replacement (RFC 5646 section 3.1.6).
                if record.preferred_value:
                    message += f" Use '{record.preferred_value}' instead."
                error(TagErrorCode.ERR_DEPRECATED, message)
            return errors

        codes = tag.split("-")
        for i, code in enumerate(codes):
            if not code:
                # RFC 5646 section 2.1: subtags are one to eight characters.
                if tag:
                    error(TagErrorCode.ERR_UNKNOWN, f"Empty subtag in '{tag}'.", code)
                break
            if is_singleton(code):
                following = codes[i + 1 :]
                if not following:
                    error(
                        TagErrorCode.ERR_UNKNOWN,
                        f"The singleton '{code}' is not followed by a subtag.",
                        code,
                    )
                for private in following:
                    if not private:
                        error(TagErrorCode.ERR_UNKNOWN, f"Empty subtag in '{tag}'.", private)
                        break
                    if len(private) > MAX_SUBTAG_LENGTH:
                        error(
                            TagErrorCode.ERR_TOO_LONG,
                            f"The private-use subtag '{private}' is too long.",
                            private,
                        )
                break
            if not self._registry.types(code):
                error(TagErrorCode.ERR_UNKNOWN, f"Unknown code '{code}'", code)

        subtags = self.subtags()
        # The first component itself must be a language, not just the first registered one.
        if LANGUAGE not in self._registry.types(codes[0]):
            if not tag:
                error(TagErrorCode.ERR_NO_LANGUAGE, "Empty tag.")
            else:
                error(
                    TagErrorCode.ERR_NO_LANGUAGE,
                    f"Missing language tag in '{tag}'.",
                    codes[0],
                )
        else:
            self._check_structure(subtags, error)

        for subtag in subtags:
            if subtag.deprecated():
                error(
                    TagErrorCode.ERR_SUBTAG_DEPRECATED,
                    f"The subtag '{subtag.format()}' is deprecated.",
                    subtag,
                )

        return errors

    @staticmethod
    def _check_structure(subtags: List[Subtag], error: Callable[..., None]) -> None:
        found: Dict[str, List[Subtag]] = {type: [] for type in SUBTAG_PRIORITY}
        language = subtags[0]

        for subtag in subtags:
            type = subtag.type()
            found[type].append(subtag)
            formatted = subtag.format()

            if type == SCRIPT and len(found[SCRIPT]) == 1:
                script = language.script()
                if script is not None and script == subtag:
                    error(
                        TagErrorCode.ERR_SUPPRESS_SCRIPT,
                        f"The script subtag '{formatted}' is the same as the language suppress-script.",
                        subtag,
                    )
            elif type in _EXTRA_SUBTAG_CODES and len(found[type]) > 1:
                error(
                    _EXTRA_SUBTAG_CODES[type],
                    f"Extra {type} subtag '{formatted}' found.",
                    subtag,
                )
            elif type == VARIANT and subtag in found[VARIANT][:-1]:
                error(
                    TagErrorCode.ERR_DUPLICATE_VARIANT,
                    f"Duplicate variant subtag '{formatted}' found.",
                    subtag,
                )

        for current, following in zip(subtags, subtags[1:]):
            if SUBTAG_PRIORITY[current.type()] > SUBTAG_PRIORITY[following.type()]:
                error(
                    TagErrorCode.ERR_WRONG_ORDER,
                    f"The subtag '{current.format()}' should not appear before '{following.format()}'.",
                    current,
                    (current, following),
                )

    def format(self) -> str:
        """
        Format the tag according to the case conventions of RFC 5646
        section 2.1.1: two-letter subtags in uppercase, four-letter subtags
        in title case, except for the first subtag and a subtag following a
        singleton, which stay lowercase.

        :return: The formatted tag.
        :rtype: str
        """
        codes = self._tag.split("-")
        formatted = codes[:1]
        for previous, code in zip(codes, codes[1:]):
            if len(previous) == 1:
                formatted.append(code)
            elif len(code) == 2:
                formatted.append(code.upper())
            elif len(code) == 4:
                formatted.append(code[0].upper() + code[1:])
            else:
                formatted.append(code)
        return "-".join(formatted)
