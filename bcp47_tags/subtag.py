"""Language subtag resolution module."""

from typing import Any, List, Optional

from .exceptions import SubtagError
from .registry import EXTLANG, LANGUAGE, REGION, SCRIPT, Registry, SubtagRecord, get_registry


class Subtag:
    """
    A single subtag registered in the language subtag registry under a type.

    :param subtag: The subtag, in any case.
    :type subtag: str
    :param type: The registry type (``language``, ``extlang``, ``script``,
                 ``region`` or ``variant``), in any case.
    :type type: str
    :param registry: Optional; The registry to resolve against. Defaults to
                     the process-wide registry.
    :type registry: Optional[Registry]
    :raises SubtagError: With code ``ERR_NONEXISTENT`` if the subtag is not
                         registered under the type, or ``ERR_TAG`` if the
                         registration is a grandfathered or redundant tag.
    """

    ERR_NONEXISTENT = SubtagError.ERR_NONEXISTENT
    ERR_TAG = SubtagError.ERR_TAG

    _subtag: str
    """The lowercase subtag."""

    _type: str
    """The lowercase registry type."""

    _record: SubtagRecord
    """The registry record of the subtag."""

    _registry: Registry
    """The registry the subtag was resolved against."""

    def __init__(
        self,
        subtag: str,
        type: str,
        registry: Optional[Registry] = None,
    ) -> None:
        # Matching is case-insensitive (RFC 5646 section 2.1.1).
        subtag = subtag.lower()
        type = type.lower()
        registry = registry if registry is not None else get_registry()

        types = registry.types(subtag)
        if not types:
            err = f"Non-existent subtag '{subtag}'."
            raise SubtagError(err, SubtagError.ERR_NONEXISTENT)

        i = types.get(type)
        if i is None:
            err = f"Non-existent subtag '{subtag}' of type '{type}'."
            raise SubtagError(err, SubtagError.ERR_NONEXISTENT)

        record = registry.records[i]
        if not isinstance(record, SubtagRecord):
            err = f"'{subtag}' is a '{type}' tag."
            raise SubtagError(err, SubtagError.ERR_TAG)

        self._subtag = subtag
        self._type = type
        self._record = record
        self._registry = registry

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Subtag):
            return NotImplemented
        return (self._subtag, self._type) == (other._subtag, other._type)

    def __hash__(self) -> int:
        return hash((self._subtag, self._type))

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f'<Subtag "{self.format()}" ({self._type})>'

    @property
    def record(self) -> SubtagRecord:
        """The registry record of the subtag."""
        return self._record

    def type(self) -> str:
        return self._type

    def descriptions(self) -> List[str]:
        """
        Return the descriptions of the subtag. Every subtag has at least one.

        :return: The descriptions in registry order.
        :rtype: List[str]
        """
        return list(self._record.descriptions)

    def preferred(self) -> Optional["Subtag"]:
        """
        Return the subtag that should be used instead of this one, if any.
        The preferred value of an extlang is a language (RFC 5646 section 3.1.8).

        :return: The preferred subtag, or None.
        :rtype: Optional[Subtag]
        """
        preferred = self._record.preferred_value
        if not preferred:
            return None
        type = LANGUAGE if self._type == EXTLANG else self._type
        return Subtag(preferred, type, self._registry)

    def script(self) -> Optional["Subtag"]:
        """
        Return the suppress-script of the subtag as a script subtag, if any.

        :return: The script that should not be written with this language, or None.
        :rtype: Optional[Subtag]
        """
        script = self._record.suppress_script
        if not script:
            return None
        return Subtag(script, SCRIPT, self._registry)

    def scope(self) -> Optional[str]:
        return self._record.scope

    def deprecated(self) -> Optional[str]:
        return self._record.deprecated

    def added(self) -> Optional[str]:
        return self._record.added

    def comments(self) -> List[str]:
        return list(self._record.comments)

    def format(self) -> str:
        """
        Format the subtag according to the case conventions of RFC 5646
        section 2.1.1: regions in uppercase, scripts in title case and
        everything else in lowercase.

        :return: The formatted subtag.
        :rtype: str
        """
        subtag = self._subtag
        if self._type == REGION:
            return subtag.upper()
        if self._type == SCRIPT:
            return subtag[0].upper() + subtag[1:]
        return subtag
