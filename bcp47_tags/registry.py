"""Language subtag registry store."""

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import RegistryError
from .record_jar import Fields, parse_record_jar
from .utils import get_registry_path

logger = logging.getLogger(__name__)

LANGUAGE = "language"
EXTLANG = "extlang"
SCRIPT = "script"
REGION = "region"
VARIANT = "variant"
GRANDFATHERED = "grandfathered"
REDUNDANT = "redundant"

SUBTAG_TYPES: Tuple[str, ...] = (LANGUAGE, EXTLANG, SCRIPT, REGION, VARIANT)
"""Record types registered under a single subtag."""

TAG_TYPES: Tuple[str, ...] = (GRANDFATHERED, REDUNDANT)
"""Record types registered under a whole tag."""

MACROLANGUAGE_SCOPE = "macrolanguage"


@dataclass(frozen=True, kw_only=True)
class Record:
    """
    A single registration from the language subtag registry.

    Only the concrete :class:`SubtagRecord` and :class:`TagRecord` are
    ever stored in a :class:`Registry`.
    """

    type: str
    """One of :data:`SUBTAG_TYPES` or :data:`TAG_TYPES`."""

    descriptions: Tuple[str, ...] = ()
    """Descriptions in registry order."""

    added: Optional[str] = None
    deprecated: Optional[str] = None
    preferred_value: Optional[str] = None
    suppress_script: Optional[str] = None
    scope: Optional[str] = None
    macrolanguage: Optional[str] = None
    prefixes: Tuple[str, ...] = ()
    comments: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """The registered subtag or tag, as written in the registry."""
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class SubtagRecord(Record):
    """A language, extlang, script, region or variant registration."""

    subtag: str

    @property
    def name(self) -> str:
        return self.subtag


@dataclass(frozen=True, kw_only=True)
class TagRecord(Record):
    """A grandfathered or redundant whole-tag registration."""

    tag: str

    @property
    def name(self) -> str:
        return self.tag


def single_field(fields: Fields, name: str, required: bool = False) -> Optional[str]:
    """
    Return the value of a field that the registry allows only once per record.

    :param fields: The parsed fields of one registry entry.
    :type fields: Fields
    :param name: The field name, e.g. ``Preferred-Value``.
    :type name: str
    :param required: Whether a missing field is an error.
    :type required: bool
    :raises RegistryError: If the field repeats, or is required and missing.
    :return: The field value, or None.
    :rtype: Optional[str]
    """
    values = fields.get(name, [])
    if len(values) > 1:
        err = f"registry field {name!r} repeats in record {fields!r}"
        raise RegistryError(err)
    if not values:
        if required:
            err = f"registry record has no {name!r} field: {fields!r}"
            raise RegistryError(err)
        return None
    return values[0]


def record_from_jar(fields: Fields) -> Record:
    """
    Build a registry record from the fields of a parsed record-jar record.

    :param fields: The parsed fields of one registry entry.
    :type fields: Fields
    :raises RegistryError: If the record has no type, a repeated single-valued
                           field, or neither (or both) of a subtag and a tag.
    :return: A :class:`SubtagRecord` or a :class:`TagRecord`.
    :rtype: Record
    """
    record_type = (single_field(fields, "Type", required=True) or "").lower()
    subtag = single_field(fields, "Subtag")
    tag = single_field(fields, "Tag")
    common = dict(
        type=record_type,
        descriptions=tuple(fields.get("Description", ())),
        added=single_field(fields, "Added"),
        deprecated=single_field(fields, "Deprecated"),
        preferred_value=single_field(fields, "Preferred-Value"),
        suppress_script=single_field(fields, "Suppress-Script"),
        scope=single_field(fields, "Scope"),
        macrolanguage=single_field(fields, "Macrolanguage"),
        prefixes=tuple(fields.get("Prefix", ())),
        comments=tuple(fields.get("Comments", ())),
    )

    if subtag is not None and tag is None and record_type in SUBTAG_TYPES:
        return SubtagRecord(subtag=subtag, **common)
    if tag is not None and subtag is None and record_type in TAG_TYPES:
        return TagRecord(tag=tag, **common)
    err = f"invalid registry record {fields!r}"
    raise RegistryError(err)


class Registry:
    """
    An immutable, loaded copy of the language subtag registry.

    :param records: The registry records, in registry order.
    :type records: Iterable[Record]
    :param file_date: The ``File-Date`` of the registry snapshot.
    :type file_date: str
    :raises RegistryError: If two records share the same lowercase name and type.
    """

    records: Tuple[Record, ...]
    """The registry records. A record's position is its index key."""

    index: Mapping[str, Mapping[str, int]]
    """Lowercase subtag or tag → record type → record position."""

    macrolanguages: FrozenSet[str]
    """Lowercase subtags of the languages with the macrolanguage scope."""

    file_date: str
    """The date of the registry snapshot (``YYYY-MM-DD``)."""

    def __init__(self, records: Iterable[Record], file_date: str) -> None:
        self.records = tuple(records)
        self.file_date = file_date

        index: Dict[str, Dict[str, int]] = {}
        macrolanguages = set()
        for i, record in enumerate(self.records):
            # Names are case-insensitive (RFC 5646 section 2.1.1).
            name = record.name.lower()
            types = index.setdefault(name, {})
            if record.type in types:
                err = f"duplicate {record.type} record for {record.name!r}"
                raise RegistryError(err)
            types[record.type] = i
            if record.scope == MACROLANGUAGE_SCOPE:
                macrolanguages.add(name)

        self.index = index
        self.macrolanguages = frozenset(macrolanguages)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __repr__(self) -> str:
        return f"<Registry {self.file_date} ({len(self)} records)>"

    def types(self, name: str) -> Mapping[str, int]:
        """
        Look up the record types registered for a subtag or tag.

        :param name: The subtag or tag, in any case.
        :type name: str
        :return: A mapping of record type to record position, empty when unregistered.
        :rtype: Mapping[str, int]
        """
        return self.index.get(name.lower(), {})

    def lookup(self, name: str, record_type: str) -> Optional[Record]:
        """
        Return the record registered for a subtag or tag under a type, or None.
        """
        i = self.types(name).get(record_type)
        if i is None:
            return None
        return self.records[i]

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Registry":
        """
        Build a registry from the lines of a registry file.
        The first record must hold the ``File-Date``.

        :param lines: The lines of the registry file.
        :type lines: Iterable[str]
        :raises RegistryError: If the text is not a valid registry.
        :return: The loaded registry.
        :rtype: Registry
        """
        try:
            jar_records = parse_record_jar(lines)
            meta = next(jar_records, None)
            if meta is None or "File-Date" not in meta:
                err = "registry has no File-Date"
                raise RegistryError(err)
            file_date = single_field(meta, "File-Date", required=True) or ""
            records: List[Record] = [record_from_jar(fields) for fields in jar_records]
        except ValueError as e:
            err = f"cannot parse registry: {e}"
            raise RegistryError(err) from e
        return cls(records, file_date)

    @classmethod
    def from_text(cls, text: str) -> "Registry":
        """Build a registry from the full text of a registry file."""
        return cls.from_lines(text.splitlines())


def load_registry(path: Optional[Union[str, Path]] = None) -> Registry:
    """
    Load the registry from a file.

    :param path: Optional; The registry file. When omitted, the file is
                 chosen by :func:`bcp47_tags.utils.get_registry_path`.
    :type path: Optional[Union[str, Path]]
    :raises RegistryError: If the file cannot be read or is not a valid registry.
    :return: The loaded registry.
    :rtype: Registry
    """
    registry_path = get_registry_path(str(path) if path is not None else None)
    logger.debug("Loading registry from %s", registry_path)
    try:
        with open(registry_path, encoding="utf-8") as f:
            registry = Registry.from_lines(f)
    except OSError as e:
        err = f"cannot read registry file {registry_path}"
        raise RegistryError(err) from e
    logger.debug("Loaded %r", registry)
    return registry


@functools.lru_cache(maxsize=None)
def get_registry() -> Registry:
    """
    Return the process-wide default registry, loading it on first use.
    Call ``get_registry.cache_clear()`` to reload it.

    :return: The default registry.
    :rtype: Registry
    """
    return load_registry()
