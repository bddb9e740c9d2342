"""
Parser for the record-jar format used by the IANA language subtag registry.

https://datatracker.ietf.org/doc/html/draft-phillips-record-jar-02
https://www.iana.org/assignments/language-subtag-registry/language-subtag-registry
"""

from typing import Dict, Generator, Iterable, List

# Continuation lines of a folded field value start with two spaces.
REGISTRY_INDENT = "  "

RECORD_SEPARATOR = "%%"

Fields = Dict[str, List[str]]
"""Field name → values in file order. ``Description``, ``Comments`` and ``Prefix`` may repeat."""


def parse_record_jar(
    lines: Iterable[str],
    indent: str = REGISTRY_INDENT,
) -> Generator[Fields, None, None]:
    """
    Yields records from an iterable of lines.

    Folded lines are joined to the previous value with a single space.
    Empty records (e.g. a trailing separator) are not yielded.

    :param lines: The lines of a record-jar document.
    :type lines: Iterable[str]
    :param indent: The prefix marking a continuation line.
    :type indent: str
    :raises ValueError: If a line is neither a field, a continuation nor a separator.
    :return: A generator of records.
    :rtype: Generator[Fields, None, None]
    """
    fields: Fields = {}
    last = None
    for line in lines:
        line_text = line.strip()
        if not line_text:
            continue
        if line.startswith(indent) and last is not None:
            last[-1] += " " + line_text
        elif line_text == RECORD_SEPARATOR:
            if fields:
                yield fields
            fields = {}
            last = None
        else:
            name, sep, value = line_text.partition(":")
            if not sep:
                err = f"malformed record-jar line: {line_text!r}"
                raise ValueError(err)
            last = fields.setdefault(name.strip(), [])
            last.append(value.strip())
    if fields:
        yield fields
