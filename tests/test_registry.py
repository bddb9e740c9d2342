"""Tests for loading the language subtag registry."""

from pathlib import Path

import pytest

from bcp47_tags import Registry, Subtag, Tag, check, get_registry, load_registry, search
from bcp47_tags.exceptions import RegistryError
from bcp47_tags.record_jar import parse_record_jar
from bcp47_tags.registry import SubtagRecord, TagRecord, single_field
from bcp47_tags.utils import (
    BCP47_CACHE_PATH_ENV_VAR,
    BCP47_REGISTRY_PATH_ENV_VAR,
    get_bundled_registry_path,
    get_registry_path,
)

SMALL_REGISTRY = """\
File-Date: 2000-01-01
%%
Type: language
Subtag: aa
Description: Alpha
Added: 2000-01-01
Suppress-Script: Aaaa
%%
Type: language
Subtag: bb
Description: Beta
Description: Second
Added: 2000-01-01
Deprecated: 2000-06-01
Preferred-Value: aa
%%
Type: language
Subtag: zz
Description: Zeta group
Added: 2000-01-01
Scope: macrolanguage
%%
Type: language
Subtag: zzy
Description: Zeta one
Added: 2000-01-01
Macrolanguage: zz
%%
Type: script
Subtag: Aaaa
Description: Alpha script
Added: 2000-01-01
%%
Type: region
Subtag: AA
Description: Alphaland
Added: 2000-01-01
Comments: A region spanning
  two lines
%%
Type: grandfathered
Tag: i-alpha
Description: Old alpha
Added: 1999-01-01
Deprecated: 2000-01-01
Preferred-Value: aa
%%
"""


@pytest.fixture
def small_registry() -> Registry:
    return Registry.from_text(SMALL_REGISTRY)


def test_parse_record_jar_folds_continuation_lines() -> None:
    """
    Test that continuation lines are joined to the previous value and that
    repeated fields keep every value.

    :raises AssertionError: If the records are parsed wrongly.
    """
    records = list(parse_record_jar(SMALL_REGISTRY.splitlines()))
    assert records[0] == {"File-Date": ["2000-01-01"]}
    assert records[2]["Description"] == ["Beta", "Second"]
    assert records[6]["Comments"] == ["A region spanning two lines"]
    assert len(records) == 8


def test_parse_record_jar_rejects_malformed_lines() -> None:
    with pytest.raises(ValueError):
        list(parse_record_jar(["Type: language", "not a field"]))


def test_registry_from_text(small_registry: Registry) -> None:
    """
    Test that a registry built from text has every record, its file date
    and its macrolanguages.

    :raises AssertionError: If the registry contents are wrong.
    """
    assert small_registry.file_date == "2000-01-01"
    assert len(small_registry) == 7
    assert small_registry.macrolanguages == frozenset({"zz"})
    assert dict(small_registry.types("AA")) == {"language": 0, "region": 5}
    assert small_registry.types("unknown") == {}

    record = small_registry.lookup("bb", "language")
    assert isinstance(record, SubtagRecord)
    assert record.descriptions == ("Beta", "Second")
    assert record.preferred_value == "aa"

    record = small_registry.lookup("I-ALPHA", "grandfathered")
    assert isinstance(record, TagRecord)
    assert record.name == "i-alpha"
    assert small_registry.lookup("bb", "region") is None


def test_registry_is_injectable(small_registry: Registry) -> None:
    """
    Test that tags, subtags and lookups can use a registry other than the
    default one.

    :raises AssertionError: If the given registry is not used.
    """
    assert Subtag("aa", "language", small_registry).script() == Subtag(
        "aaaa", "script", small_registry
    )
    assert check("aa-AA", registry=small_registry)
    assert not check("en", registry=small_registry)

    errors = Tag("aa-Aaaa", small_registry).errors()
    assert [e.code for e in errors] == [Tag.ERR_SUPPRESS_SCRIPT]

    errors = Tag("i-alpha", small_registry).errors()
    assert [e.message for e in errors] == [
        "The tag 'i-alpha' is deprecated. Use 'aa' instead."
    ]

    assert [r.format() for r in search("Alpha", registry=small_registry)] == [
        "aa",
        "AA",
        "Aaaa",
    ]


def test_duplicate_record_is_rejected() -> None:
    text = SMALL_REGISTRY + "Type: language\nSubtag: AA\nDescription: Again\n%%\n"
    with pytest.raises(RegistryError):
        Registry.from_text(text)


def test_missing_file_date_is_rejected() -> None:
    with pytest.raises(RegistryError):
        Registry.from_text("Type: language\nSubtag: aa\nDescription: Alpha\n%%\n")


def test_record_without_subtag_is_rejected() -> None:
    with pytest.raises(RegistryError):
        Registry.from_text("File-Date: 2000-01-01\n%%\nType: language\nDescription: Alpha\n")


def test_single_field() -> None:
    """
    Test that fields the registry allows once are read as a single value,
    and that a repeated or missing required field is rejected.

    :raises AssertionError: If a field is read or rejected wrongly.
    """
    fields = {"Type": ["language"], "Description": ["Alpha", "First"]}
    assert single_field(fields, "Type") == "language"
    assert single_field(fields, "Added") is None

    with pytest.raises(RegistryError, match="Description"):
        single_field(fields, "Description")
    with pytest.raises(RegistryError, match="Subtag"):
        single_field(fields, "Subtag", required=True)


def test_record_with_repeated_field_is_rejected() -> None:
    text = (
        "File-Date: 2000-01-01\n%%\nType: language\nSubtag: aa\n"
        "Description: Alpha\nPreferred-Value: bb\nPreferred-Value: cc\n"
    )
    with pytest.raises(RegistryError, match="Preferred-Value"):
        Registry.from_text(text)


def test_record_without_type_is_rejected() -> None:
    with pytest.raises(RegistryError, match="Type"):
        Registry.from_text("File-Date: 2000-01-01\n%%\nSubtag: aa\nDescription: Alpha\n")


def test_load_registry_from_path(tmp_path: Path) -> None:
    path = tmp_path / "registry.txt"
    path.write_text(SMALL_REGISTRY, encoding="utf-8")
    registry = load_registry(path)
    assert registry.file_date == "2000-01-01"
    assert repr(registry) == "<Registry 2000-01-01 (7 records)>"


def test_load_registry_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RegistryError):
        load_registry(tmp_path / "missing.txt")


def test_registry_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that the default registry is read from the file named by the
    ``BCP47_REGISTRY_PATH`` environment variable.

    :raises AssertionError: If the environment variable is ignored.
    """
    path = tmp_path / "registry.txt"
    path.write_text(SMALL_REGISTRY, encoding="utf-8")
    monkeypatch.setenv(BCP47_REGISTRY_PATH_ENV_VAR, str(path))
    get_registry.cache_clear()
    try:
        assert get_registry().file_date == "2000-01-01"
        assert check("aa")
    finally:
        get_registry.cache_clear()


def test_registry_path_falls_back_to_bundled(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(BCP47_REGISTRY_PATH_ENV_VAR, raising=False)
    monkeypatch.setenv(BCP47_CACHE_PATH_ENV_VAR, str(tmp_path / "cache"))
    assert get_registry_path() == get_bundled_registry_path()
    assert not (tmp_path / "cache").exists()


def test_bundled_registry_loads() -> None:
    """
    Test that the registry shipped with the package loads and holds
    records of every type.

    :raises AssertionError: If the bundled registry is incomplete.
    """
    registry = load_registry(get_bundled_registry_path())
    types = {record.type for record in registry}
    assert types == {
        "language",
        "extlang",
        "script",
        "region",
        "variant",
        "grandfathered",
        "redundant",
    }
    assert "zh" in registry.macrolanguages
