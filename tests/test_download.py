"""Tests for downloading the language subtag registry."""

import io
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import pytest
import requests

from bcp47_tags import download_registry, get_registry
from bcp47_tags.download_registry import http_get
from bcp47_tags.exceptions import DownloadError, RegistryError
from bcp47_tags.utils import (
    BCP47_CACHE_PATH_ENV_VAR,
    BCP47_REGISTRY_PATH_ENV_VAR,
    BCP47_REGISTRY_URL_ENV_VAR,
    REGISTRY_FILENAME,
)

REGISTRY_URL = "https://registry.invalid/language-subtag-registry"

REGISTRY_TEXT = """\
File-Date: 2030-01-01
%%
Type: language
Subtag: aa
Description: Alpha
Added: 2030-01-01
%%
"""


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Length": str(len(content))}

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]


@pytest.fixture
def cache_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """
    Fixture that points the registry cache at a temporary directory and the
    registry URL at a host that is never contacted.

    :return: The temporary cache directory.
    :rtype: Iterator[Path]
    """
    path = tmp_path / "cache"
    monkeypatch.setenv(BCP47_CACHE_PATH_ENV_VAR, str(path))
    monkeypatch.setenv(BCP47_REGISTRY_URL_ENV_VAR, REGISTRY_URL)
    monkeypatch.delenv(BCP47_REGISTRY_PATH_ENV_VAR, raising=False)
    get_registry.cache_clear()
    yield path
    get_registry.cache_clear()


def fake_get(
    monkeypatch: pytest.MonkeyPatch,
    response: FakeResponse,
    calls: Optional[List[Dict[str, Any]]] = None,
) -> None:
    def get(url: str, **kwargs: Any) -> FakeResponse:
        if calls is not None:
            calls.append(dict(kwargs, url=url))
        return response

    monkeypatch.setattr(requests, "get", get)


def test_download_registry(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that a downloaded registry is saved to the cache directory and
    becomes the default registry.

    :raises AssertionError: If the registry is not saved or not used.
    """
    calls: List[Dict[str, Any]] = []
    fake_get(monkeypatch, FakeResponse(200, REGISTRY_TEXT.encode("utf-8")), calls)

    path = download_registry()

    assert path == cache_path / REGISTRY_FILENAME
    assert path.read_text(encoding="utf-8") == REGISTRY_TEXT
    assert calls[0]["url"] == REGISTRY_URL
    assert "If-Modified-Since" not in calls[0]["headers"]
    assert get_registry().file_date == "2030-01-01"
    assert [p.name for p in cache_path.iterdir()] == [REGISTRY_FILENAME]


def test_download_registry_not_modified(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that a cached registry is revalidated and kept when the server
    reports it as not modified.

    :raises AssertionError: If the cached registry is replaced.
    """
    cache_path.mkdir()
    cached = cache_path / REGISTRY_FILENAME
    cached.write_text(REGISTRY_TEXT, encoding="utf-8")

    calls: List[Dict[str, Any]] = []
    fake_get(monkeypatch, FakeResponse(304), calls)

    assert download_registry() == cached
    assert cached.read_text(encoding="utf-8") == REGISTRY_TEXT
    assert "If-Modified-Since" in calls[0]["headers"]
    assert [p.name for p in cache_path.iterdir()] == [REGISTRY_FILENAME]


def test_download_registry_force(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cache_path.mkdir()
    (cache_path / REGISTRY_FILENAME).write_text("stale", encoding="utf-8")

    calls: List[Dict[str, Any]] = []
    fake_get(monkeypatch, FakeResponse(200, REGISTRY_TEXT.encode("utf-8")), calls)

    path = download_registry(force=True)
    assert "If-Modified-Since" not in calls[0]["headers"]
    assert path.read_text(encoding="utf-8") == REGISTRY_TEXT


def test_download_registry_not_found(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that a missing registry raises ``DownloadError`` and leaves no
    partial file behind.

    :raises AssertionError: If no error is raised or a file is left behind.
    """
    fake_get(monkeypatch, FakeResponse(404))

    with pytest.raises(DownloadError):
        download_registry()
    assert list(cache_path.iterdir()) == []


def test_download_registry_invalid(cache_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake_get(monkeypatch, FakeResponse(200, b"<html>not a registry</html>\n"))

    with pytest.raises(RegistryError):
        download_registry()
    assert list(cache_path.iterdir()) == []


def test_http_get_server_error(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_get(monkeypatch, FakeResponse(500))

    with pytest.raises(DownloadError):
        http_get(REGISTRY_URL, io.BytesIO())


def test_http_get_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that a timed out request raises ``TimeoutError``.

    :raises AssertionError: If the wrong error is raised.
    """

    def get(url: str, **kwargs: Any) -> FakeResponse:
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(requests, "get", get)

    with pytest.raises(TimeoutError):
        http_get(REGISTRY_URL, io.BytesIO())


def test_http_get_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def get(url: str, **kwargs: Any) -> FakeResponse:
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", get)

    with pytest.raises(DownloadError):
        http_get(REGISTRY_URL, io.BytesIO())
