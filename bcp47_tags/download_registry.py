"""Language subtag registry download module."""

import logging
import tempfile
from email.utils import formatdate
from pathlib import Path
from typing import IO, Dict, Optional

import requests
import tqdm

from .exceptions import DownloadError
from .registry import Registry, get_registry
from .utils import get_cache_path, get_cached_registry_path, get_registry_url

logger = logging.getLogger(__name__)

TIMEOUT = 60


def http_get(
    url: str,
    out_file: IO[bytes],
    headers: Optional[Dict[str, str]] = None,
    proxies: Optional[Dict[str, str]] = None,
) -> bool:
    """
    Downloads a file from a given URL and writes it to the specified output file.

    :param url: The URL to download the file from.
    :type url: str
    :param out_file: The file object to write the downloaded content to.
    :type out_file: IO[bytes]
    :param headers: Optional dictionary of extra request headers.
    :type headers: Optional[Dict[str, str]]
    :param proxies: Optional dictionary of proxies to use for the request.
    :type proxies: Optional[Dict[str, str]]
    :raises TimeoutError: If the request times out.
    :raises DownloadError: If the file could not be found at the given URL or the request failed.
    :return: False if the server reported the file as not modified, True otherwise.
    :rtype: bool
    """
    logger.info("Starting download from %s", url)
    try:
        req = requests.get(url, stream=True, headers=headers, proxies=proxies, timeout=TIMEOUT)
    except requests.exceptions.Timeout as e:
        err = f"Request to {url} timed out."
        raise TimeoutError(err) from e
    except requests.exceptions.RequestException as e:
        err = f"Request to {url} failed: {e}"
        raise DownloadError(err) from e

    if req.status_code == 304:
        logger.info("Registry at %s is not modified", url)
        return False
    if req.status_code == 404:
        err = f"Could not find at URL {url}."
        raise DownloadError(err)
    if req.status_code != 200:
        err = f"Request to {url} failed with HTTP status {req.status_code}."
        raise DownloadError(err)

    content_length = req.headers.get("Content-Length")
    total = int(content_length) if content_length is not None else None
    progress = tqdm.tqdm(
        unit="B",
        unit_scale=True,
        total=total,
        desc="Downloading language subtag registry",
    )
    for chunk in req.iter_content(chunk_size=1024):
        if chunk:  # filter out keep-alive new chunks
            progress.update(len(chunk))
            out_file.write(chunk)
    progress.close()
    return True


def download_registry(
    force: bool = False,
    proxies: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Downloads the current language subtag registry into the cache directory.
    Unless ``force`` is set, the request is conditional on the registry
    having changed since the cached copy was written. The download is
    parsed before it replaces the cached copy, and the default registry is
    reloaded on next use.

    :param force: Whether to download even if the cached copy is up to date.
    :type force: bool
    :param proxies: Optional dictionary of proxies to use for the request.
    :type proxies: Optional[Dict[str, str]]
    :raises DownloadError: If the registry could not be downloaded.
    :raises RegistryError: If the downloaded file is not a valid registry.
    :return: The path of the cached registry.
    :rtype: Path
    """
    url = get_registry_url()
    target = get_cached_registry_path()
    get_cache_path()

    headers = {"Accept-Charset": "utf-8"}
    if target.is_file() and not force:
        headers["If-Modified-Since"] = formatdate(target.stat().st_mtime, usegmt=True)

    with tempfile.NamedTemporaryFile(
        dir=target.parent, suffix=".txt", delete=False
    ) as downloaded_file:
        temp_path = Path(downloaded_file.name)
        try:
            modified = http_get(url, downloaded_file, headers=headers, proxies=proxies)
        except BaseException:
            downloaded_file.close()
            temp_path.unlink(missing_ok=True)
            raise

    if not modified:
        temp_path.unlink(missing_ok=True)
        return target

    try:
        registry = Registry.from_text(temp_path.read_text(encoding="utf-8"))
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    temp_path.replace(target)
    logger.info("Saved %r to %s", registry, target)

    get_registry.cache_clear()
    return target
