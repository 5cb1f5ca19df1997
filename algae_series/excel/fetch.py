from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests

from ..errors import FetchError
from ..services.progress import DownloadProgress

"""Workbook byte retrieval.

The pipeline does not care where bytes come from: a local path is read from
disk, an http(s) URL is streamed with requests. Any non-success outcome is
reported as a single FetchError carrying the underlying status.
"""

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "is_url",
    "fetch_workbook",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
CHUNK_SIZE = 64 * 1024


def is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _content_length(response: requests.Response) -> int | None:
    declared = response.headers.get("Content-Length")
    if not declared:
        return None
    try:
        return int(declared)
    except ValueError:
        return None


def _fetch_url(url: str, timeout: float) -> bytes:
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True, stream=True)
    except requests.RequestException as e:
        raise FetchError(url, "connection_error", str(e)) from e

    try:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise FetchError(url, response.status_code, response.reason) from e

        chunks: list[bytes] = []
        with DownloadProgress(_content_length(response), description=Path(urlparse(url).path).name or url) as progress:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    chunks.append(chunk)
                    progress.update(len(chunk))
        content = b"".join(chunks)
    except requests.RequestException as e:
        raise FetchError(url, "transfer_error", str(e)) from e
    finally:
        response.close()

    logger.debug(f"fetched {len(content)} bytes from {url}")
    return content


def fetch_workbook(source: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    """Return the raw bytes of the workbook at ``source``.

    Args:
        source: Local file path or http(s) URL
        timeout: Network timeout in seconds (ignored for local files)

    Raises:
        FetchError: file missing/unreadable, connection failure or non-2xx status
    """
    if is_url(source):
        return _fetch_url(source, timeout)

    path = Path(source)
    if not path.is_file():
        raise FetchError(source, "not_found")
    try:
        return path.read_bytes()
    except OSError as e:
        raise FetchError(source, "io_error", str(e)) from e
