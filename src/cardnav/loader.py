"""Load document text from local files or over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Final

import httpx

from cardnav.config import (
    CARDNAV_FETCH_BACKOFF_S,
    CARDNAV_FETCH_MAX_RETRIES,
    CARDNAV_FETCH_TIMEOUT_S,
    CARDNAV_MAX_DOCUMENT_BYTES,
    CARDNAV_USER_AGENT,
)
from cardnav.exceptions import DocumentNotFoundError, DocumentTooLargeError, FetchError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def read_document(path: Path, encoding: str = "utf-8") -> str:
    """Read a document from disk.

    Raises:
        DocumentNotFoundError: If ``path`` is not a file.
        DocumentTooLargeError: If the file exceeds the configured size limit.
    """
    if not path.is_file():
        raise DocumentNotFoundError(f"Document not found: {path}")
    size = path.stat().st_size
    if size > CARDNAV_MAX_DOCUMENT_BYTES:
        raise DocumentTooLargeError(
            f"{path} is {size} bytes, limit is {CARDNAV_MAX_DOCUMENT_BYTES}"
        )
    return path.read_text(encoding=encoding, errors="replace")


async def read_document_async(path: Path, encoding: str = "utf-8") -> str:
    """Read a document from disk using a thread pool."""
    return await asyncio.to_thread(read_document, path, encoding)


async def fetch_document(url: str, *, client: httpx.AsyncClient | None = None) -> str:
    """Fetch document text from a URL.

    Args:
        url: The URL to fetch.
        client: Optional shared httpx.AsyncClient. A short-lived client is
            created when omitted.

    Returns:
        The decoded document text.

    Raises:
        DocumentNotFoundError: On a 404 response.
        DocumentTooLargeError: If the body exceeds the configured size limit.
        FetchError: On any other client error, or when retries run out.
    """
    if client is None:
        async with _new_client() as new_client:
            return await fetch_document(url, client=new_client)

    response = await _get_with_retries(client, url)
    size = len(response.content)
    if size > CARDNAV_MAX_DOCUMENT_BYTES:
        raise DocumentTooLargeError(f"Document at {url} is {size} bytes, limit is {CARDNAV_MAX_DOCUMENT_BYTES}")
    logger.debug("Fetched %s (%d bytes)", url, size)
    return response.text


def _new_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(CARDNAV_FETCH_TIMEOUT_S),
        headers={"User-Agent": CARDNAV_USER_AGENT},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def _get_with_retries(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """GET ``url``, retrying transport errors and ``RETRY_STATUS_CODES``."""
    failure = ""
    attempts = CARDNAV_FETCH_MAX_RETRIES + 1
    for attempt in range(attempts):
        if attempt:
            backoff = CARDNAV_FETCH_BACKOFF_S * (2 ** (attempt - 1))
            logger.warning("Retrying %s in %.2fs (%s)", url, backoff, failure)
            await asyncio.sleep(backoff)
        try:
            response = await client.get(url)
        except httpx.RequestError as exc:
            failure = str(exc) or type(exc).__name__
            continue

        if response.status_code == 404:
            raise DocumentNotFoundError(f"Document not found at {url}")
        if response.status_code in RETRY_STATUS_CODES:
            failure = f"HTTP {response.status_code}"
            continue
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"Failed to fetch {url}: HTTP {response.status_code}") from exc
        return response

    raise FetchError(f"Failed to fetch {url} after {attempts} attempts: {failure}")
