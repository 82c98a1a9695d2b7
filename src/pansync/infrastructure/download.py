"""Streamed HTTP download of backup artifacts (httpx).

Pantheon's backup endpoint serves a certificate not every client trusts,
so verification is off by default. The URL is signed and short-lived.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class Downloader:
    """Fetches a URL to a local file in one attempt (no resume, no retry)."""

    def __init__(
        self,
        *,
        timeout: float = 600.0,
        verify: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

    def fetch(self, url: str, dest: Path) -> Path:
        """Stream *url* into *dest*.

        Raises:
            httpx.HTTPError: transport failure or non-2xx status.
            OSError: *dest* could not be written.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        with httpx.Client(
            timeout=httpx.Timeout(self._timeout),
            verify=self._verify,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                with dest.open("wb") as fh:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        fh.write(chunk)
        logger.debug("Downloaded %s bytes to %s", dest.stat().st_size, dest)
        return dest
