"""
Content loading for candidate documents and schema documents.

Demonstrates:
- A small loader contract the core depends on (``load(reference) -> bytes``)
- Bounded fetches: every request has a timeout and a size cap
- Connections released on every exit path (``with`` around the response)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlsplit

import requests

from xsd_service.config import settings
from xsd_service.core.errors import LoadError

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://")


def is_remote_reference(body: str | bytes) -> bool:
    """True when a request body is a URL to fetch rather than inline XML."""
    if isinstance(body, bytes):
        head = body.lstrip()[:16].decode("ascii", errors="ignore")
    else:
        head = body.lstrip()[:16]
    return head.lower().startswith(REMOTE_PREFIXES)


class ContentLoader(Protocol):
    def load(self, reference: str) -> bytes: ...


class UrlContentLoader:
    """Fetches http(s) references with requests and, optionally, file:// references."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_bytes: int | None = None,
        allow_file_urls: bool | None = None,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_CONTENT_BYTES
        self.allow_file_urls = (
            allow_file_urls if allow_file_urls is not None else settings.ALLOW_FILE_URLS
        )
        self._session = session or requests.Session()

    def load(self, reference: str) -> bytes:
        reference = reference.strip()
        scheme = urlsplit(reference).scheme.lower()
        if scheme in ("http", "https"):
            return self._load_http(reference)
        if scheme == "file":
            if not self.allow_file_urls:
                raise LoadError("file:// references are disabled", reference=reference)
            return self._load_file(reference)
        raise LoadError(f"Unsupported reference scheme '{scheme or '(none)'}'", reference=reference)

    def close(self) -> None:
        self._session.close()

    def _load_http(self, url: str) -> bytes:
        logger.debug("Fetching %s", url)
        try:
            with self._session.get(url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                chunks: list[bytes] = []
                size = 0
                for chunk in response.iter_content(chunk_size=64 * 1024):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise LoadError(
                            f"Content exceeds {self.max_bytes} bytes", reference=url
                        )
                    chunks.append(chunk)
        except requests.Timeout as exc:
            raise LoadError(f"Timed out after {self.timeout}s", reference=url) from exc
        except requests.HTTPError as exc:
            raise LoadError(
                f"HTTP {exc.response.status_code} while fetching", reference=url
            ) from exc
        except requests.RequestException as exc:
            raise LoadError(f"Fetch failed: {exc}", reference=url) from exc
        return b"".join(chunks)

    def _load_file(self, url: str) -> bytes:
        path = Path(unquote(urlsplit(url).path))
        try:
            if path.stat().st_size > self.max_bytes:
                raise LoadError(f"Content exceeds {self.max_bytes} bytes", reference=url)
            with path.open("rb") as fh:
                return fh.read()
        except OSError as exc:
            raise LoadError(f"Cannot read file: {exc.strerror or exc}", reference=url) from exc
