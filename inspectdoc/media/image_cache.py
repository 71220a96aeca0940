"""
Image cache for resolving media references during one report render.

Photos are fetched (optionally in parallel, before layout starts) and
decoded once per URI; layout then reads the cache synchronously.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Dict, Iterable, Optional
from urllib.parse import unquote, urlparse

import httpx

from ..config import FetchConfig
from ..exceptions import MediaError
from .raster import RasterBuffer, decode_raster

logger = logging.getLogger(__name__)


class ImageCache:
    """
    Memoizing resolver from URI to :class:`RasterBuffer`.

    Supported references are ``data:`` URIs with base64 payloads,
    ``http(s)://`` URLs and local paths (plain or ``file://``). Every failure
    resolves to ``None`` and is memoized, so a broken reference is tried once.
    """

    def __init__(self, config: Optional[FetchConfig] = None, client: Optional[httpx.Client] = None):
        """
        Initialize the cache.

        Args:
            config: Fetch settings (worker count, timeout, downscale limit)
            client: HTTP client to use; one is created on demand when omitted
        """
        self.config = config or FetchConfig()
        self._cache: Dict[str, Optional[RasterBuffer]] = {}  # uri -> buffer (None = unavailable)
        self._pending: Dict[str, Future] = {}  # uri -> Future
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._client = client
        self._owns_client = client is None

    def __enter__(self) -> "ImageCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __contains__(self, uri: str) -> bool:
        with self._lock:
            return uri in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def resolve(self, uri: str) -> Optional[RasterBuffer]:
        """Return the decoded image for ``uri`` or ``None`` when it is unavailable."""
        if not uri:
            return None

        with self._lock:
            if uri in self._cache:
                return self._cache[uri]
            future = self._pending.get(uri)

        if future is not None:
            try:
                return future.result(timeout=self.config.timeout_seconds * 2)
            except FutureTimeoutError:
                logger.warning(f"ImageCache: Timed out waiting for {_short(uri)}")
                with self._lock:
                    self._cache.setdefault(uri, None)
                return None

        return self._fetch_and_store(uri)

    def prefetch(self, uris: Iterable[str]) -> None:
        """Resolve many URIs with a bounded worker pool and wait for them."""
        futures = []
        with self._lock:
            for uri in dict.fromkeys(u for u in uris if u):
                if uri in self._cache or uri in self._pending:
                    continue
                if self._executor is None:
                    self._executor = ThreadPoolExecutor(
                        max_workers=max(1, self.config.max_workers),
                        thread_name_prefix="inspectdoc-image",
                    )
                    logger.debug(f"ImageCache: Started thread pool with {self.config.max_workers} workers")
                future = self._executor.submit(self._fetch_and_store, uri)
                self._pending[uri] = future
                futures.append(future)

        if not futures:
            return

        logger.debug(f"ImageCache: Prefetching {len(futures)} image(s)")
        wait(futures)

    def close(self) -> None:
        """Shut down the worker pool and any client this cache created."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _fetch_and_store(self, uri: str) -> Optional[RasterBuffer]:
        buffer = None
        try:
            buffer = self._load(uri)
        finally:
            with self._lock:
                self._cache[uri] = buffer
                self._pending.pop(uri, None)
        return buffer

    def _load(self, uri: str) -> Optional[RasterBuffer]:
        try:
            data = self._read_bytes(uri)
            return decode_raster(
                data,
                uri,
                max_dimension=self.config.max_dimension,
                jpeg_quality=self.config.jpeg_quality,
            )
        except MediaError as exc:
            logger.warning(f"ImageCache: {exc.message} ({_short(uri)})")
        except httpx.InvalidURL as exc:
            logger.warning(f"ImageCache: Invalid URL {_short(uri)}: {exc}")
        except httpx.HTTPError as exc:
            logger.warning(f"ImageCache: Fetch failed for {_short(uri)}: {exc}")
        except OSError as exc:
            logger.warning(f"ImageCache: Cannot read {_short(uri)}: {exc}")
        except ValueError as exc:
            logger.warning(f"ImageCache: Unusable reference {_short(uri)}: {exc}")
        return None

    def _read_bytes(self, uri: str) -> bytes:
        if uri.startswith("data:"):
            return _decode_data_uri(uri)

        parsed = urlparse(uri)
        if parsed.scheme in {"http", "https"}:
            response = self._http().get(uri)
            response.raise_for_status()
            return response.content
        if parsed.scheme == "file":
            return Path(unquote(parsed.path)).read_bytes()
        if not parsed.scheme or len(parsed.scheme) == 1:
            return Path(uri).read_bytes()

        raise MediaError("Unsupported image reference", parsed.scheme)

    def _http(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(timeout=self.config.timeout_seconds, follow_redirects=True)
            return self._client


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise MediaError("Malformed data URI")
    if not header.endswith(";base64"):
        raise MediaError("Unsupported data URI encoding", header)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MediaError("Invalid base64 payload") from exc


def _short(uri: str) -> str:
    return uri if len(uri) <= 80 else f"{uri[:77]}..."
