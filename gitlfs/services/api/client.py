"""Shared Git LFS API client using httpx.

One client exists per process. The diagnostics hook may attach a stats
sink to it; the runner closes it when the command finishes.
"""

import logging
import threading
import time
from typing import Optional, TextIO

import httpx

from gitlfs import __version__
from gitlfs.lib.config import Settings
from gitlfs.lib.timestamps import unix_seconds

logger = logging.getLogger(__name__)


class HTTPStatsLog:
    """
    Line-oriented HTTP statistics writer.

    Format:
        concurrent=1 time=1760601600 version=3.6.0
        key=1 event=request method=POST url=https://.../objects/batch
        key=1 event=response status=200 duration_ms=42
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()
        self._next_key = 0
        self._started: dict[int, tuple[int, float]] = {}
        self._write(f"concurrent=1 time={unix_seconds()} version={__version__}")

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    def on_request(self, request: httpx.Request) -> None:
        with self._lock:
            self._next_key += 1
            key = self._next_key
            self._started[id(request)] = (key, time.monotonic())
            self._write(
                f"key={key} event=request method={request.method} url={request.url}"
            )

    def on_response(self, response: httpx.Response) -> None:
        with self._lock:
            key, started = self._started.pop(id(response.request), (0, time.monotonic()))
            duration_ms = int((time.monotonic() - started) * 1000)
            self._write(
                f"key={key} event=response status={response.status_code} "
                f"duration_ms={duration_ms}"
            )

    def close(self) -> None:
        self._stream.close()


class ApiClient:
    """
    Process-wide client for the Git LFS API.

    The underlying httpx.Client is created on first use, so constructing
    an ApiClient never opens a connection.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Shared configuration (timeouts)
            transport: Override the httpx transport (used by tests)
        """
        self._timeout = settings.http_timeout
        self._transport = transport
        self._http: Optional[httpx.Client] = None
        self._stats: Optional[HTTPStatsLog] = None
        self._closed = False

    @property
    def http(self) -> httpx.Client:
        """The underlying httpx client, created on first access."""
        if self._http is None:
            self._http = httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
                headers={"User-Agent": f"git-lfs/{__version__}"},
                event_hooks={
                    "request": [self._on_request],
                    "response": [self._on_response],
                },
            )
        return self._http

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def logging_stats(self) -> bool:
        """Whether a stats sink is attached."""
        return self._stats is not None

    def log_http_stats(self, stream: TextIO) -> None:
        """Record statistics for every subsequent request to ``stream``.

        The client takes ownership of the stream and closes it in close().
        """
        if self._stats is not None:
            self._stats.close()
        self._stats = HTTPStatsLog(stream)
        logger.debug("HTTP statistics logging enabled")

    def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request through the shared client."""
        return self.http.request(method, url, **kwargs)

    def _on_request(self, request: httpx.Request) -> None:
        if self._stats is not None:
            self._stats.on_request(request)

    def _on_response(self, response: httpx.Response) -> None:
        if self._stats is not None:
            self._stats.on_response(response)

    def close(self) -> None:
        """Release the connection pool and the stats sink. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._http is not None:
            self._http.close()
        if self._stats is not None:
            self._stats.close()
            self._stats = None
