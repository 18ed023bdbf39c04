"""Opt-in HTTP statistics logging, run before every subcommand.

When GIT_LOG_STATS is set, each invocation writes
``<local log dir>/http/http-<unix seconds>.log`` and attaches it to the
shared API client. Failing to create the log never fails the command.
"""

import argparse
import logging
import sys
from collections.abc import Callable

from gitlfs.lib.config import Settings
from gitlfs.lib.messages import get_message
from gitlfs.lib.timestamps import unix_seconds
from gitlfs.services.api.client import ApiClient

logger = logging.getLogger(__name__)


class HTTPLoggerHook:
    """Pre-run hook that wires an HTTP stats log into the API client.

    Settings and the client are looked up through the given callables when
    the hook fires, since the hook is attached before either exists.
    """

    def __init__(
        self,
        settings: Callable[[], Settings],
        api_client: Callable[[], ApiClient],
    ):
        self._settings = settings
        self._api_client = api_client
        self._fired = False

    def __call__(self, args: argparse.Namespace) -> None:
        if self._fired:
            return
        self._fired = True

        settings = self._settings()
        if not settings.http_stats_enabled:
            return

        log_base = settings.local_log_dir / "http"
        try:
            log_base.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(get_message("HTTP_STATS_ERROR", error=e), file=sys.stderr)
            return

        log_path = log_base / f"http-{unix_seconds()}.log"
        try:
            log_file = open(log_path, "w", encoding="utf-8")
        except OSError as e:
            print(get_message("HTTP_STATS_ERROR", error=e), file=sys.stderr)
            return

        logger.debug(f"Writing HTTP statistics to {log_path}")
        self._api_client().log_http_stats(log_file)


def setup_http_logger(
    settings: Callable[[], Settings],
    api_client: Callable[[], ApiClient],
) -> HTTPLoggerHook:
    """Create the diagnostics pre-run hook."""
    return HTTPLoggerHook(settings, api_client)
