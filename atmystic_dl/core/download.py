# atmystic_dl/core/download.py
from __future__ import annotations
import logging
from typing import Callable, Optional, Sequence

import requests
import urllib3

from .errors import AttemptError, DownloadError, FallbackError
from .http import ProgressCB, make_clients
from .models import DownloadTarget, FetchResult

logger = logging.getLogger(__name__)

# what counts as "this attempt failed, try the other client"
TRANSPORT_ERRORS = (requests.RequestException, urllib3.exceptions.HTTPError, OSError)

# UI hooks (no rich dependency down here)
StartCB = Callable[[str, DownloadTarget], None]   # (client_name, target)
FailCB = Callable[[AttemptError], None]

class Fetcher:
    """
    Core downloader, no UI dependencies.
    - clients[0] is tried first; any transport/IO failure moves on to clients[1]
    - the fallback gets exactly one attempt, no backoff
    - both failing raises DownloadError with the FallbackError nested inside
    """
    ATTEMPTS = 2

    def __init__(self, clients: Optional[Sequence] = None, min_tls: str = "1.2", timeout: Optional[float] = None):
        self.clients = list(clients) if clients is not None else make_clients(min_tls, timeout)
        if len(self.clients) != self.ATTEMPTS:
            raise ValueError(f"Fetcher needs exactly {self.ATTEMPTS} clients (primary, fallback)")

    @property
    def primary(self):
        return self.clients[0]

    @property
    def fallback(self):
        return self.clients[1]

    def _attempt(self, client, target: DownloadTarget, on_progress, on_start, n: int) -> FetchResult:
        if on_start:
            on_start(client.name, target)
        logger.debug("Attempt %d/%d via %s: %s -> %s", n, self.ATTEMPTS, client.name, target.url, target.out_path)
        # an unusable output dir fails the attempt like any other I/O error
        target.out_dir.mkdir(parents=True, exist_ok=True)
        size = client.download(target.url, target.out_path, on_progress)
        logger.debug("Download finished: %s (%d bytes)", target.out_path, size)
        return FetchResult(client=client.name, out_path=target.out_path, size=size, used_fallback=n > 1)

    def fetch(
        self,
        target: DownloadTarget,
        on_progress: Optional[ProgressCB] = None,
        on_start: Optional[StartCB] = None,
        on_fail: Optional[FailCB] = None,
    ) -> FetchResult:
        try:
            return self._attempt(self.primary, target, on_progress, on_start, 1)
        except TRANSPORT_ERRORS as e:
            primary_err = AttemptError(self.primary.name, e)
            logger.debug("Primary attempt failed: %r", e)
            if on_fail:
                on_fail(primary_err)

        try:
            return self._attempt(self.fallback, target, on_progress, on_start, 2)
        except TRANSPORT_ERRORS as e:
            fallback_err = FallbackError(self.fallback.name, e)
            logger.debug("Fallback attempt failed: %r", e)
            if on_fail:
                on_fail(fallback_err)
            raise DownloadError(target.url, target.out_path, primary_err, fallback_err) from fallback_err

    def close(self) -> None:
        for c in self.clients:
            close = getattr(c, "close", None)
            if close:
                close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
