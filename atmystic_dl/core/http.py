# atmystic_dl/core/http.py
from __future__ import annotations
import logging
import ssl
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__

logger = logging.getLogger(__name__)

UA = f"Atmystic-Downloader/{__version__}"
CHUNK_SIZE = 128 * 1024

ProgressCB = Callable[[int, int], None]  # (downloaded_bytes, total_bytes)

TLS_VERSIONS = {
    "1.2": ssl.TLSVersion.TLSv1_2,
    "1.3": ssl.TLSVersion.TLSv1_3,
}

def tls_version(value: str) -> ssl.TLSVersion:
    try:
        return TLS_VERSIONS[str(value).strip()]
    except KeyError:
        raise ValueError(f"Unsupported TLS version {value!r} (use one of {', '.join(TLS_VERSIONS)})") from None

# ---- shared streaming writer --------------------------------------------------
def write_stream(
    chunks: Iterable[bytes],
    out_path: Path,
    total: int = 0,
    on_progress: Optional[ProgressCB] = None,
) -> int:
    """
    Writes to <file>.part and swaps it over out_path at the end.
    A half-written .part never survives a failure.
    """
    tmp = out_path.with_suffix(out_path.suffix + ".part")
    downloaded = 0
    try:
        with open(tmp, "wb") as f:
            for chunk in chunks:
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
                if on_progress:
                    on_progress(downloaded, total)
        tmp.replace(out_path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return downloaded

# ---- primary: requests --------------------------------------------------------
class TLSAdapter(HTTPAdapter):
    """HTTPAdapter that refuses anything below the configured TLS version."""

    def __init__(self, min_tls: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2, **kwargs):
        self.min_tls = min_tls  # read by init_poolmanager during super().__init__
        super().__init__(**kwargs)

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        pool_kwargs["ssl_minimum_version"] = self.min_tls
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        proxy_kwargs["ssl_minimum_version"] = self.min_tls
        return super().proxy_manager_for(proxy, **proxy_kwargs)

def make_session(min_tls: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2) -> requests.Session:
    adapter = TLSAdapter(min_tls=min_tls, max_retries=0, pool_connections=1, pool_maxsize=1)
    s = requests.Session()
    s.mount("http://", adapter); s.mount("https://", adapter)
    s.headers.update({"User-Agent": UA})
    return s

class RequestsClient:
    name = "requests"

    def __init__(self, min_tls: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2, timeout: Optional[float] = None):
        self.timeout = timeout
        self.session = make_session(min_tls)

    def download(self, url: str, out_path: Path, on_progress: Optional[ProgressCB] = None) -> int:
        logger.debug("[%s] GET %s", self.name, url)
        with self.session.get(url, stream=True, timeout=self.timeout) as r:
            r.raise_for_status()
            total = int(r.headers.get("Content-Length") or 0)
            return write_stream(r.iter_content(chunk_size=CHUNK_SIZE), out_path, total, on_progress)

    def close(self) -> None:
        self.session.close()

# ---- fallback: bare urllib3 ---------------------------------------------------
# follow redirects, never retry
NO_RETRY = Retry(total=None, connect=0, read=0, status=0, other=0, redirect=5)

class Urllib3Client:
    name = "urllib3"

    def __init__(self, min_tls: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2, timeout: Optional[float] = None):
        self.timeout = timeout
        self.pool = urllib3.PoolManager(
            ssl_minimum_version=min_tls,
            retries=NO_RETRY,
            headers={"User-Agent": UA},
        )

    def download(self, url: str, out_path: Path, on_progress: Optional[ProgressCB] = None) -> int:
        logger.debug("[%s] GET %s", self.name, url)
        r = self.pool.request("GET", url, preload_content=False, timeout=self.timeout)
        try:
            if r.status >= 400:
                raise urllib3.exceptions.HTTPError(f"{r.status} {r.reason} for url: {url}")
            total = int(r.headers.get("Content-Length") or 0)
            return write_stream(r.stream(CHUNK_SIZE), out_path, total, on_progress)
        finally:
            r.release_conn()

    def close(self) -> None:
        self.pool.clear()

def make_clients(min_tls: str = "1.2", timeout: Optional[float] = None) -> List:
    """Primary first, fallback second."""
    v = tls_version(min_tls)
    return [RequestsClient(v, timeout), Urllib3Client(v, timeout)]
