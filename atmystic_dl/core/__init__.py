# atmystic_dl/core/__init__.py
from .errors import AtmysticError, ValidationError, AttemptError, FallbackError, DownloadError, ConfigError
from .models import DownloadTarget, FetchResult
from .validate import (
    DEFAULT_FILENAME, normalize_filename, validate_filename, resolve_filename,
    build_url, output_path, make_target,
)
from .http import RequestsClient, Urllib3Client, make_clients
from .download import Fetcher
from .config import load_cfg, save_cfg, check_cfg, config_path, BASE_URL
from .utils import human_size

__all__ = [
    "AtmysticError", "ValidationError", "AttemptError", "FallbackError", "DownloadError", "ConfigError",
    "DownloadTarget", "FetchResult",
    "DEFAULT_FILENAME", "normalize_filename", "validate_filename", "resolve_filename",
    "build_url", "output_path", "make_target",
    "RequestsClient", "Urllib3Client", "make_clients",
    "Fetcher",
    "load_cfg", "save_cfg", "check_cfg", "config_path", "BASE_URL",
    "human_size",
    "setup_logging",
]

# ---- simple logging toggle for the package ----
import logging

def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s"
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
