# atmystic_dl/core/errors.py
from __future__ import annotations
from pathlib import Path
from typing import Optional


class AtmysticError(Exception):
    """Base class for everything the downloader raises on purpose."""


class ValidationError(AtmysticError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Invalid filename {filename!r}. Allowed: letters, numbers, underscore, "
            "dash, dot, spaces; must end with .ps1"
        )


class AttemptError(AtmysticError):
    """One failed download attempt, tagged with the client that made it."""

    def __init__(self, client: str, error: BaseException):
        self.client = client
        self.error = error
        super().__init__(f"{client}: {error}")


class FallbackError(AttemptError):
    pass


class DownloadError(AtmysticError):
    """Primary and fallback attempts both failed."""

    def __init__(
        self,
        url: str,
        out_path: Path,
        primary: AttemptError,
        fallback: Optional[FallbackError] = None,
    ):
        self.url = url
        self.out_path = out_path
        self.primary = primary
        self.fallback = fallback
        msg = f"Could not download {url}: {primary}"
        if fallback is not None:
            msg += f"; alternative attempt failed: {fallback}"
        super().__init__(msg)


class ConfigError(AtmysticError):
    """A config file or flag value the downloader cannot use."""

    def __init__(self, key: str, value: object, hint: str):
        self.key = key
        self.value = value
        super().__init__(f"Bad config value {key}={value!r}: {hint}")
