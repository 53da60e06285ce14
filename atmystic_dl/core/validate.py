# atmystic_dl/core/validate.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Union

from .errors import ValidationError
from .models import DownloadTarget

SUFFIX = ".ps1"
DEFAULT_FILENAME = "delete.ps1"

# word chars, dash, dot, space; must end with the suffix
FILENAME_RE = re.compile(r"[\w\-. ]+\.ps1", re.IGNORECASE)
_SUFFIX_RE = re.compile(r"\.ps1$", re.IGNORECASE)

PathLike = Union[str, Path]

def normalize_filename(raw: str, default: str = DEFAULT_FILENAME) -> str:
    """
    Blank input -> default name; missing suffix -> appended.
    Everything else is passed through untouched (no trimming).
    """
    if not raw or not raw.strip():
        return default
    if not _SUFFIX_RE.search(raw):
        return raw + SUFFIX
    return raw

def validate_filename(name: str) -> str:
    if not FILENAME_RE.fullmatch(name or ""):
        raise ValidationError(name)
    return name

def resolve_filename(raw: str, default: str = DEFAULT_FILENAME) -> str:
    return validate_filename(normalize_filename(raw, default))

def build_url(base_url: str, filename: str) -> str:
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url + filename

def output_path(out_dir: PathLike, filename: str) -> Path:
    return Path(out_dir).expanduser() / filename

def make_target(
    raw: str,
    base_url: str,
    out_dir: PathLike,
    default: str = DEFAULT_FILENAME,
) -> DownloadTarget:
    name = resolve_filename(raw, default)
    return DownloadTarget(
        filename=name,
        url=build_url(base_url, name),
        out_path=output_path(out_dir, name),
    )
