from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

@dataclass(frozen=True)
class DownloadTarget:
    filename: str
    url: str
    out_path: Path

    @property
    def out_dir(self) -> Path:
        return self.out_path.parent

@dataclass
class FetchResult:
    client: str = ""
    out_path: Path = Path()
    size: int = 0
    used_fallback: bool = False
