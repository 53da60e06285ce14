from __future__ import annotations
import math
from typing import Optional

def human_size(n: Optional[int]) -> str:
    if not n or n <= 0: return "?"
    units = ["B","KB","MB","GB","TB"]
    i = min(int(math.floor(math.log(n, 1024))), len(units) - 1)
    return f"{n/(1024**i):.2f} {units[i]}"
