# atmystic_dl/core/config.py
from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError

# ---- schema & defaults -------------------------------------------------------
SCHEMA_VERSION = 1
BASE_URL = "https://raw.githubusercontent.com/pauliukovich/public/refs/heads/main/"

def default_out_dir() -> str:
    if os.name == "nt":
        return "C:\\atmystic.pl"
    return str(Path.home() / "atmystic.pl")

DEFAULT_CFG: Dict[str, Any] = {
    "schema": SCHEMA_VERSION,
    "base_url": BASE_URL,
    "out_dir": default_out_dir(),
    "default_filename": "delete.ps1",
    "tls_min": "1.2",      # "1.2" or "1.3"
    "timeout": None,       # seconds; None = client default
    "verbose": False,
}

# keys --save-defaults is allowed to persist
PERSISTED_KEYS = ("base_url", "out_dir", "default_filename", "timeout")

# ---- locations ---------------------------------------------------------------
# You can override location with env vars:
#   ATMYSTIC_DL_CONFIG=<full path to config.json>
#   ATMYSTIC_DL_DIR=<directory to place config.json>
def _windows_roaming_dir() -> Path:
    return Path(os.environ.get("APPDATA", Path.home() / "AppData/Roaming"))

def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

def config_dir() -> Path:
    env_dir = os.environ.get("ATMYSTIC_DL_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        return (_windows_roaming_dir() / "Atmystic").resolve()
    return (_xdg_config_home() / "atmystic_dl").resolve()

def config_path() -> Path:
    env_path = os.environ.get("ATMYSTIC_DL_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return config_dir() / "config.json"

# ---- load / save -------------------------------------------------------------
def _merge_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = DEFAULT_CFG.copy()
    out.update({k: v for k, v in (cfg or {}).items() if k in DEFAULT_CFG})
    out["schema"] = SCHEMA_VERSION
    return out

def load_cfg() -> Dict[str, Any]:
    p = config_path()
    if not p.exists():
        return DEFAULT_CFG.copy()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # If the file is corrupt, keep a .bad copy and start fresh
        try:
            p.replace(p.with_suffix(".bad.json"))
        except OSError:
            pass
        return DEFAULT_CFG.copy()
    if not isinstance(raw, dict):
        return DEFAULT_CFG.copy()
    return _merge_defaults(raw)

def save_cfg(cfg: Dict[str, Any]) -> Path:
    p = config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(".tmp")
    data = _merge_defaults(cfg)
    # Atomic-ish write
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    if p.exists():
        p.replace(p.with_suffix(".bak.json"))
    tmp.replace(p)
    return p

# ---- sanity checks -----------------------------------------------------------
TLS_MINIMUMS = ("1.2", "1.3")

def check_cfg(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy with tls_min/timeout normalized; raises ConfigError on
    values a hand-edited config.json may carry (wrong type, unknown TLS, etc).
    """
    out = dict(cfg)
    for key in ("base_url", "out_dir", "default_filename"):
        val = out.get(key)
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(key, val, "expected a non-empty string")

    tls = str(out.get("tls_min", "")).strip()
    if tls not in TLS_MINIMUMS:
        raise ConfigError("tls_min", out.get("tls_min"), f"use one of {', '.join(TLS_MINIMUMS)}")
    out["tls_min"] = tls

    t = out.get("timeout")
    if t is not None:
        if isinstance(t, bool):
            raise ConfigError("timeout", t, "expected seconds or null")
        try:
            t = float(t)
        except (TypeError, ValueError):
            raise ConfigError("timeout", out.get("timeout"), "expected seconds or null") from None
        if t <= 0:
            raise ConfigError("timeout", t, "must be greater than 0")
        out["timeout"] = t
    return out
