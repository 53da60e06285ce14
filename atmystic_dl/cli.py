# atmystic_dl/cli.py
from __future__ import annotations
import argparse
import logging
from typing import Any, Dict, List, Optional

from rich.console import Console

from . import __version__
from .core import ConfigError, check_cfg, load_cfg, save_cfg, setup_logging
from .core.config import PERSISTED_KEYS
from .tui import write_center
from .ui import EXIT_FAIL, run_download_flow

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Atmystic AI World script downloader")
    ap.add_argument("filename", nargs="?", help="Script to download (prompted for when omitted)")
    ap.add_argument("--out", dest="out_dir", help="Output directory")
    ap.add_argument("--base-url", help="Remote root the filename is appended to")
    ap.add_argument("--default", dest="default_filename", help="Filename used when the answer is blank")
    ap.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
    ap.add_argument("--tls-min", choices=["1.2", "1.3"], help="Lowest TLS version to accept")
    ap.add_argument("--plain", action="store_true", help="No colours, no progress bar")
    ap.add_argument("--save-defaults", action="store_true", help="Persist --out/--base-url/--default/--timeout to the config file")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging for core/network")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap.parse_args(argv)

def effective_cfg(args: argparse.Namespace, cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Config file values, overridden by whatever was given on the command line."""
    out = dict(cfg)
    for key in ("out_dir", "base_url", "default_filename", "timeout", "tls_min"):
        val = getattr(args, key, None)
        if val is not None:
            out[key] = val
    if args.verbose:
        out["verbose"] = True
    return out

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = effective_cfg(args, load_cfg())
    setup_logging(verbose=cfg["verbose"])

    console = Console(no_color=args.plain, highlight=not args.plain)

    try:
        cfg = check_cfg(cfg)
    except ConfigError as e:
        write_center(console, str(e), style="red")
        return EXIT_FAIL

    if args.save_defaults:
        stored = load_cfg()
        stored.update({k: cfg[k] for k in PERSISTED_KEYS})
        path = save_cfg(stored)
        logger.info("Saved defaults to %s", path)

    try:
        return run_download_flow(cfg, filename=args.filename, console_=console, plain=args.plain)
    except KeyboardInterrupt:
        console.print()
        write_center(console, "Interrupted by user.", style="yellow")
        return EXIT_INTERRUPTED
