#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UI layer for the Atmystic script downloader

- Banner + centered greeting
- Filename prompt (blank -> default, suffix appended, pattern enforced)
- Download with progress; one alternative attempt if the first one fails
- Status lines and exit code (0 ok, 1 invalid name or both attempts failed)
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.progress import (
    BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn, TransferSpeedColumn
)

from .core import (
    AttemptError,
    DownloadError,
    DownloadTarget,
    Fetcher,
    FallbackError,
    ValidationError,
    human_size,
    make_target,
)
from .tui import banner, write_center

console = Console()

EXIT_OK = 0
EXIT_FAIL = 1

# ────────────────────────── Greeting / prompt ──────────────────────────
def greet(console_: Console, default_name: str) -> None:
    write_center(console_, "Welcome to Atmystic AI World Scripts.")
    write_center(console_, "Please type the script filename you want to download from your repository.")
    write_center(console_, f"Example: {default_name}  (you may enter any .ps1 name located at the repo root)")
    console_.print()

def ask_filename(console_: Console) -> str:
    # blank answer is resolved to the default later, not by the prompt
    return Prompt.ask("Filename to download", default="", show_default=False, console=console_)

# ────────────────────────── Download ──────────────────────────
def _progress(console_: Console) -> Progress:
    return Progress(
        TextColumn("[bold]{task.description}", justify="left"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console_,
        transient=True,
    )

def download_with_progress(
    fetcher: Fetcher,
    target: DownloadTarget,
    console_: Console,
    plain: bool = False,
):
    """Runs the fetch, echoing each attempt as a centered status line."""
    def on_start(client_name: str, t: DownloadTarget) -> None:
        if client_name == fetcher.primary.name:
            write_center(console_, f"Downloading {t.url} -> {t.out_path}")
        else:
            write_center(console_, f"Trying alternative download ({client_name})...", style="dim")

    def on_fail(err: AttemptError) -> None:
        if isinstance(err, FallbackError):
            write_center(console_, f"Alternative attempt failed: {err.error}", style="red")
        else:
            write_center(console_, f"Failed to download: {err.error}", style="red")

    if plain:
        return fetcher.fetch(target, on_start=on_start, on_fail=on_fail)

    with _progress(console_) as progress:
        task = {"id": None}

        def start_task(client_name: str, t: DownloadTarget) -> None:
            if task["id"] is not None:
                progress.remove_task(task["id"])
            task["id"] = progress.add_task(t.filename, total=None)
            on_start(client_name, t)

        def update(done: int, total: int) -> None:
            progress.update(task["id"], completed=done, total=total or None)

        return fetcher.fetch(target, on_progress=update, on_start=start_task, on_fail=on_fail)

# ────────────────────────── Whole flow ──────────────────────────
def run_download_flow(
    cfg: Dict[str, Any],
    filename: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
    console_: Optional[Console] = None,
    plain: bool = False,
) -> int:
    """
    Start -> Validate -> {Fail, Download}; Download -> {Success, Fallback}; Fallback -> {Success, Fail}.
    Returns the process exit code.
    """
    con = console_ or console
    default_name = cfg["default_filename"]

    banner(con, plain=plain)
    if filename is None:
        greet(con, default_name)
        filename = ask_filename(con)

    try:
        target = make_target(filename, cfg["base_url"], cfg["out_dir"], default_name)
    except ValidationError:
        write_center(
            con,
            "Invalid filename. Allowed: letters, numbers, underscore, dash, dot, spaces; must end with .ps1",
            style="red",
        )
        return EXIT_FAIL

    own_fetcher = fetcher is None
    if own_fetcher:
        fetcher = Fetcher(min_tls=cfg["tls_min"], timeout=cfg["timeout"])
    try:
        result = download_with_progress(fetcher, target, con, plain=plain)
    except DownloadError:
        return EXIT_FAIL
    finally:
        if own_fetcher:
            fetcher.close()

    if result.used_fallback:
        write_center(con, f"Alternative download successful: {result.out_path}", style="green")
    else:
        write_center(con, f"Done: {result.out_path} ({human_size(result.size)})", style="green")

    con.print()
    write_center(con, "Have a great day")
    return EXIT_OK
