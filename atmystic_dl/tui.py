#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared console helpers (banner, centered lines) for the Atmystic downloader.
"""
from __future__ import annotations
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

TITLE = "Atmystic Design"

def header_art() -> str:
    return r"""
   _   _                     _   _
  /_\ | |_ _ __ _  _ ____  _| |_(_)__
 / _ \|  _| '  \ || (_-< || |  _| / _|
/_/ \_\\__|_|_|_\_, /__/\_, |\__|_\__|
                |__/    |__/
"""

def write_center(console: Console, text: str, style: str = "blue") -> None:
    """One status line, centered on the terminal width. `text` is taken literally."""
    console.print(escape(text), style=style, justify="center")

def banner(console: Console, plain: bool = False) -> None:
    console.print()
    if plain:
        write_center(console, TITLE, style="")
    else:
        art = header_art().strip("\n")
        console.print(
            Panel.fit(f"[bold green]{escape(art)}[/]\n\n[bold]{TITLE}[/]", border_style="green"),
            justify="center",
        )
    console.print()
