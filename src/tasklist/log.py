"""Console messages for tasklist, styled through a Rich theme.

Normal output goes to stdout; errors go to stderr so that scripted use can
separate them.  Debug lines only appear after ``set_verbose(True)``.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "log.info": "blue",
        "log.ok": "green",
        "log.warn": "yellow",
        "log.error": "bold red",
        "log.debug": "dim",
    }
)

console = Console(highlight=False, theme=THEME)
_err_console = Console(highlight=False, theme=THEME, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def _tag(style: str, label: str) -> str:
    return f"[{style}]\\[{label}][/{style}]"


def info(msg: str) -> None:
    console.print(f"{_tag('log.info', 'INFO')} {msg}")


def success(msg: str) -> None:
    console.print(f"{_tag('log.ok', 'OK')} {msg}")


def warn(msg: str) -> None:
    console.print(f"{_tag('log.warn', 'WARN')} {msg}")


def error(msg: str) -> None:
    _err_console.print(f"{_tag('log.error', 'ERROR')} {msg}")


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[log.debug]\\[DEBUG] {msg}[/log.debug]")
