"""
bui_weex.output - Console Output Helpers
========================================

All user-facing output goes through the Rich console defined here.
Messages use three markers:

    -->  progress / information
    WARN recoverable problem, execution continues
    ERROR fatal problem, printed by the CLI right before exiting
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape


console = Console(highlight=False, soft_wrap=True)

INFO_LABEL = "-->"
WARNING_LABEL = "[reverse]WARN[/reverse]"
ERROR_LABEL = "[reverse]ERROR[/reverse]"


def info(message: str) -> None:
    console.print(f"{INFO_LABEL} {escape(message)}")


def warn(message: str) -> None:
    console.print(f"[yellow]{WARNING_LABEL} {escape(message)}[/]")


def error(message: str, hint: str | None = None) -> None:
    """Print a fatal error and its optional hint. Does not exit."""
    console.print(f"[red]{ERROR_LABEL} {escape(message)}[/]")
    if hint:
        console.print(f"[dim]{escape(hint)}[/]")
