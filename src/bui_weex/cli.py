"""
bui_weex.cli - Command Line Interface
=====================================

This module provides the command-line interface for bui-weex using Typer.

Architecture
------------
    app (main entry point, global options)
    ├── create   - Create a project from a template release
    └── list     - List template releases (remote or cached)

Global options map onto :class:`bui_weex.models.Settings` and can also
be given through environment variables:

    --home           BUI_WEEX_HOME
    --releases-url   BUI_WEEX_RELEASES_URL
    --timeout        BUI_WEEX_TIMEOUT
    --github-token   GH_TOKEN, GITHUB_TOKEN

Usage Examples
--------------
    $ bui-weex create myapp
    $ bui-weex create myapp 1.3.0
    $ bui-weex list
    $ bui-weex list --cached

Exit Codes
----------
0 on success, 1 on any error, 130 when interrupted.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from bui_weex import __version__, output
from bui_weex.exceptions import BuiWeexError
from bui_weex.generator import create_project, list_cached_releases, list_releases
from bui_weex.models import DEFAULT_HOME, DEFAULT_RELEASES_URL, DEFAULT_TIMEOUT, Settings


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="bui-weex",
    help="Create bui-weex projects from versioned template releases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


# =============================================================================
# Error Boundary
# =============================================================================

@contextmanager
def _error_boundary() -> Iterator[None]:
    """Turn library errors into a single ERROR line and a non-zero exit."""
    try:
        yield
    except BuiWeexError as e:
        output.error(str(e), e.hint)
        raise typer.Exit(EXIT_ERROR) from e
    except KeyboardInterrupt as e:
        output.warn("Aborted by user.")
        raise typer.Exit(EXIT_INTERRUPTED) from e
    except OSError as e:
        output.error(str(e))
        raise typer.Exit(EXIT_ERROR) from e


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        output.console.print(f"bui-weex {__version__}")
        raise typer.Exit()


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    home: Annotated[
        Path,
        typer.Option(
            "--home",
            envvar="BUI_WEEX_HOME",
            help="Directory holding the template cache.",
            file_okay=False,
        ),
    ] = DEFAULT_HOME,
    releases_url: Annotated[
        str,
        typer.Option(
            "--releases-url",
            envvar="BUI_WEEX_RELEASES_URL",
            help="GitHub releases endpoint of the template repository.",
        ),
    ] = DEFAULT_RELEASES_URL,
    timeout: Annotated[
        float,
        typer.Option(
            "--timeout",
            envvar="BUI_WEEX_TIMEOUT",
            help="HTTP timeout in seconds.",
        ),
    ] = DEFAULT_TIMEOUT,
    github_token: Annotated[
        str | None,
        typer.Option(
            "--github-token",
            envvar=["GH_TOKEN", "GITHUB_TOKEN"],
            help="GitHub token used to raise API rate limits.",
            show_default=False,
        ),
    ] = None,
) -> None:
    """
    [bold]bui-weex[/] - bootstrap a bui-weex project.

    Templates are downloaded from GitHub releases and cached under
    [cyan]~/.bui-weex[/].

    [bold]Quick Start:[/]

        bui-weex create myapp
    """
    try:
        ctx.obj = Settings(
            home=home.expanduser(),
            releases_url=releases_url,
            timeout=timeout,
            github_token=github_token,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            output.error(f"Invalid {field}: {err['msg']}")
        raise typer.Exit(EXIT_ERROR) from e


# =============================================================================
# Create Command
# =============================================================================

@app.command()
def create(
    ctx: typer.Context,
    name: Annotated[
        str,
        typer.Argument(help="Name of the project directory to create."),
    ],
    version: Annotated[
        str | None,
        typer.Argument(help="Template version (default: latest release)."),
    ] = None,
) -> None:
    """
    Create a bui-weex project. Default to use latest version of template.

    [bold]Examples:[/]

        bui-weex create myapp
        bui-weex create myapp 1.3.0
    """
    settings: Settings = ctx.obj
    with _error_boundary():
        create_project(name, version, settings=settings)


# =============================================================================
# List Command
# =============================================================================

@app.command("list")
def list_(
    ctx: typer.Context,
    cached: Annotated[
        bool,
        typer.Option(
            "--cached",
            help="Show the releases in the local cache instead of GitHub.",
        ),
    ] = False,
) -> None:
    """List available version of template releases."""
    settings: Settings = ctx.obj
    with _error_boundary():
        if cached:
            list_cached_releases(settings)
        else:
            list_releases(settings)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
