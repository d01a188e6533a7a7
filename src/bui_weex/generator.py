"""
bui_weex.generator - Project Creation
=====================================

Creates a new project by copying a resolved template release, and lists
the releases available remotely or in the local cache.

Generation Pipeline
-------------------
1. **Check**: Refuse to run when the destination already exists
2. **Resolve**: Find or download the requested template release
3. **Copy**: Copy the template tree to the destination

The existence check runs before any network or cache access, so a
mistyped project name fails fast and leaves no trace.

Example
-------
>>> from bui_weex.generator import create_project
>>> result = create_project("myapp", "1.3.0")
>>> result.project_path
PosixPath('/path/to/myapp')
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import httpx
from rich.markup import escape
from rich.table import Table

from bui_weex import output
from bui_weex.cache import ReleaseCache
from bui_weex.exceptions import ProjectExistsError, TemplateMissingError
from bui_weex.fetcher import ArchiveFetcher
from bui_weex.github import ReleaseClient, create_client
from bui_weex.models import Settings
from bui_weex.resolver import ReleaseResolver


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class CreationResult:
    """
    Outcome of :func:`create_project`.

    Attributes
    ----------
    project_path : Path
        Absolute path of the created project.

    release_path : Path
        Template directory the project was copied from.
    """

    project_path: Path
    release_path: Path


# =============================================================================
# HTTP Client Handling
# =============================================================================


@contextmanager
def _http_client(settings: Settings, client: httpx.Client | None) -> Iterator[httpx.Client]:
    """Yield ``client`` as is, or a new client closed on exit."""
    if client is not None:
        yield client
        return
    with create_client(settings) as owned:
        yield owned


# =============================================================================
# Project Creation
# =============================================================================


def copy_template(release_path: Path, destination: Path) -> None:
    """
    Recursively copy a template release to ``destination``.

    Files keep their permission bits and timestamps (``shutil.copy2``).

    Raises
    ------
    TemplateMissingError
        If the release directory has disappeared from the cache.
    """
    if not release_path.is_dir():
        msg = f"Template directory {release_path} does not exist"
        raise TemplateMissingError(
            msg,
            hint="Remove the stale entry from the cache file or delete the cache directory.",
        )
    shutil.copytree(release_path, destination, symlinks=True)


def create_project(
    name: str | Path,
    version: str | None = None,
    *,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
    verbose: bool = True,
) -> CreationResult:
    """
    Create a project at ``name`` from template release ``version``.

    Parameters
    ----------
    name : str | Path
        Destination directory, relative to the working directory.

    version : str | None
        Template release tag; None or empty selects the latest release.

    settings : Settings | None
        Runtime configuration, defaults to ``Settings()``.

    client : httpx.Client | None
        HTTP client to use; one is created from ``settings`` when omitted.

    verbose : bool, default=True
        Print progress through the bui-weex console.

    Raises
    ------
    ProjectExistsError
        If something already exists at ``name``. Raised before any
        network or cache access.

    BuiWeexError
        Any resolution, download or extraction failure.
    """
    settings = settings or Settings()
    destination = Path(name)

    if destination.exists() or destination.is_symlink():
        msg = f"File {name} already exist."
        raise ProjectExistsError(msg, hint="Choose another project name.")

    if verbose:
        output.info("Creating project...")

    cache = ReleaseCache.load(settings.releases_file)
    with _http_client(settings, client) as http:
        resolver = ReleaseResolver(
            cache,
            ReleaseClient(settings, http),
            ArchiveFetcher(http, settings.template_dir, verbose=verbose),
            verbose=verbose,
        )
        release_path = resolver.resolve(version)

    if verbose:
        output.info("Copying template file...")
    try:
        copy_template(release_path, destination)
    except BaseException:
        # Clean up partial project
        if destination.is_dir():
            shutil.rmtree(destination, ignore_errors=True)
        raise
    if verbose:
        output.info("Project created.")

    return CreationResult(
        project_path=destination.resolve(),
        release_path=release_path,
    )


# =============================================================================
# Release Listing
# =============================================================================


def list_releases(
    settings: Settings | None = None,
    *,
    client: httpx.Client | None = None,
) -> list[str]:
    """
    Print the tags published on GitHub, one per line.

    The listing is always fetched live and never touches the cache.
    Only the first page of the GitHub API response is read.

    Raises
    ------
    NetworkError
        If the release list cannot be fetched.
    """
    settings = settings or Settings()
    output.info("Fetching version info...")
    with _http_client(settings, client) as http:
        tags = ReleaseClient(settings, http).list_tags()

    output.console.print("Available versions:")
    for tag in tags:
        output.console.print(f"[green underline]{escape(tag)}[/]")
    return tags


def list_cached_releases(settings: Settings | None = None) -> list[str]:
    """Print the releases stored in the local cache, newest first."""
    settings = settings or Settings()
    cache = ReleaseCache.load(settings.releases_file)
    records = cache.records()

    if not records:
        output.info(f"No cached releases in {settings.template_dir}.")
        return []

    table = Table(title="Cached Releases", show_header=True)
    table.add_column("Version", style="cyan")
    table.add_column("Published", style="green")
    table.add_column("Location")

    for record in records:
        location = cache.path_for(record)
        table.add_row(
            escape(record.tag),
            record.published_at.strftime("%Y-%m-%d %H:%M"),
            escape(str(location)) if location.is_dir() else f"[red]{escape(str(location))} (missing)[/]",
        )

    output.console.print(table)
    return [record.tag for record in records]
