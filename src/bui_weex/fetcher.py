"""
bui_weex.fetcher - Archive Download and Extraction
==================================================

Downloads a release zipball and turns it into a template directory
inside the cache root.

GitHub zipballs contain one top-level directory whose name
(``<owner>-<repo>-<sha>``) is not known in advance. Each fetch therefore
works in its own staging directory created next to the final location:

    <cache root>/
    ├── .fetch-k2j3h4/          staging, removed when fetch returns
    │   ├── archive.zip
    │   └── content/
    │       └── bingo-oss-bui-weex-template-1a2b3c/
    └── 1.3.0/                  destination, moved in from content/

Only this fetch writes into its staging directory, so the extracted root
is whatever ``content/`` holds. Nothing reaches the destination until
the archive has been fully written and extracted.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path

import httpx
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from bui_weex import output
from bui_weex.exceptions import ExtractionError, NetworkError


CHUNK_SIZE = 64 * 1024
STAGING_PREFIX = ".fetch-"
ARCHIVE_NAME = "archive.zip"
CONTENT_DIR_NAME = "content"


# =============================================================================
# Extraction Helpers
# =============================================================================

def extract_archive(archive_path: Path, target: Path) -> list[Path]:
    """
    Extract a zip archive into ``target``.

    Unix permission bits recorded in the archive are restored on a
    best-effort basis, so executable scripts of the template stay
    executable.

    Returns
    -------
    list[Path]
        Paths of the extracted entries.

    Raises
    ------
    ExtractionError
        If the archive cannot be read or decompressed, or holds no
        entries.
    """
    target.mkdir(parents=True, exist_ok=True)
    extracted: list[Path] = []

    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = archive.infolist()
            if not members:
                msg = f"Archive {archive_path.name} is empty"
                raise ExtractionError(msg)

            for member in members:
                path = Path(archive.extract(member, target))
                extracted.append(path)
                mode = (member.external_attr >> 16) & 0o777
                if mode and not member.is_dir():
                    try:
                        os.chmod(path, mode)
                    except OSError:
                        pass  # Permissions are best effort
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        EOFError,
        RuntimeError,
        NotImplementedError,
    ) as e:
        # zlib.error and EOFError come from damaged deflate streams
        msg = f"Cannot extract {archive_path.name}: {e}"
        raise ExtractionError(msg) from e

    return extracted


def locate_extracted_root(content_dir: Path) -> Path:
    """
    Return the directory holding the extracted template.

    An archive with a single top-level directory (the GitHub layout)
    yields that directory; any other layout yields ``content_dir``
    itself.

    Raises
    ------
    ExtractionError
        If nothing was extracted.
    """
    entries = list(content_dir.iterdir()) if content_dir.is_dir() else []
    if not entries:
        msg = "Cannot find the extracted release"
        raise ExtractionError(msg)
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return content_dir


# =============================================================================
# Fetcher
# =============================================================================

class ArchiveFetcher:
    """
    Downloads release archives and extracts them into the cache root.

    Parameters
    ----------
    client : httpx.Client
        HTTP client used for the download.

    cache_root : Path
        Directory in which staging directories are created. Destinations
        should live on the same filesystem so the final move is a rename.

    verbose : bool, default=True
        Print progress through the bui-weex console.
    """

    def __init__(
        self,
        client: httpx.Client,
        cache_root: Path,
        *,
        verbose: bool = True,
    ) -> None:
        self.client = client
        self.cache_root = cache_root
        self.verbose = verbose

    def fetch(self, url: str, destination: Path) -> Path:
        """
        Download ``url`` and place its extracted template at ``destination``.

        Raises
        ------
        NetworkError
            On transport failure or a non-200 response.

        ExtractionError
            If ``destination`` already exists, the archive is corrupt or
            empty.
        """
        if destination.exists():
            msg = f"Release directory {destination} already exists"
            raise ExtractionError(msg)

        self.cache_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self.cache_root))

        try:
            archive_path = staging / ARCHIVE_NAME
            self._log("Trying to download...")
            self.download(url, archive_path)
            self._log("Download finished.")

            content_dir = staging / CONTENT_DIR_NAME
            extract_archive(archive_path, content_dir)
            self._log("Unzip finished.")

            root = locate_extracted_root(content_dir)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(root), str(destination))
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        return destination

    def download(self, url: str, archive_path: Path) -> None:
        """Stream the body of ``url`` into ``archive_path``."""
        try:
            with self.client.stream("GET", url) as response:
                if response.status_code != 200:
                    msg = f"Downloading {url} returned a non-200 response: {response.status_code}"
                    raise NetworkError(msg, status_code=response.status_code)

                total = int(response.headers.get("content-length", 0) or 0)
                with archive_path.open("wb") as f:
                    if total and self.verbose:
                        self._write_with_progress(response, f, total)
                    else:
                        for chunk in response.iter_bytes(chunk_size=CHUNK_SIZE):
                            f.write(chunk)
        except httpx.HTTPError as e:
            msg = f"Error downloading release: {e}"
            raise NetworkError(msg) from e

    def _write_with_progress(self, response: httpx.Response, f, total: int) -> None:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=output.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Downloading...", total=total)
            for chunk in response.iter_bytes(chunk_size=CHUNK_SIZE):
                f.write(chunk)
                progress.update(task, advance=len(chunk))

    def _log(self, message: str) -> None:
        if self.verbose:
            output.info(message)
