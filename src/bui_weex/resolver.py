"""
bui_weex.resolver - Release Resolution
======================================

Decides which local directory holds the template for a requested
version:

1. A pinned version already in the cache is used as is, without
   contacting GitHub. Cache entries never expire.
2. Otherwise the release metadata is fetched (``latest`` when no version
   was given).
3. If that fails, a pinned version is a fatal error, while an unpinned
   request falls back to the most recently published cached release.
4. A release whose directory already exists (typically ``latest``
   pointing at a tag fetched earlier) is reused without downloading.
5. Anything else is downloaded, extracted and committed to the cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from bui_weex import output
from bui_weex.cache import ReleaseCache
from bui_weex.exceptions import NetworkError, ReleaseFetchError, ReleaseNotFoundError
from bui_weex.models import ReleaseInfo


class ReleaseSource(Protocol):
    """Anything able to describe a release, see :class:`bui_weex.github.ReleaseClient`."""

    def get_release(self, tag: str | None = None) -> ReleaseInfo: ...


class Fetcher(Protocol):
    """Anything able to materialize an archive, see :class:`bui_weex.fetcher.ArchiveFetcher`."""

    def fetch(self, url: str, destination: Path) -> Path: ...


class ReleaseResolver:
    """
    Resolves a version string to the directory of its extracted template.

    Parameters
    ----------
    cache : ReleaseCache
        Loaded cache; its directory is the cache root and it receives a
        new record after each download.

    source : ReleaseSource
        Provides release metadata.

    fetcher : Fetcher
        Downloads and extracts release archives.

    verbose : bool, default=True
        Print progress through the bui-weex console.

    Examples
    --------
    >>> resolver = ReleaseResolver(cache, ReleaseClient(settings, client), fetcher)
    >>> resolver.resolve("1.3.0")
    PosixPath('/home/user/.bui-weex/template/1.3.0')
    """

    def __init__(
        self,
        cache: ReleaseCache,
        source: ReleaseSource,
        fetcher: Fetcher,
        *,
        verbose: bool = True,
    ) -> None:
        self.cache = cache
        self.source = source
        self.fetcher = fetcher
        self.verbose = verbose

    def resolve(self, version: str | None = None) -> Path:
        """
        Return the template directory for ``version`` (latest when empty).

        Raises
        ------
        ReleaseFetchError
            If a pinned version is not cached and cannot be fetched.

        ReleaseNotFoundError
            If a pinned version is neither cached nor published (404), or
            the latest release cannot be fetched and nothing is cached.

        NetworkError, ExtractionError
            If downloading or extracting the archive fails.
        """
        version = (version or "").strip() or None

        if version:
            record = self.cache.lookup(version)
            if record is not None:
                self._info("Cache hit.")
                return self.cache.path_for(record)
            self._info("Cache miss.")

        label = version or "latest"
        self._info(f"Fetching release: {label}...")
        try:
            release = self.source.get_release(version)
        except NetworkError as e:
            if self.verbose:
                output.warn(str(e))
            if version:
                msg = f"Failed to fetch release of {label}"
                if e.status_code == 404:
                    raise ReleaseNotFoundError(msg, hint=e.hint) from e
                raise ReleaseFetchError(msg, status_code=e.status_code, hint=e.hint) from e
            return self._fallback_to_cache(label)

        target = self.cache.root / release.tag_name
        if target.exists():
            self._info("Already cached release.")
            return target

        self.fetcher.fetch(release.zipball_url, target)
        self.cache.commit(release.tag_name, release.to_record())
        return target

    def _fallback_to_cache(self, label: str) -> Path:
        record = self.cache.most_recent()
        if record is None:
            msg = f"Failed to fetch release of {label}"
            raise ReleaseNotFoundError(
                msg,
                hint="No release is cached yet; check your network connection.",
            )
        self._info(f"Found latest release in cache: {record.tag}.")
        return self.cache.path_for(record)

    def _info(self, message: str) -> None:
        if self.verbose:
            output.info(message)
