"""
bui_weex.exceptions - Error Hierarchy
=====================================

Every fatal condition raised by the library is a subclass of
:class:`BuiWeexError`. The CLI catches this base class, prints the
message and exits with status 1; library code never exits the process.

Hierarchy
---------
    BuiWeexError
    ├── ProjectExistsError
    ├── NetworkError
    │   └── ReleaseFetchError
    ├── ReleaseNotFoundError
    ├── ExtractionError
    │   └── TemplateMissingError
    └── CacheParseError
"""

from __future__ import annotations


class BuiWeexError(Exception):
    """
    Base exception for all bui-weex errors.

    Parameters
    ----------
    message : str
        Single-line description shown to the user.

    hint : str | None
        Optional follow-up advice printed under the message.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint


class ProjectExistsError(BuiWeexError):
    """Raised when the destination of a new project already exists."""


# --- Network -----------------------------------------------------------------

class NetworkError(BuiWeexError):
    """
    Raised on transport failures and non-200 responses.

    ``status_code`` is None when no response was received at all.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code


class ReleaseFetchError(NetworkError):
    """Raised when the metadata of an explicitly requested release cannot be fetched."""


class ReleaseNotFoundError(BuiWeexError):
    """Raised when a release is neither reachable remotely nor cached."""


# --- Archives ----------------------------------------------------------------

class ExtractionError(BuiWeexError):
    """Raised when a downloaded archive cannot be extracted."""


class TemplateMissingError(ExtractionError):
    """Raised when a resolved template directory does not exist on disk."""


# --- Cache -------------------------------------------------------------------

class CacheParseError(BuiWeexError):
    """
    Raised when ``release.json`` cannot be parsed.

    :meth:`bui_weex.cache.ReleaseCache.load` handles it and starts from an
    empty cache, so it never reaches the CLI.
    """
