"""
bui_weex.models - Pydantic Models for Releases and Settings
===========================================================

This module defines the data models used throughout bui-weex. Pydantic
gives us validation of the GitHub payloads and of the cache file, plus
straightforward JSON serialization for ``release.json``.

Architecture Notes
------------------
    Settings
    ├── home: Path            (~/.bui-weex)
    ├── releases_url: str     (GitHub releases endpoint)
    ├── timeout: float
    └── github_token: str | None

    ReleaseInfo               (GitHub API payload, read only)
    └── to_record() -> ReleaseRecord

    ReleaseRecord             (one entry of release.json)
    ├── tag: str
    ├── published_at: datetime   (stored as "time")
    └── path: str                (relative to the cache root)

Usage Example
-------------
>>> info = ReleaseInfo(
...     tag_name="1.3.0",
...     published_at="2020-01-01T00:00:00Z",
...     zipball_url="http://x/archive.zip",
... )
>>> info.to_record().path
'1.3.0'
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Constants
# =============================================================================

DEFAULT_HOME = Path.home() / ".bui-weex"
DEFAULT_RELEASES_URL = "https://api.github.com/repos/bingo-oss/bui-weex-template/releases"
DEFAULT_TIMEOUT = 30.0

TEMPLATE_DIR_NAME = "template"
RELEASES_FILE_NAME = "release.json"


def _as_utc(value: datetime) -> datetime:
    """Timestamps without an offset are taken as UTC so they stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# =============================================================================
# Release Models
# =============================================================================

class ReleaseRecord(BaseModel):
    """
    A cached template release, as stored in ``release.json``.

    The on-disk keys are ``tag``, ``time`` and ``path``; ``time`` is
    exposed as :attr:`published_at` in Python code.

    Attributes
    ----------
    tag : str
        Release tag, unique key of the cache.

    published_at : datetime
        Publish timestamp reported by GitHub.

    path : str
        Directory name of the extracted release, relative to the cache root.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tag: Annotated[str, Field(min_length=1, description="Release tag")]
    published_at: datetime = Field(
        alias="time",
        description="Release publish time",
    )
    path: Annotated[str, Field(min_length=1, description="Cache-root relative directory")]

    @field_validator("published_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def to_json_dict(self) -> dict[str, str]:
        """Serialize using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)


class ReleaseInfo(BaseModel):
    """
    The part of a GitHub release payload that bui-weex consumes.

    GitHub returns many more keys (assets, author, body...); they are
    ignored.
    """

    model_config = ConfigDict(extra="ignore")

    tag_name: Annotated[str, Field(min_length=1)]
    published_at: datetime
    zipball_url: Annotated[str, Field(min_length=1)]

    @field_validator("published_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def to_record(self) -> ReleaseRecord:
        """
        Build the cache record for this release.

        Releases are extracted into a directory named after their tag,
        so the relative path equals the tag.
        """
        return ReleaseRecord(
            tag=self.tag_name,
            published_at=self.published_at,
            path=self.tag_name,
        )


# =============================================================================
# Settings
# =============================================================================

class Settings(BaseModel):
    """
    Runtime configuration for bui-weex.

    Values come from CLI options, which fall back to environment
    variables and then to the defaults below.

    Attributes
    ----------
    home : Path
        Root of everything bui-weex stores locally.

    releases_url : str
        GitHub releases endpoint of the template repository.

    timeout : float
        Timeout in seconds applied to every HTTP request.

    github_token : str | None
        Optional token sent as a bearer token to raise API rate limits.

    Examples
    --------
    >>> settings = Settings(home=Path("/tmp/bw"))
    >>> settings.releases_file
    PosixPath('/tmp/bw/template/release.json')
    >>> Settings().release_url("1.3.0")
    'https://api.github.com/repos/bingo-oss/bui-weex-template/releases/tags/1.3.0'
    """

    home: Path = Field(
        default=DEFAULT_HOME,
        description="Local bui-weex directory",
    )
    releases_url: str = Field(
        default=DEFAULT_RELEASES_URL,
        description="GitHub releases endpoint",
        min_length=1,
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        description="HTTP timeout in seconds",
        gt=0,
    )
    github_token: str | None = Field(
        default=None,
        description="GitHub API token",
    )

    @field_validator("releases_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the endpoint so paths can be appended with ``/``."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            msg = f"Releases URL must be an http(s) URL: {v}"
            raise ValueError(msg)
        return v

    @field_validator("github_token")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @property
    def template_dir(self) -> Path:
        """The cache root: extracted releases and ``release.json`` live here."""
        return self.home / TEMPLATE_DIR_NAME

    @property
    def releases_file(self) -> Path:
        return self.template_dir / RELEASES_FILE_NAME

    def release_url(self, tag: str | None = None) -> str:
        """
        Endpoint describing a single release.

        Parameters
        ----------
        tag : str | None
            Release tag, or None for the latest release.
        """
        if tag:
            return f"{self.releases_url}/tags/{tag}"
        return f"{self.releases_url}/latest"
