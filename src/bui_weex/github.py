"""
bui_weex.github - GitHub Releases API Client
============================================

Thin wrapper over ``httpx`` for the two endpoints bui-weex talks to:

    GET <releases_url>                list of releases (first page only)
    GET <releases_url>/latest         newest release
    GET <releases_url>/tags/<tag>     release by tag

Every failure is reported as :class:`~bui_weex.exceptions.NetworkError`,
with the HTTP status when a response was received.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from bui_weex import __version__
from bui_weex.exceptions import NetworkError
from bui_weex.models import ReleaseInfo, Settings


# Longest response body excerpt included in error messages
BODY_EXCERPT_LENGTH = 200


def build_headers(token: str | None = None) -> dict[str, str]:
    """
    Headers sent with every request.

    GitHub rejects API calls without a User-Agent. The Authorization
    header is added only when a non-empty token is configured.
    """
    headers = {
        "User-Agent": f"bui-weex/{__version__}",
        "Accept": "application/vnd.github+json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def create_client(settings: Settings) -> httpx.Client:
    """Create the HTTP client shared by the API client and the archive fetcher."""
    return httpx.Client(
        headers=build_headers(settings.github_token),
        timeout=settings.timeout,
        follow_redirects=True,
    )


class ReleaseClient:
    """
    Reads release metadata of the template repository.

    Parameters
    ----------
    settings : Settings
        Provides the releases endpoint.

    client : httpx.Client
        Configured HTTP client, see :func:`create_client`.
    """

    def __init__(self, settings: Settings, client: httpx.Client) -> None:
        self.settings = settings
        self.client = client

    def get_release(self, tag: str | None = None) -> ReleaseInfo:
        """
        Fetch one release, or the latest one when ``tag`` is empty.

        Raises
        ------
        NetworkError
            On transport failure, a non-200 status or a payload without
            ``tag_name``/``published_at``/``zipball_url``.
        """
        url = self.settings.release_url(tag)
        payload = self._get_json(url)
        try:
            return ReleaseInfo.model_validate(payload)
        except ValidationError as e:
            msg = f"Unexpected release payload from {url}: {e.error_count()} invalid field(s)"
            raise NetworkError(msg) from e

    def list_tags(self) -> list[str]:
        """
        Tags of the published releases, in the order GitHub returns them.

        Only the first page of results is read.
        """
        url = self.settings.releases_url
        payload = self._get_json(url)
        if not isinstance(payload, list):
            msg = f"Expected a list of releases from {url}"
            raise NetworkError(msg)
        return [
            entry["tag_name"]
            for entry in payload
            if isinstance(entry, dict) and entry.get("tag_name")
        ]

    def _get_json(self, url: str) -> Any:
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            msg = f"Request to {url} failed: {e}"
            raise NetworkError(msg) from e

        if response.status_code != 200:
            excerpt = response.text[:BODY_EXCERPT_LENGTH].strip()
            msg = f"Failed to fetch {url} - {response.status_code}: {excerpt}"
            raise NetworkError(
                msg,
                status_code=response.status_code,
                hint=_status_hint(response.status_code),
            )

        try:
            return response.json()
        except ValueError as e:
            msg = f"Response from {url} is not valid JSON"
            raise NetworkError(msg, status_code=response.status_code) from e


def _status_hint(status_code: int) -> str | None:
    if status_code == 404:
        return "Run `bui-weex list` to see the available versions."
    if status_code in (403, 429):
        return "GitHub rate limit reached; set GITHUB_TOKEN or pass --github-token."
    return None
