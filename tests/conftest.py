"""
pytest configuration and shared fixtures for bui-weex tests.

Fixtures defined here are automatically available to all tests. No test
touches the network: HTTP traffic goes through ``httpx.MockTransport``.

Fixtures
--------
settings : Settings
    Settings whose home directory lives under ``tmp_path``.

make_zipball : Callable
    Builds a GitHub-style zip archive in memory.

github_api : FakeGitHub
    A fake GitHub releases API served through ``httpx.MockTransport``.
"""

from __future__ import annotations

import io
import json
import zipfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from bui_weex.models import Settings


RELEASES_URL = "https://api.example.test/repos/bingo-oss/bui-weex-template/releases"

DEFAULT_TEMPLATE_FILES = {
    "package.json": '{"name": "bui-weex-app"}',
    "src/index.vue": "<template><div/></template>",
    "build/run.sh": "#!/bin/sh\necho run\n",
}


def build_zipball(
    files: dict[str, str] | None = None,
    root: str | None = "bingo-oss-bui-weex-template-1a2b3c4",
    executable: tuple[str, ...] = ("build/run.sh",),
) -> bytes:
    """Return zip bytes laid out like a GitHub zipball."""
    files = DEFAULT_TEMPLATE_FILES if files is None else files
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        if root:
            archive.writestr(f"{root}/", "")
        for name, content in files.items():
            arcname = f"{root}/{name}" if root else name
            info = zipfile.ZipInfo(arcname)
            mode = 0o755 if name in executable else 0o644
            info.external_attr = (0o100000 | mode) << 16
            archive.writestr(info, content)
    return buffer.getvalue()


def build_corrupt_zipball(root: str = "bingo-oss-bui-weex-template-1a2b3c4") -> bytes:
    """Return a zipball with a valid directory but a damaged deflate stream."""
    content = "".join(f"line {i}: {i * 7919 % 104729}\n" for i in range(4000))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(f"{root}/package.json", content)

    data = bytearray(buffer.getvalue())
    with zipfile.ZipFile(io.BytesIO(bytes(data))) as archive:
        info = archive.infolist()[0]
    offset = info.header_offset
    name_length = int.from_bytes(data[offset + 26:offset + 28], "little")
    extra_length = int.from_bytes(data[offset + 28:offset + 30], "little")
    start = offset + 30 + name_length + extra_length + info.compress_size // 2
    for index in range(start, start + 20):
        data[index] ^= 0xFF
    return bytes(data)


def release_payload(
    tag: str,
    published_at: str = "2020-01-01T00:00:00Z",
    zipball_url: str | None = None,
) -> dict[str, str]:
    return {
        "tag_name": tag,
        "published_at": published_at,
        "zipball_url": zipball_url or f"https://codeload.example.test/zip/{tag}",
        "name": f"Release {tag}",
    }


class FakeGitHub:
    """
    Minimal stand-in for the GitHub releases API and archive host.

    ``routes`` maps a URL to ``(status, body)``; bodies that are not
    bytes are JSON encoded. Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: Exception | None = None

    def add_release(self, tag: str, *, latest: bool = False, **kwargs: str) -> dict[str, str]:
        payload = release_payload(tag, **kwargs)
        self.routes[f"{RELEASES_URL}/tags/{tag}"] = (200, payload)
        if latest:
            self.routes[f"{RELEASES_URL}/latest"] = (200, payload)
        self.routes[payload["zipball_url"]] = (200, build_zipball())
        return payload

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        status, body = self.routes.get(str(request.url), (404, {"message": "Not Found"}))
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body).encode())

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at an isolated home directory."""
    return Settings(home=tmp_path / "home", releases_url=RELEASES_URL)


@pytest.fixture
def make_zipball() -> Callable[..., bytes]:
    return build_zipball


@pytest.fixture
def github_api() -> FakeGitHub:
    return FakeGitHub()


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the test suite."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external resources"
    )
