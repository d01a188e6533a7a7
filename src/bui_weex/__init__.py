"""
bui-weex - Project Scaffolding from Template Releases
=====================================================

A CLI tool that bootstraps bui-weex projects from the versioned template
published as GitHub releases of ``bingo-oss/bui-weex-template``.

Features
--------
- **Versioned Templates**: Create projects from the latest or a pinned release
- **Local Cache**: Downloaded releases are kept under ``~/.bui-weex``
- **Offline Fallback**: Uses the newest cached release when GitHub is unreachable

Quick Start
-----------
```bash
# Create a project from the latest template
bui-weex create myapp

# Pin a template version
bui-weex create myapp 1.3.0

# Show the versions published on GitHub
bui-weex list
```

Example
-------
>>> from bui_weex import Settings, create_project
>>> create_project("myapp", "1.3.0", settings=Settings())

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``generator``: Project creation and release listing
- ``resolver``: Decides which release directory to use
- ``cache``: Persistent tag -> release record store
- ``github``: GitHub releases API client
- ``fetcher``: Archive download and extraction
- ``models``: Pydantic models for records and settings
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.2.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from bui_weex.generator import create_project, list_releases
from bui_weex.models import ReleaseInfo, ReleaseRecord, Settings
from bui_weex.resolver import ReleaseResolver


__all__ = [
    "ReleaseInfo",
    "ReleaseRecord",
    "ReleaseResolver",
    "Settings",
    "__version__",
    "create_project",
    "list_releases",
]
