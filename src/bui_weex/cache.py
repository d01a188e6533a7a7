"""
bui_weex.cache - Release Cache Store
====================================

Persists the mapping tag -> :class:`~bui_weex.models.ReleaseRecord` in a
single JSON file (``~/.bui-weex/template/release.json``):

    {
      "1.3.0": {
        "tag": "1.3.0",
        "time": "2020-01-01T00:00:00Z",
        "path": "1.3.0"
      }
    }

The cache is loaded once per process and written back in full after each
successful fetch. There is no locking: concurrent invocations may lose
each other's writes.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from bui_weex.exceptions import CacheParseError
from bui_weex.models import ReleaseRecord


class ReleaseCache:
    """
    In-memory view of ``release.json``.

    Parameters
    ----------
    file_path : Path
        Location of the record file. Its parent directory is the cache
        root against which record paths are resolved.

    records : dict[str, ReleaseRecord] | None
        Initial content; use :meth:`load` to read it from disk.
    """

    def __init__(
        self,
        file_path: Path,
        records: dict[str, ReleaseRecord] | None = None,
    ) -> None:
        self.file_path = file_path
        self._records: dict[str, ReleaseRecord] = dict(records or {})

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, file_path: Path) -> ReleaseCache:
        """
        Read the record file.

        A missing, empty or malformed file yields an empty cache; this
        never raises.
        """
        try:
            records = cls._read(file_path)
        except CacheParseError:
            records = {}
        return cls(file_path, records)

    @staticmethod
    def _read(file_path: Path) -> dict[str, ReleaseRecord]:
        if not file_path.is_file():
            return {}

        try:
            raw = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            msg = f"Cannot read {file_path}: {e}"
            raise CacheParseError(msg) from e

        if not isinstance(raw, dict):
            msg = f"Expected a JSON object in {file_path}"
            raise CacheParseError(msg)

        try:
            return {
                tag: ReleaseRecord.model_validate(entry)
                for tag, entry in raw.items()
            }
        except ValidationError as e:
            msg = f"Invalid release record in {file_path}: {e}"
            raise CacheParseError(msg) from e

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Path:
        return self.file_path.parent

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, tag: object) -> bool:
        return tag in self._records

    def lookup(self, tag: str) -> ReleaseRecord | None:
        """Return the record stored under exactly ``tag``, if any."""
        return self._records.get(tag)

    def most_recent(self) -> ReleaseRecord | None:
        """
        Return the record with the latest publish time.

        Records published at the same instant are ordered by tag, and the
        lexicographically greatest tag wins. Returns None when empty.
        """
        if not self._records:
            return None
        return max(
            self._records.values(),
            key=lambda record: (record.published_at, record.tag),
        )

    def records(self) -> list[ReleaseRecord]:
        """All records, newest first."""
        return sorted(
            self._records.values(),
            key=lambda record: (record.published_at, record.tag),
            reverse=True,
        )

    def path_for(self, record: ReleaseRecord) -> Path:
        """Absolute directory of a cached release."""
        return self.root / record.path

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def commit(self, tag: str, record: ReleaseRecord) -> None:
        """
        Store ``record`` under ``tag`` and rewrite the whole file.

        The file is pretty-printed with a two-space indent so it stays
        readable when inspected by hand.
        """
        self._records[tag] = record
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            key: value.to_json_dict()
            for key, value in self._records.items()
        }
        self.file_path.write_text(
            json.dumps(payload, indent=2) + "\n",
            encoding="utf-8",
        )
