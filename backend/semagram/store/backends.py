"""Grapheme persistence backends: key/value contract used by GraphemeStore.

A backend only needs three operations:
- read(key) -> Grapheme | None
- write_if_absent(key, grapheme) -> (created, record)
- list_all() -> list[Grapheme]

write_if_absent is the only place where "first writer wins" is decided
across processes. In-process single-flight lives in GraphemeStore.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from semagram.errors import StorageUnavailable
from semagram.store.records import Grapheme

logger = logging.getLogger(__name__)


class GraphemeBackend(Protocol):
    def read(self, key: str) -> Grapheme | None: ...

    def write_if_absent(self, key: str, grapheme: Grapheme) -> tuple[bool, Grapheme]: ...

    def list_all(self) -> list[Grapheme]: ...


class InMemoryBackend:
    """Dict-backed store for tests and ephemeral deployments."""

    def __init__(self) -> None:
        self._records: dict[str, Grapheme] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> Grapheme | None:
        with self._lock:
            return self._records.get(key)

    def write_if_absent(self, key: str, grapheme: Grapheme) -> tuple[bool, Grapheme]:
        with self._lock:
            existing = self._records.get(key)
            if existing is not None:
                return False, existing
            self._records[key] = grapheme
            return True, grapheme

    def list_all(self) -> list[Grapheme]:
        with self._lock:
            return [self._records[k] for k in sorted(self._records)]


class JsonFileBackend:
    """One JSON file per grapheme under ``data_dir``.

    Records are published with an atomic hard link, so two processes racing
    on the same key cannot both create it.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create grapheme directory {self.data_dir}: {e}") from e

    @staticmethod
    def key_hash(key: str) -> str:
        """Short stable file stem for a key."""
        return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{self.key_hash(key)}.json"

    def read(self, key: str) -> Grapheme | None:
        path = self.path_for(key)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Cannot read grapheme '{key}': {e}") from e
        return Grapheme.from_dict(data)

    def write_if_absent(self, key: str, grapheme: Grapheme) -> tuple[bool, Grapheme]:
        path = self.path_for(key)
        payload = json.dumps(grapheme.to_dict(), ensure_ascii=False, indent=2)

        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.link(tmp_name, path)
            finally:
                os.unlink(tmp_name)
        except FileExistsError:
            existing = self.read(key)
            if existing is None:
                raise StorageUnavailable(f"Grapheme '{key}' vanished during creation")
            logger.debug("Grapheme '%s' already written by another process", key)
            return False, existing
        except OSError as e:
            raise StorageUnavailable(f"Cannot write grapheme '{key}': {e}") from e

        return True, grapheme

    def list_all(self) -> list[Grapheme]:
        records: list[Grapheme] = []
        try:
            paths = sorted(self.data_dir.glob("*.json"))
        except OSError as e:
            raise StorageUnavailable(f"Cannot list graphemes in {self.data_dir}: {e}") from e

        for path in paths:
            if path.name.startswith(".tmp-"):
                continue
            try:
                with open(path, encoding="utf-8") as f:
                    records.append(Grapheme.from_dict(json.load(f)))
            except (OSError, ValueError) as e:
                raise StorageUnavailable(f"Cannot read {path.name}: {e}") from e

        records.sort(key=lambda g: g.key)
        return records
