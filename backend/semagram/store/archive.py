"""Archival sink: writes SVG bytes under a configured base directory."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from semagram.errors import ArchivalFailure

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^a-z0-9_.-]+")


def safe_identifier(text: str, max_len: int = 48) -> str:
    """File-system-safe stem: lower-case, unsafe runs collapsed to '_'."""
    stem = _UNSAFE_RE.sub("_", text.lower()).strip("_.")
    return stem[:max_len] or "untitled"


class ArchiveSink:
    """Idempotent file writer. Identical bytes on disk = no-op."""

    def __init__(self, base_dir: Path, enabled: bool = True) -> None:
        self.base_dir = Path(base_dir)
        self.enabled = enabled

    def path_for(self, identifier: str) -> Path:
        return self.base_dir / f"{identifier}.svg"

    def write(self, identifier: str, content: bytes) -> Path:
        """Write ``content`` as ``<identifier>.svg``. Raises ArchivalFailure."""
        if not self.enabled:
            raise ArchivalFailure(identifier, "archival disabled")

        path = self.path_for(identifier)
        try:
            if path.exists() and path.read_bytes() == content:
                logger.debug("Archive %s unchanged", path.name)
                return path

            self.base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-", suffix=".svg")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.warning("Archival of %s failed: %s", identifier, e)
            raise ArchivalFailure(identifier, str(e)) from e

        logger.info("Archived %s (%d bytes)", path, len(content))
        return path
