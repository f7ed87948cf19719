"""Grapheme Store: get-or-create with at-most-one creation per key.

The store is the sole writer of grapheme records. Concurrent callers for the
same never-seen key share one in-flight Future: the first caller generates
and publishes, everybody else waits for (and returns) that same record.
Callers for different keys never contend beyond a dict lookup.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from pathlib import Path

from semagram.engine.geometry import generate_geometry
from semagram.engine.rng import seed_for
from semagram.engine.tokenizer import normalize_key, unit_count
from semagram.errors import ArchivalFailure, ConcurrentCreateTimeout
from semagram.models.parameters import DEFAULT_PARAMETERS, ParameterVector
from semagram.store.archive import ArchiveSink, safe_identifier
from semagram.store.backends import GraphemeBackend, InMemoryBackend
from semagram.store.records import Grapheme
from semagram.svg.serializer import render_grapheme

logger = logging.getLogger(__name__)

DEFAULT_SALT = "arrival"


@dataclass
class ArchiveReport:
    """Outcome of an administrative archival re-run."""

    archived: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class GraphemeStore:
    """Persistent word → grapheme mapping."""

    def __init__(
        self,
        backend: GraphemeBackend | None = None,
        archive: ArchiveSink | None = None,
        salt: str = DEFAULT_SALT,
        create_timeout: float = 10.0,
    ) -> None:
        self.backend = backend or InMemoryBackend()
        self.archive_sink = archive
        self.salt = salt
        self.create_timeout = create_timeout
        self._inflight: dict[str, Future[Grapheme]] = {}
        self._inflight_lock = threading.Lock()
        # Bumped on every successful creation; tests and /health read it
        self.created_count = 0

    def seed_for(self, key: str) -> int:
        return seed_for(self.salt, key)

    def get(self, word: str) -> Grapheme | None:
        """Stored record for ``word`` or None. Never creates."""
        key = normalize_key(word)
        record = self.backend.read(key)
        if record is None:
            return None
        return self._verified(record)

    def get_or_create(self, word: str, default_params: ParameterVector | None = None) -> Grapheme:
        """Return the grapheme for ``word``, creating it on first encounter.

        ``default_params`` only matter for the creating call: an existing
        record is returned unchanged whatever is passed (first writer wins).
        """
        key = normalize_key(word)

        existing = self.backend.read(key)
        if existing is not None:
            logger.debug("Grapheme hit: %s", key)
            return self._verified(existing)

        with self._inflight_lock:
            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            logger.debug("Waiting on in-flight creation of %s", key)
            try:
                return future.result(timeout=self.create_timeout)
            except FutureTimeout:
                raise ConcurrentCreateTimeout(key, self.create_timeout) from None

        try:
            record = self._create(key, default_params or DEFAULT_PARAMETERS)
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(record)
            return record
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)

    def _create(self, key: str, params: ParameterVector) -> Grapheme:
        # Another caller may have published between our read and taking ownership
        existing = self.backend.read(key)
        if existing is not None:
            return self._verified(existing)

        seed = self.seed_for(key)
        candidate = Grapheme(
            key=key,
            seed=seed,
            parameters=params.snapshot(),
            geometry=generate_geometry(seed, params, unit_count(key)),
            created_at=time.time(),
        )
        created, record = self.backend.write_if_absent(key, candidate)
        if created:
            with self._inflight_lock:
                self.created_count += 1
            logger.info(
                "Created grapheme %s (seed=%08x, rings=%d, spokes=%d)",
                key, seed, record.geometry.ring_count, record.geometry.spokes,
            )
        return record if created else self._verified(record)

    def _verified(self, record: Grapheme) -> Grapheme:
        """Serve stored geometry only if it matches regeneration."""
        regenerated = record.regenerate()
        if regenerated == record.geometry:
            return record
        logger.warning("Stored geometry for %s drifted from regeneration; serving regenerated", record.key)
        return Grapheme(
            key=record.key,
            seed=record.seed,
            parameters=record.parameters,
            geometry=regenerated,
            created_at=record.created_at,
        )

    def list_all(self) -> list[Grapheme]:
        return self.backend.list_all()

    def archive_identifier(self, grapheme: Grapheme) -> str:
        return f"{safe_identifier(grapheme.key)}-{grapheme.seed:08x}"

    def archive(self, grapheme: Grapheme) -> Path:
        """Write the grapheme's standalone SVG. Idempotent. Raises ArchivalFailure."""
        identifier = self.archive_identifier(grapheme)
        if self.archive_sink is None:
            raise ArchivalFailure(identifier, "no grapheme archive configured")
        svg = render_grapheme(grapheme.key, grapheme.geometry)
        return self.archive_sink.write(identifier, svg.encode("utf-8"))

    def archive_all(self) -> ArchiveReport:
        """Re-archive every stored grapheme."""
        report = ArchiveReport()
        for grapheme in self.list_all():
            try:
                self.archive(self._verified(grapheme))
            except ArchivalFailure as e:
                report.failed[grapheme.key] = e.reason
            else:
                report.archived.append(grapheme.key)
        logger.info("Archive re-run: %d archived, %d failed", len(report.archived), len(report.failed))
        return report
