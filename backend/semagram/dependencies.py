"""FastAPI dependency injection."""

from __future__ import annotations

import threading

from semagram.config import Settings, settings
from semagram.engine.composer import Composer
from semagram.store.archive import ArchiveSink
from semagram.store.backends import JsonFileBackend
from semagram.store.graphemes import GraphemeStore

_store: GraphemeStore | None = None
_composer: Composer | None = None
_lock = threading.Lock()


def get_settings() -> Settings:
    return settings


def build_store(cfg: Settings) -> GraphemeStore:
    return GraphemeStore(
        backend=JsonFileBackend(cfg.data_dir),
        archive=ArchiveSink(cfg.grapheme_archive_dir, enabled=cfg.archive_enabled),
        salt=cfg.seed_salt,
        create_timeout=cfg.create_timeout_s,
    )


def get_store() -> GraphemeStore:
    """Process-wide store singleton (one single-flight arena per process)."""
    global _store
    with _lock:
        if _store is None:
            _store = build_store(settings)
    return _store


def get_composer() -> Composer:
    global _composer
    store = get_store()
    with _lock:
        if _composer is None:
            _composer = Composer(store, backdrop=settings.draw_backdrop)
    return _composer


def get_logogram_archive() -> ArchiveSink:
    return ArchiveSink(settings.logogram_archive_dir, enabled=settings.archive_enabled)
