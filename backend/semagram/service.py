"""Request boundary: one call from request model to archived logogram.

Transport-agnostic: the HTTP layer, the demo script and the tests all go
through ``generate_logogram``. StorageUnavailable propagates unmodified;
ArchivalFailure is absorbed and reported as ``archived=False``.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path

from semagram.engine.composer import Composer, Logogram
from semagram.engine.rng import hash_to_seed
from semagram.errors import ArchivalFailure
from semagram.models.requests import LogogramRequest
from semagram.store.archive import ArchiveSink
from semagram.store.graphemes import GraphemeStore

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_composition_seed(length: int = 8) -> str:
    """Fresh short base-36 seed, returned to the caller so it can be pinned."""
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def logogram_identifier(logogram: Logogram) -> str:
    stamp = time.strftime("%Y%m%dT%H%M%S", time.gmtime(logogram.created_at))
    return f"{stamp}-{logogram.mode}-{hash_to_seed(logogram.svg_document):08x}"


@dataclass
class LogogramResult:
    logogram: Logogram
    archived: bool = False
    archive_path: Path | None = None
    archive_errors: list[str] = field(default_factory=list)


def compose(request: LogogramRequest, composer: Composer) -> Logogram:
    """Dispatch on mode. Pure function of the request plus the store."""
    seed = request.composition_seed
    if request.randomize_seed:
        seed = random_composition_seed()

    if request.mode == "composite":
        return composer.compose_composite(request.phrase, request.parameters, seed)
    if request.mode == "blend":
        return composer.compose_blend(
            request.phrase,
            request.parameters,
            request.secondary_phrase or "",
            request.secondary_parameters or request.parameters,
            request.blend,
            seed,
        )
    return composer.compose_single(request.phrase, request.parameters, seed)


def generate_logogram(
    request: LogogramRequest,
    store: GraphemeStore,
    composer: Composer | None = None,
    logogram_archive: ArchiveSink | None = None,
) -> LogogramResult:
    composer = composer or Composer(store)
    logogram = compose(request, composer)
    result = LogogramResult(logogram=logogram)

    if not request.archive:
        return result

    for grapheme in logogram.graphemes.values():
        try:
            store.archive(grapheme)
        except ArchivalFailure as e:
            result.archive_errors.append(str(e))

    if logogram_archive is None:
        result.archive_errors.append("no logogram archive configured")
    else:
        try:
            result.archive_path = logogram_archive.write(
                logogram_identifier(logogram),
                logogram.svg_document.encode("utf-8"),
            )
        except ArchivalFailure as e:
            result.archive_errors.append(str(e))

    result.archived = not result.archive_errors
    if result.archive_errors:
        logger.warning("Logogram served but not fully archived: %s", "; ".join(result.archive_errors))
    return result
