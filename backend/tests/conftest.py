"""Shared test fixtures."""

from __future__ import annotations

import pytest

from semagram.engine.composer import Composer
from semagram.models.parameters import ParameterVector, Perspective
from semagram.store.archive import ArchiveSink
from semagram.store.backends import InMemoryBackend, JsonFileBackend
from semagram.store.graphemes import GraphemeStore


# Values from the reference generator for seed "arrival|cat", default parameters
CAT_SEED = 3530652702
CAT_FIRST_ARC = "M 99.958 -2.911 A 100.000 100.000 0 0 1 12.989 99.153"
CAT_LAST_ARC = "M 146.511 -195.208 A 244.073 244.073 0 0 0 -179.462 -165.423"

COMPOSITE_TEXT = "the cat sat\nshe was always there"


@pytest.fixture
def params() -> ParameterVector:
    return ParameterVector()


@pytest.fixture
def bold_params() -> ParameterVector:
    return ParameterVector(
        certainty=0.95,
        modality=0.9,
        temporality=0.1,
        agency=0.9,
        perspective=Perspective.THIRD,
        negation=True,
        hypothetical=False,
        emphasis=1.0,
    )


@pytest.fixture
def store() -> GraphemeStore:
    return GraphemeStore(backend=InMemoryBackend())


@pytest.fixture
def file_store(tmp_path) -> GraphemeStore:
    return GraphemeStore(
        backend=JsonFileBackend(tmp_path / "graphemes"),
        archive=ArchiveSink(tmp_path / "archive" / "graphemes"),
    )


@pytest.fixture
def composer(store: GraphemeStore) -> Composer:
    return Composer(store)
