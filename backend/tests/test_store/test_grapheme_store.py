"""Tests for GraphemeStore get-or-create semantics."""

import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from semagram.engine.geometry import generate_geometry
from semagram.errors import ArchivalFailure, ConcurrentCreateTimeout, StorageUnavailable
from semagram.models.parameters import ParameterVector
from semagram.store.backends import InMemoryBackend, JsonFileBackend
from semagram.store.graphemes import GraphemeStore
from tests.conftest import CAT_FIRST_ARC, CAT_SEED


def test_first_encounter_creates(store, params):
    g = store.get_or_create("cat", params)
    assert g.key == "cat"
    assert g.seed == CAT_SEED
    assert g.geometry.rings[0][0].d == CAT_FIRST_ARC
    assert store.created_count == 1


def test_get_never_creates(store):
    assert store.get("cat") is None
    assert store.created_count == 0


def test_keys_are_normalized(store, params):
    a = store.get_or_create("  Cat ", params)
    b = store.get_or_create("CAT", params)
    assert a == b
    assert store.created_count == 1


def test_first_writer_wins(store, params, bold_params):
    first = store.get_or_create("cat", params)
    second = store.get_or_create("cat", bold_params)
    assert second == first
    assert second.parameters == params.snapshot()
    assert store.created_count == 1


def test_record_matches_pure_regeneration(store, bold_params):
    g = store.get_or_create("there", bold_params)
    assert g.geometry == generate_geometry(g.seed, bold_params, 5)


def test_salt_changes_every_grapheme(params):
    a = GraphemeStore(salt="arrival").get_or_create("cat", params)
    b = GraphemeStore(salt="heptapod").get_or_create("cat", params)
    assert a.seed != b.seed
    assert a.geometry != b.geometry


def test_concurrent_first_requests_create_once(store, params):
    barrier = threading.Barrier(16)

    def fetch(_):
        barrier.wait()
        return store.get_or_create("sat", params)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(fetch, range(16)))

    assert store.created_count == 1
    assert all(r == results[0] for r in results)


def test_concurrent_different_keys(store, params):
    words = [f"word{i}" for i in range(20)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda w: store.get_or_create(w, params), words * 3))
    assert store.created_count == 20
    assert [g.key for g in store.list_all()] == sorted(words)


def test_waiter_times_out_without_duplicate(params, monkeypatch):
    store = GraphemeStore(create_timeout=0.05)
    release = threading.Event()
    started = threading.Event()
    real_create = store._create

    def slow_create(key, p):
        started.set()
        release.wait(5)
        return real_create(key, p)

    monkeypatch.setattr(store, "_create", slow_create)

    with ThreadPoolExecutor(max_workers=1) as pool:
        owner = pool.submit(store.get_or_create, "cat", params)
        assert started.wait(5)
        with pytest.raises(ConcurrentCreateTimeout) as exc:
            store.get_or_create("cat", params)
        release.set()
        assert owner.result(5).key == "cat"

    assert isinstance(exc.value, StorageUnavailable)
    assert exc.value.key == "cat"
    assert store.created_count == 1


def test_waiters_see_creation_failure(params, monkeypatch):
    store = GraphemeStore()

    def broken(key, p):
        raise StorageUnavailable("disk gone")

    monkeypatch.setattr(store, "_create", broken)
    with pytest.raises(StorageUnavailable):
        store.get_or_create("cat", params)
    # Failure leaves nothing in flight
    assert store._inflight == {}


def test_file_backend_shared_between_stores(tmp_path, params, bold_params):
    a = GraphemeStore(backend=JsonFileBackend(tmp_path))
    b = GraphemeStore(backend=JsonFileBackend(tmp_path))
    first = a.get_or_create("cat", params)
    second = b.get_or_create("cat", bold_params)
    assert second == first
    assert a.created_count == 1
    assert b.created_count == 0


def test_drift_serves_regenerated_geometry(tmp_path, params, caplog):
    backend = JsonFileBackend(tmp_path)
    store = GraphemeStore(backend=backend)
    original = store.get_or_create("cat", params)

    path = backend.path_for("cat")
    data = json.loads(path.read_text(encoding="utf-8"))
    data["geometry"]["rings"][0][0]["d"] = "M 0 0 L 1 1"
    path.write_text(json.dumps(data), encoding="utf-8")

    with caplog.at_level("WARNING", logger="semagram.store.graphemes"):
        served = store.get("cat")

    assert served.geometry == original.geometry
    assert "drifted" in caplog.text


def test_archive_requires_sink(store, params):
    g = store.get_or_create("cat", params)
    with pytest.raises(ArchivalFailure):
        store.archive(g)


def test_archive_writes_standalone_svg(file_store, params):
    g = file_store.get_or_create("cat", params)
    path = file_store.archive(g)
    assert path.name == f"cat-{CAT_SEED:08x}.svg"
    content = path.read_text(encoding="utf-8")
    assert 'class="grapheme"' in content
    assert CAT_FIRST_ARC in content


def test_archive_all_reports(file_store, params):
    for word in ("cat", "sat", "there"):
        file_store.get_or_create(word, params)
    report = file_store.archive_all()
    assert report.archived == ["cat", "sat", "there"]
    assert report.failed == {}


def test_archive_all_collects_failures(tmp_path, params):
    from semagram.store.archive import ArchiveSink

    store = GraphemeStore(
        backend=InMemoryBackend(),
        archive=ArchiveSink(tmp_path / "off", enabled=False),
    )
    store.get_or_create("cat", params)
    report = store.archive_all()
    assert report.archived == []
    assert report.failed == {"cat": "archival disabled"}


def test_stored_parameters_are_a_snapshot(store):
    params = ParameterVector(certainty=0.2)
    g = store.get_or_create("cat", params)
    assert g.parameter_vector == params


@pytest.mark.parametrize("bad", [{"certainty": 5.0}, {"colour": 0.5}])
def test_invalid_stored_parameters_are_storage_errors(params, bad):
    backend = InMemoryBackend()
    record = GraphemeStore(backend=InMemoryBackend()).get_or_create("cat", params)
    record.parameters = {**record.parameters, **bad}
    backend.write_if_absent("cat", record)

    store = GraphemeStore(backend=backend)
    with pytest.raises(StorageUnavailable):
        store.get("cat")
    with pytest.raises(StorageUnavailable):
        store.get_or_create("cat", params)
