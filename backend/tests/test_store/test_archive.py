"""Tests for the archival sink."""

import pytest

from semagram.errors import ArchivalFailure
from semagram.store.archive import ArchiveSink, safe_identifier


def test_safe_identifier():
    assert safe_identifier("She was always there") == "she_was_always_there"
    assert safe_identifier("../../etc/passwd") == "etc_passwd"
    assert safe_identifier("!!!") == "untitled"
    assert len(safe_identifier("x" * 200)) == 48


def test_write_creates_directory(tmp_path):
    sink = ArchiveSink(tmp_path / "a" / "b")
    path = sink.write("cat", b"<svg/>")
    assert path == tmp_path / "a" / "b" / "cat.svg"
    assert path.read_bytes() == b"<svg/>"


def test_identical_write_is_noop(tmp_path):
    sink = ArchiveSink(tmp_path)
    path = sink.write("cat", b"<svg/>")
    mtime = path.stat().st_mtime_ns
    assert sink.write("cat", b"<svg/>") == path
    assert path.stat().st_mtime_ns == mtime
    assert sorted(p.name for p in tmp_path.iterdir()) == ["cat.svg"]


def test_changed_content_replaces(tmp_path):
    sink = ArchiveSink(tmp_path)
    sink.write("cat", b"<svg/>")
    path = sink.write("cat", b"<svg></svg>")
    assert path.read_bytes() == b"<svg></svg>"


def test_disabled_sink_fails(tmp_path):
    with pytest.raises(ArchivalFailure) as exc:
        ArchiveSink(tmp_path, enabled=False).write("cat", b"<svg/>")
    assert exc.value.identifier == "cat"
    assert not (tmp_path / "cat.svg").exists()


def test_unwritable_location_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(ArchivalFailure):
        ArchiveSink(blocker / "archive").write("cat", b"<svg/>")
