import os
from pathlib import Path

import pytest

from errors import DirectoryCreateError, Forbidden
from utils.cache_store import CacheStore


@pytest.fixture
def store(tmp_path) -> CacheStore:
    return CacheStore(tmp_path / "cache")


def test_rendition_path_mirrors_source_layout(store, tmp_path):
    assert store.rendition_path(992, "gallery/2024", "photo.jpg") == tmp_path / "cache/992/gallery/2024/photo.jpg"
    assert store.rendition_path(320, "/gallery/", "a.png") == tmp_path / "cache/320/gallery/a.png"
    assert store.rendition_path(320, "", "a.png") == tmp_path / "cache/320/a.png"


def test_rendition_path_has_no_side_effects(store):
    store.rendition_path(992, "gallery", "photo.jpg")
    assert not store.cache_root.exists()


def test_ensure_directory_creates_parents(store):
    target = store.cache_root / "480" / "a" / "b"
    store.ensure_directory(target)
    assert target.is_dir()
    store.ensure_directory(target)


def test_ensure_directory_tolerates_concurrent_creation(store, monkeypatch):
    target = store.cache_root / "480" / "race"

    def racing_mkdir(self, *args, **kwargs):
        # another request wins the race and creates the whole tree first
        os.makedirs(self, exist_ok=True)
        raise FileExistsError(str(self))

    monkeypatch.setattr(Path, "mkdir", racing_mkdir)
    store.ensure_directory(target)
    assert target.is_dir()


def test_ensure_directory_failure(store, monkeypatch):
    def failing_mkdir(self, *args, **kwargs):
        raise PermissionError(str(self))

    monkeypatch.setattr(Path, "mkdir", failing_mkdir)
    with pytest.raises(DirectoryCreateError) as info:
        store.ensure_directory(store.cache_root / "480")
    assert info.value.status_code == 403


def test_missing_rendition_is_never_fresh(store, tmp_path):
    source = tmp_path / "photo.jpg"
    source.write_bytes(b"src")
    assert not store.is_fresh(source, store.cache_root / "992" / "photo.jpg")


def test_freshness_compares_modification_times(store, tmp_path):
    source = tmp_path / "photo.jpg"
    source.write_bytes(b"src")
    rendition = store.cache_root / "992" / "photo.jpg"
    store.ensure_directory(rendition.parent)
    rendition.write_bytes(b"out")

    os.utime(source, (1_000, 1_000))
    os.utime(rendition, (1_000, 1_000))
    assert store.is_fresh(source, rendition)

    os.utime(source, (2_000, 2_000))
    assert not store.is_fresh(source, rendition)


def test_write_replaces_atomically_and_last_writer_wins(store):
    target = store.cache_root / "768" / "photo.jpg"
    store.ensure_directory(target.parent)

    store.write(target, b"first")
    store.write(target, b"second")

    assert target.read_bytes() == b"second"
    assert [p.name for p in target.parent.iterdir()] == ["photo.jpg"]


def test_write_into_missing_directory_is_forbidden(store):
    with pytest.raises(Forbidden):
        store.write(store.cache_root / "nope" / "photo.jpg", b"data")
