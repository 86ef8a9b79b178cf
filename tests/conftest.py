"""Cache fixtures: caches rooted in tmp_path, without background sweeps unless asked."""
import os
from pathlib import Path

import pytest

from lrufiles.cache import FileCache
from lrufiles.store.entries import EntryStore

BASE_TIME = 1_700_000_000


def write_aged(cache: FileCache, keys: list[str], size: int = 6, base: float = BASE_TIME) -> None:
    """Writes ``size``-byte entries and gives them strictly increasing access times, oldest first."""
    for i, key in enumerate(keys):
        cache.set(key, (key * size).encode()[:size].ljust(size, b"."))
        cache.touch(key, base + i)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keeps LRUFILES_* variables of the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("LRUFILES_"):
            monkeypatch.delenv(name)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def make_cache(cache_dir: Path):
    """Factory for caches in ``cache_dir``; the sweep timer is off unless an interval is passed."""
    created: list[FileCache] = []

    def _make(**options) -> FileCache:
        options.setdefault("directory", str(cache_dir))
        options.setdefault("check_interval_minutes", 0)
        cache = FileCache(**options)
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        cache.close()


@pytest.fixture
def cache(make_cache) -> FileCache:
    """Cache without limits."""
    return make_cache()


@pytest.fixture
def store(cache_dir: Path) -> EntryStore:
    s = EntryStore(cache_dir)
    s.ensure_root()
    return s


@pytest.fixture
def aged():
    """The ``write_aged`` helper, for tests that need entries with known recency."""
    return write_aged
