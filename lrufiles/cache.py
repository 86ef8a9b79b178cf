from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Optional

from lrufiles.eviction.sweeper import EvictionSweeper, SweepReport
from lrufiles.keys.resolver import KeyResolver
from lrufiles.settings import CacheSettings
from lrufiles.store.entries import EntryStore, Timestamp
from lrufiles.store.payload import as_payload

log = logging.getLogger("lrufiles")


class FileCache:
    """
    Key-value cache keeping one file per entry under a root directory.

    Options are the fields of :class:`CacheSettings` and may be passed either
    as a settings object or as keyword arguments::

        cache = FileCache(directory="/tmp/thumbs", max_files=1000, max_size="1 GB")
        cache.set("logo.png", data)
        cache.get("logo.png")

    When a limit is configured, a daemon thread sweeps the cache every
    ``check_interval_minutes`` and drops least recently used entries.
    """

    def __init__(self, settings: Optional[CacheSettings] = None, **options: Any):
        if settings is None:
            settings = CacheSettings(**options)
        elif options:
            settings = CacheSettings(**{**settings.model_dump(), **options})
        self._settings = settings

        root = settings.resolve_directory()
        self.resolver = KeyResolver(root, sharding_level=settings.sharding_level)
        self.store = EntryStore(root, sharding_level=settings.sharding_level)
        self.store.ensure_root()

        self.sweeper = EvictionSweeper(
            self.store,
            max_files=settings.max_files,
            max_size=settings.max_size,
            interval_sec=settings.check_interval_seconds,
        )
        self.sweeper.start()

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self.store.root

    @property
    def sharding_level(self) -> int:
        return self.resolver.sharding_level

    def set(self, key: str, value: Any) -> Path:
        """Stores bytes, text, a JSON-serializable value or a binary stream under ``key``."""
        return self.store.write(self.resolver.resolve(key), as_payload(value))

    def get(self, key: str) -> Optional[bytes]:
        return self.store.read(self.resolver.resolve(key))

    def stream(self, key: str) -> Optional[BinaryIO]:
        """Opens the entry for reading; the caller closes the returned file."""
        return self.store.open_stream(self.resolver.resolve(key))

    def has(self, key: str) -> bool:
        return self.store.exists(self.resolver.resolve(key))

    def touch(self, key: str, timestamp: Optional[Timestamp] = None) -> bool:
        return self.store.touch(self.resolver.resolve(key), timestamp)

    def delete(self, key: str) -> bool:
        return self.store.delete(self.resolver.resolve(key))

    def keys(self) -> list[str]:
        return self.store.list()

    def clear(self) -> bool:
        log.info("Clearing cache: %s", self.root)
        return self.store.clear_all()

    def run_eviction_sweep(self) -> SweepReport:
        return self.sweeper.run_sweep()

    def close(self) -> None:
        self.sweeper.stop()

    def __enter__(self) -> "FileCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"FileCache(root={str(self.root)!r}, max_files={self.sweeper.max_files}, "
            f"max_size={self.sweeper.max_size}, sharding_level={self.sharding_level})"
        )
