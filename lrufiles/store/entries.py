from __future__ import annotations

import logging
import os
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from lrufiles.errors import NotFoundError
from lrufiles.store.payload import Payload

log = logging.getLogger("lrufiles.store")

Timestamp = Union[int, float, datetime]


@dataclass(frozen=True)
class EntryStat:
    name: str
    path: Path
    atime: float  # last access, epoch seconds
    size: int


def _to_epoch_ns(timestamp: Timestamp) -> int:
    if isinstance(timestamp, datetime):
        return int(timestamp.timestamp() * 1_000_000_000)
    return int(float(timestamp) * 1_000_000_000)


class EntryStore:
    """Byte-level operations on entry files under the cache root.

    Every call goes to the filesystem; nothing about entries is remembered in
    memory. Recency is the file access time, which is set explicitly on write,
    read and touch so that it does not depend on atime mount options.
    """

    def __init__(self, root: Path, sharding_level: int = 1):
        self.root = Path(root)
        self.sharding_level = int(sharding_level)

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def exists(self, path: Path) -> bool:
        return os.path.isfile(path)

    def write(self, path: Path, payload: Payload) -> Path:
        try:
            fh = open(path, "wb")
        except FileNotFoundError:
            # root (or shard) removed by clear(); bring it back once
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = open(path, "wb")

        try:
            with fh:
                payload.write_to(fh)
        except Exception:
            # a half-written file must not pass for an entry
            self._discard(path)
            raise
        try:
            os.utime(path, None)
        except FileNotFoundError:
            # evicted or deleted right after the write; the write itself completed
            log.debug("Entry %s removed before its access time was set", path)
        return path

    def read(self, path: Path) -> Optional[bytes]:
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        self._mark_accessed(path)
        return data

    def open_stream(self, path: Path) -> Optional[BinaryIO]:
        try:
            fh = open(path, "rb")
        except FileNotFoundError:
            return None
        self._mark_accessed(path)
        return fh

    def delete(self, path: Path) -> bool:
        try:
            os.unlink(path)
        except FileNotFoundError:
            return False
        return True

    def touch(self, path: Path, timestamp: Optional[Timestamp] = None) -> bool:
        ns = time.time_ns() if timestamp is None else _to_epoch_ns(timestamp)
        try:
            os.utime(path, ns=(ns, ns))
        except FileNotFoundError as e:
            raise NotFoundError(f"No cache entry at {path}") from e
        return True

    def list(self) -> list[str]:
        return [entry.name for entry in self._iter_files()]

    def scan(self) -> list[EntryStat]:
        """Lists entries with recency and size, one stat call per file."""
        stats: list[EntryStat] = []
        for entry in self._iter_files():
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                log.debug("Skipping %s, stat failed: %s", entry.path, e)
                continue
            stats.append(EntryStat(name=entry.name, path=Path(entry.path), atime=st.st_atime, size=st.st_size))
        return stats

    def clear_all(self) -> bool:
        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            pass
        return True

    def _iter_files(self) -> Iterator[os.DirEntry]:
        try:
            with os.scandir(self.root) as it:
                top = list(it)
        except OSError:
            return

        if self.sharding_level == 1:
            for entry in top:
                if entry.is_file(follow_symlinks=False):
                    yield entry
            return

        for shard in top:
            if not shard.is_dir(follow_symlinks=False):
                continue
            try:
                with os.scandir(shard.path) as it:
                    files = [e for e in it if e.is_file(follow_symlinks=False)]
            except OSError as e:
                log.debug("Skipping shard %s: %s", shard.path, e)
                continue
            yield from files

    def _mark_accessed(self, path: Path) -> None:
        try:
            st = os.stat(path)
            os.utime(path, ns=(time.time_ns(), st.st_mtime_ns))
        except FileNotFoundError:
            # deleted between the read and now; the data already read is still valid
            pass

    def _discard(self, path: Path) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
