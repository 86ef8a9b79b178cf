"""Background eviction sweep."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from lrufiles.eviction.policy import select_victims
from lrufiles.store.entries import EntryStore

log = logging.getLogger("lrufiles.eviction")


@dataclass
class SweepReport:
    """Outcome of one sweep."""
    scanned: int = 0
    evicted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class EvictionSweeper:
    """
    Keeps the cache under its count and size limits.

    A sweep stats every entry file, ranks them by last access and deletes the
    ones selected by :func:`select_victims`. There is no index of entries, so
    each sweep costs one ``stat`` per file: O(n) filesystem calls. That is the
    price of keeping all state on disk, and the reason sweeps run on a timer
    in a worker thread instead of on the request path.

    Foreground operations never wait for a sweep. A write racing with a sweep
    can lose its entry if it ranks oldest at that moment.
    """

    def __init__(self, store: EntryStore, max_files: Optional[int] = None, max_size: Optional[int] = None,
                 interval_sec: float = 600.0):
        self.store = store
        self.max_files = max_files or None
        self.max_size = max_size or None
        self.interval_sec = max(0.0, float(interval_sec))
        self._stop_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

    @property
    def has_limits(self) -> bool:
        return bool(self.max_files or self.max_size)

    @property
    def is_running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    def run_sweep(self) -> SweepReport:
        entries = self.store.scan()
        report = SweepReport(scanned=len(entries))
        victims = select_victims(entries, max_files=self.max_files, max_size=self.max_size)
        if not victims:
            return report

        for entry in victims:
            try:
                removed = self.store.delete(entry.path)
            except OSError as e:
                log.warning("Could not evict %s: %s", entry.path, e)
                report.failed.append(entry.name)
                continue
            if removed:
                report.evicted.append(entry.name)
            else:
                log.debug("Already gone before eviction: %s", entry.path)

        log.info("Evicted %d of %d cache entries", len(report.evicted), report.scanned)
        return report

    def start(self) -> bool:
        """Arms the periodic sweep. Returns False when there is nothing to do."""
        if not self.has_limits or self.interval_sec <= 0:
            log.debug("Eviction timer not armed (limits=%s, interval=%ss)", self.has_limits, self.interval_sec)
            return False
        if self.is_running:
            return True
        # one event per worker: a worker outliving a timed-out stop() stays stopped
        self._stop_event = threading.Event()
        # daemon: an armed timer must not keep the process alive
        self._worker_thread = threading.Thread(
            target=self._worker, args=(self._stop_event,), daemon=True, name="lrufiles-eviction"
        )
        self._worker_thread.start()
        return True

    def stop(self, timeout: float = 2.0) -> None:
        self._stop_event.set()
        worker = self._worker_thread
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=timeout)
        self._worker_thread = None

    def _worker(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval_sec):
            try:
                self.run_sweep()
            except Exception:
                log.exception("Eviction sweep failed, retrying in %ss", self.interval_sec)
