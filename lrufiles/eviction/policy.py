"""Which entries a sweep removes.

Entries are ranked oldest-first by last access (name breaks ties). The count
limit is applied first: everything beyond the newest ``max_files`` goes. The
size limit is then applied to the survivors: the oldest of them go until the
rest fit in ``max_size`` bytes. With both limits set both hold afterwards,
even if the size limit alone would have removed fewer entries.
"""
from __future__ import annotations

from typing import Iterable, Optional

from lrufiles.store.entries import EntryStat


def rank_by_recency(entries: Iterable[EntryStat]) -> list[EntryStat]:
    return sorted(entries, key=lambda e: (e.atime, e.name, str(e.path)))


def select_victims(
    entries: Iterable[EntryStat],
    max_files: Optional[int] = None,
    max_size: Optional[int] = None,
) -> list[EntryStat]:
    """Returns the entries to delete, oldest first."""
    survivors = rank_by_recency(entries)
    victims: list[EntryStat] = []

    if max_files and len(survivors) > max_files:
        cut = len(survivors) - max_files
        victims.extend(survivors[:cut])
        survivors = survivors[cut:]

    if max_size:
        total = sum(e.size for e in survivors)
        cut = 0
        while total > max_size and cut < len(survivors):
            total -= survivors[cut].size
            cut += 1
        victims.extend(survivors[:cut])

    return victims
