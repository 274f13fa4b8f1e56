"""Merge helpers for adapters that combine several sub-queries into one page."""

from collections.abc import Iterable

from chainview.domain.models.transaction import CanonicalTransaction


def dedup_by_hash(records: Iterable[CanonicalTransaction]) -> list[CanonicalTransaction]:
    """Drop later records whose hash was already seen, preserving first-seen order."""
    seen: set[str] = set()
    unique: list[CanonicalTransaction] = []
    for record in records:
        if record.hash in seen:
            continue
        seen.add(record.hash)
        unique.append(record)
    return unique


def sort_newest_first(records: Iterable[CanonicalTransaction]) -> list[CanonicalTransaction]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def merge_streams(*streams: Iterable[CanonicalTransaction]) -> list[CanonicalTransaction]:
    """Concatenate, dedup by hash, then re-sort descending by timestamp."""
    merged: list[CanonicalTransaction] = []
    for stream in streams:
        merged.extend(stream)
    return sort_newest_first(dedup_by_hash(merged))
