from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from focusboard.domain import parse_iso_datetime


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC copy of ``moment``; naive values are read as local wall time."""
    if moment is None:
        return None
    return moment.astimezone(timezone.utc)


@dataclass
class QueueEntry:
    key: Any
    attempts: int = 0
    retry_after: Optional[datetime] = None

    def is_due(self, now: Optional[datetime]) -> bool:
        return now is None or self.retry_after is None or self.retry_after <= as_utc(now)


class SyncQueue:
    """
    Set of record keys awaiting a retried server write.

    Membership is deduplicated, so the queue never holds more entries than
    there are records. Each entry backs off exponentially (capped at
    ``max_delay``) between failed attempts; nothing is ever dropped for
    having failed too often.
    """

    def __init__(self, base_delay=timedelta(seconds=5), max_delay=timedelta(minutes=30)):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._entries: Dict[Any, QueueEntry] = {}

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> List[Any]:
        return list(self._entries)

    def get(self, key) -> Optional[QueueEntry]:
        return self._entries.get(key)

    def backoff(self, attempts: int) -> timedelta:
        delay = self.base_delay * (2 ** max(attempts - 1, 0))
        return min(delay, self.max_delay)

    def push(self, key, now: Optional[datetime] = None) -> bool:
        """Queue ``key`` unless already present; ``now`` marks a failed attempt."""
        if key in self._entries:
            return False
        entry = QueueEntry(key=key)
        if now is not None:
            entry.attempts = 1
            entry.retry_after = as_utc(now) + self.backoff(1)
        self._entries[key] = entry
        return True

    def retry(self, entry: QueueEntry, now: datetime) -> None:
        """Re-enqueue a drained entry after another failed attempt."""
        attempts = entry.attempts + 1
        existing = self._entries.get(entry.key)
        if existing is not None:
            attempts = max(attempts, existing.attempts)
        self._entries[entry.key] = QueueEntry(
            key=entry.key,
            attempts=attempts,
            retry_after=as_utc(now) + self.backoff(attempts),
        )

    def drain(self, now: Optional[datetime] = None) -> List[QueueEntry]:
        """Remove and return a snapshot of due entries (all when ``now`` is None)."""
        due = [entry for entry in self._entries.values() if entry.is_due(now)]
        for entry in due:
            del self._entries[entry.key]
        return due

    def discard(self, key) -> None:
        self._entries.pop(key, None)

    def rename(self, old_key, new_key) -> None:
        entry = self._entries.pop(old_key, None)
        if entry is not None:
            entry.key = new_key
            self._entries[new_key] = entry

    def clear(self) -> None:
        self._entries.clear()

    def to_cache(self) -> list:
        return [
            {
                "key": entry.key,
                "attempts": entry.attempts,
                "retry_after": entry.retry_after.isoformat() if entry.retry_after else None,
            }
            for entry in self._entries.values()
        ]

    def load(self, items: Iterable[dict]) -> None:
        self._entries = {}
        for item in items or []:
            entry = QueueEntry(
                key=item["key"],
                attempts=int(item.get("attempts", 0)),
                retry_after=parse_iso_datetime(item.get("retry_after")),
            )
            self._entries[entry.key] = entry
