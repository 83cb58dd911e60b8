"""Storage backends for per-user usage records."""

from __future__ import annotations

import threading
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Protocol

from coldguard.models import UsageRecord


class UsageLedger(Protocol):
    """Ledger interface.

    ``get`` returns a snapshot; changes only take effect through ``save``.
    Read-modify-write sequences must run inside ``lock(user_id)``.
    """

    def get(self, user_id: str) -> UsageRecord:
        ...

    def save(self, record: UsageRecord) -> UsageRecord:
        ...

    def remove(self, user_id: str) -> bool:
        ...

    def list_user_ids(self) -> List[str]:
        ...

    def lock(self, user_id: str):
        ...


class InMemoryUsageLedger:
    """Process-local ledger (default).

    Records live for the lifetime of the process and are never evicted.
    """

    def __init__(self):
        self._records: Dict[str, UsageRecord] = {}
        self._locks: Dict[str, threading.RLock] = defaultdict(threading.RLock)
        self._registry_lock = threading.Lock()

    def get(self, user_id: str) -> UsageRecord:
        record = self._records.get(user_id)
        if record is None:
            return UsageRecord(user_id=user_id)
        return replace(record)

    def peek(self, user_id: str) -> Optional[UsageRecord]:
        """Snapshot of a stored record, without creating a default one."""
        record = self._records.get(user_id)
        return replace(record) if record else None

    def save(self, record: UsageRecord) -> UsageRecord:
        self._records[record.user_id] = replace(record)
        return record

    def remove(self, user_id: str) -> bool:
        with self.lock(user_id):
            removed = self._records.pop(user_id, None) is not None
            with self._registry_lock:
                self._locks.pop(user_id, None)
        return removed

    def list_user_ids(self) -> List[str]:
        return list(self._records)

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        """Hold the per-user lock. Re-entrant within one thread."""
        with self._registry_lock:
            user_lock = self._locks[user_id]
        with user_lock:
            yield

    def __len__(self) -> int:
        return len(self._records)
