"""In-memory allocation store keyed by (project, member, month)."""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable

from app.core.months import Month
from app.models.entities import Allocation

logger = logging.getLogger(__name__)

AllocationKey = tuple[str, str, Month]
AllocationPredicate = Callable[[Allocation], bool]


class InvalidAllocationError(ValueError):
    """Raised when a caller passes a value outside the allocation domain."""


class StoreWrite(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    UNCHANGED = "unchanged"


class AllocationStore:
    """Canonical allocation record set.

    At most one record exists per (project, member, month). A percentage of
    zero means "no allocation": upserting zero deletes the existing record and
    never creates one. Records keep their id across updates.

    All methods take the store lock; pass the workspace lock in so that
    callers composing several store calls can hold it across them.
    """

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._by_key: dict[AllocationKey, Allocation] = {}
        self._key_by_id: dict[str, AllocationKey] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_key)

    # ---------- Lookups ----------
    def get(self, project_id: str, member_id: str, month: Month) -> Allocation | None:
        with self._lock:
            return self._by_key.get((project_id, member_id, month))

    def get_by_id(self, allocation_id: str) -> Allocation | None:
        with self._lock:
            key = self._key_by_id.get(allocation_id)
            return self._by_key.get(key) if key is not None else None

    def percentage(self, project_id: str, member_id: str, month: Month) -> int:
        row = self.get(project_id, member_id, month)
        return row.percentage if row is not None else 0

    def all_for(self, predicate: AllocationPredicate | None = None) -> list[Allocation]:
        with self._lock:
            rows = list(self._by_key.values())
        if predicate is None:
            return rows
        return [row for row in rows if predicate(row)]

    def list_months(self) -> list[Month]:
        with self._lock:
            return sorted({key[2] for key in self._by_key})

    # ---------- Writes ----------
    def upsert(self, project_id: str, member_id: str, month: Month, percentage: int) -> StoreWrite:
        if percentage < 0:
            raise InvalidAllocationError("percentage must be greater or equal zero.")

        key = (project_id, member_id, month)
        with self._lock:
            existing = self._by_key.get(key)
            if percentage == 0:
                if existing is None:
                    return StoreWrite.UNCHANGED
                self._remove(key)
                logger.debug("Deleted allocation %s for %s/%s/%s", existing.id, project_id, member_id, month)
                return StoreWrite.DELETED

            if existing is None:
                row = Allocation(project_id=project_id, member_id=member_id, month=month, percentage=percentage)
                self._by_key[key] = row
                self._key_by_id[row.id] = key
                logger.debug("Created allocation %s at %s%% for %s/%s/%s", row.id, percentage, *key)
                return StoreWrite.CREATED

            if existing.percentage == percentage:
                return StoreWrite.UNCHANGED
            existing.percentage = percentage
            logger.debug("Updated allocation %s to %s%%", existing.id, percentage)
            return StoreWrite.UPDATED

    def delete(self, allocation_id: str) -> bool:
        with self._lock:
            key = self._key_by_id.get(allocation_id)
            if key is None:
                return False
            self._remove(key)
            logger.debug("Deleted allocation %s", allocation_id)
            return True

    def delete_where(self, predicate: AllocationPredicate) -> int:
        """Remove every matching record in one step; returns the number removed."""

        with self._lock:
            doomed = [key for key, row in self._by_key.items() if predicate(row)]
            for key in doomed:
                self._remove(key)
            return len(doomed)

    def _remove(self, key: AllocationKey) -> None:
        row = self._by_key.pop(key)
        self._key_by_id.pop(row.id, None)
