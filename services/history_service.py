import json
import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from db.schemas import HistoryEntry, MedicineRecord
from services.errors import StorageFailureError

logger = logging.getLogger(__name__)

HISTORY_KEY = "medetech_scan_history"
DEFAULT_CAPACITY = 50

StorageFailureHook = Callable[[str, Exception], None]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class HistoryStore:
    """
    Newest-first log of accepted identifications, capped at `capacity` entries.

    The log is one JSON array under HISTORY_KEY in the general key-value store.
    Storage errors never reach the caller: they are logged and handed to
    `on_storage_failure`, and `list()` degrades to an empty log.

    There is no locking. Two overlapping appends can both read the same
    snapshot and the later write wins, dropping the other entry.
    """

    def __init__(self, store, capacity: int = DEFAULT_CAPACITY,
                 on_storage_failure: Optional[StorageFailureHook] = None):
        self.store = store
        self.capacity = capacity
        self.on_storage_failure = on_storage_failure

    async def append(self, record: MedicineRecord) -> HistoryEntry:
        history = await self.list()

        timestamp = _now_ms()
        entry_id = timestamp
        taken = {entry.id for entry in history}
        while str(entry_id) in taken:
            entry_id += 1

        entry = HistoryEntry.from_record(record, entry_id=str(entry_id), timestamp=timestamp)
        updated = [entry, *history][: self.capacity]

        await self._write("append", updated)
        return entry

    async def list(self) -> List[HistoryEntry]:
        try:
            raw = await self.store.get(HISTORY_KEY)
            if raw is None:
                return []
            items = json.loads(raw)
        except (StorageFailureError, ValueError) as e:
            self._report("list", e)
            return []

        if not isinstance(items, list):
            self._report("list", TypeError(f"Stored history is a {type(items).__name__}, not a list"))
            return []

        entries = []
        for item in items:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                # skip only the unreadable entry
                self._report("list", e)
        return entries

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in await self.list():
            if entry.id == entry_id:
                return entry
        return None

    async def clear(self) -> None:
        try:
            await self.store.remove(HISTORY_KEY)
        except StorageFailureError as e:
            self._report("clear", e)

    async def delete_by_id(self, entry_id: str) -> None:
        history = await self.list()
        remaining = [entry for entry in history if entry.id != entry_id]
        if len(remaining) == len(history):
            return
        await self._write("delete", remaining)

    async def _write(self, operation: str, entries: List[HistoryEntry]) -> None:
        payload = json.dumps([entry.model_dump(by_alias=True) for entry in entries])
        try:
            await self.store.set(HISTORY_KEY, payload)
        except StorageFailureError as e:
            self._report(operation, e)

    def _report(self, operation: str, error: Exception) -> None:
        logger.error("History %s failed: %s", operation, error, exc_info=error)
        if self.on_storage_failure is not None:
            try:
                self.on_storage_failure(operation, error)
            except Exception:
                logger.exception("History storage failure hook raised")
