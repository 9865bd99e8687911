# services/store.py
import os, json, tempfile, logging
from typing import List, Protocol
from models import HistoryRecord

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

class HistoryStore(Protocol):
    def load(self) -> List[HistoryRecord]: ...
    def append(self, record: HistoryRecord) -> None: ...
    def clear(self) -> None: ...


class MemoryHistoryStore:
    """Most recent first, capped at `limit`."""

    def __init__(self, limit: int = DEFAULT_LIMIT):
        self.limit = max(1, limit)
        self._items: List[HistoryRecord] = []

    def load(self) -> List[HistoryRecord]:
        return list(self._items)

    def append(self, record: HistoryRecord) -> None:
        self._items = [record, *self._items][: self.limit]

    def clear(self) -> None:
        self._items = []


class JsonHistoryStore:
    """Same contract as MemoryHistoryStore, persisted as one JSON file."""

    def __init__(self, path: str, limit: int = DEFAULT_LIMIT):
        self.path = path
        self.limit = max(1, limit)

    def load(self) -> List[HistoryRecord]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("history file %s unreadable, starting empty: %s", self.path, e)
            return []
        items = []
        for j in raw if isinstance(raw, list) else []:
            try:
                items.append(HistoryRecord.model_validate(j))
            except ValueError:
                continue
        return items[: self.limit]

    def append(self, record: HistoryRecord) -> None:
        self._write([record, *self.load()][: self.limit])

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)

    def _write(self, items: List[HistoryRecord]) -> None:
        """Atomic write: temp file in the same dir, then os.replace."""
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=folder, prefix=".history.", suffix=".tmp")
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump([r.model_dump() for r in items], f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.path)
