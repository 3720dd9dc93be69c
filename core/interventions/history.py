"""
Intervention History

Append-only, insertion-ordered log of created interventions and sent
restore commands. Observability only; nothing reads it back to decide.
"""

from collections import deque
from typing import Iterator, Optional, Union

from core.models import ActiveIntervention, HistoryRecord, RestoreCommand


class InterventionHistory:
    """
    Bounded append-only log.

    When a limit is set, the oldest records are evicted first. A limit of 0
    (or None) keeps everything for the life of the process.

    Not thread-safe on its own: the lifecycle manager appends and reads under
    its lock.
    """

    def __init__(self, limit: Optional[int] = 1000):
        self._limit = limit or None
        self._records: deque[HistoryRecord] = deque(maxlen=self._limit)
        self._total = 0

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    @property
    def total_appended(self) -> int:
        """Records appended since start, including evicted ones."""
        return self._total

    def append(
        self,
        entry: Union[ActiveIntervention, RestoreCommand],
        timestamp: int,
    ) -> HistoryRecord:
        record = HistoryRecord(entry=entry, timestamp=timestamp)
        self._records.append(record)
        self._total += 1
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(list(self._records))

    def to_list(self) -> list[dict]:
        return [record.to_dict() for record in self._records]
