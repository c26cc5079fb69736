"""Process-lifetime summarization store.

Records live only as long as the process; nothing is written to disk.
"""

from __future__ import annotations

import logging
import threading

from app.adapters.storage.base import AbstractSummarizationStore, SummarizationRecord

logger = logging.getLogger(__name__)


class InMemorySummarizationStore(AbstractSummarizationStore):
    """Thread-safe in-memory store assigning incrementing ids.

    Ids start at 1 and are never reused.
    """

    def __init__(self) -> None:
        self._records: dict[int, SummarizationRecord] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def create(self, original_text: str, summary: str) -> SummarizationRecord:
        with self._lock:
            record = SummarizationRecord(
                id=self._next_id,
                original_text=original_text,
                summary=summary,
            )
            self._records[record.id] = record
            self._next_id += 1

        logger.info(
            "storage.record_created",
            extra={
                "record_id": record.id,
                "original_chars": len(original_text),
                "summary_chars": len(summary),
            },
        )
        return record

    def get(self, record_id: int) -> SummarizationRecord | None:
        with self._lock:
            return self._records.get(record_id)
