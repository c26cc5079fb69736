"""Result storage adapters.

Summarization records are written through an abstract store so a durable
backend can replace the in-memory one without touching the HTTP layer.
"""

from app.adapters.storage.base import AbstractSummarizationStore, SummarizationRecord
from app.adapters.storage.in_memory import InMemorySummarizationStore

__all__ = [
    "AbstractSummarizationStore",
    "InMemorySummarizationStore",
    "SummarizationRecord",
]
