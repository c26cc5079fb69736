"""Summarization store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SummarizationRecord:
    """A stored summarization result.

    Attributes:
        id: Sequential identifier assigned by the store, starting at 1.
        original_text: Text submitted by the client.
        summary: Formatted output returned to the client.
    """

    id: int
    original_text: str
    summary: str


class AbstractSummarizationStore(ABC):
    """Interface for summarization record stores."""

    @abstractmethod
    def create(self, original_text: str, summary: str) -> SummarizationRecord:
        """Persist a new record and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, record_id: int) -> SummarizationRecord | None:
        """Return the record with the given id, or None if unknown."""
        raise NotImplementedError
