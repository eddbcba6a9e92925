"""Abstract query executor definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Sequence


class QueryResult(ABC):
    """Forward-only result of one executed query."""

    @property
    @abstractmethod
    def columns(self) -> List[str]:
        """Return the ordered column names from the query metadata."""

    @abstractmethod
    def records(self) -> Iterator[Sequence[object]]:
        """Yield raw records in cursor order; fetch failures raise ``QueryError``."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying cursor."""


class DataSource(ABC):
    """A connected database able to execute a single SQL string."""

    @abstractmethod
    def execute(self, sql: str) -> QueryResult:
        """Run ``sql`` and return its result; failures raise ``QueryError``."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""
