"""Abstract comment source interface.

The export pipeline depends on BaseRowSource, not on the CSV file, so a
different backing table can be dropped in without touching the renderers.
Sources move raw column → value dicts only; escaping of free-text fields is
the caller's concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator


class SourceError(Exception):
    """The comment table is missing, unreadable or malformed."""


class BaseRowSource(ABC):
    """Pluggable access to the table of review comments."""

    @abstractmethod
    def iter_raw_rows(self) -> AsyncIterator[dict]:
        """Yield each stored row as a column → value dict, in table order.

        Values are returned exactly as stored. Raises SourceError when the
        table is missing, unreadable or lacks a required column.
        """

    @abstractmethod
    async def append(self, values: dict) -> None:
        """Persist one row at the end of the table."""

    @abstractmethod
    def exists(self) -> bool:
        """Return True if the backing table is present."""
