"""
Abstract base class for report sources.

A report source resolves a configured location to a readable byte stream
and distinguishes an absent report from one that cannot be read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import IO


class ReportSource(ABC):
    """
    Abstract base class for report locations.

    Implementations must provide exists() and open(). open() returns a
    context manager so the stream is released on every exit path.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the report."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the report is present."""
        pass

    @abstractmethod
    def open(self) -> AbstractContextManager[IO[bytes]]:
        """
        Open the report for reading.

        Returns:
            Context manager yielding a binary stream

        Raises:
            ReportNotFoundError: If the report does not exist
            ReportUnreadableError: If the report exists but cannot be read
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"
