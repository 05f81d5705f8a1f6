"""
Local file report source.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from depcheck.errors import ReportNotFoundError, ReportUnreadableError
from depcheck.loader.base import ReportSource

logger = logging.getLogger(__name__)


class LocalReportSource(ReportSource):
    """Report stored on the local filesystem."""

    def __init__(self, path: str | Path):
        """
        Initialize the source.

        Args:
            path: Report path, "~" is expanded
        """
        self.path = Path(path).expanduser()

    @property
    def location(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    @contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        if not self.path.exists():
            raise ReportNotFoundError(self.location)
        if not self.path.is_file():
            raise ReportUnreadableError(self.location, f"Report is not a file: {self.location}")

        try:
            stream = self.path.open("rb")
        except OSError as e:
            raise ReportUnreadableError(
                self.location, f"Cannot read report {self.location}: {e}"
            ) from e

        logger.debug(f"Opened report {self.location}")
        try:
            yield stream
        finally:
            stream.close()
