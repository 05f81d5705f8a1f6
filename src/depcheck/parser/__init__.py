"""
Dependency-Check report parsing.

Provides a streaming, forward-only decoder that turns a Dependency-Check
XML report into an Analysis without building the whole document tree.
"""

from __future__ import annotations

from depcheck.parser.cursor import ElementCursor, local_name
from depcheck.parser.xml_report import XMLReportParser, parse_report

__all__ = [
    "ElementCursor",
    "local_name",
    "XMLReportParser",
    "parse_report",
]
