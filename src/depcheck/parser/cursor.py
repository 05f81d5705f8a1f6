"""
Forward-only element cursor over streaming XML events.

Wraps defusedxml's iterparse so decoders can walk a document as a tree
of elements without materializing it: each child is visited exactly once,
in document order, and is detached from its parent as soon as it has
been consumed.
"""

from __future__ import annotations

from typing import IO, Iterator
from xml.etree.ElementTree import Element, ParseError

from defusedxml.ElementTree import iterparse


def local_name(tag: str) -> str:
    """Strip the namespace URI from an element or attribute name."""
    return tag.rsplit("}", 1)[-1]


class ElementCursor:
    """
    Pull-based cursor over a single XML document.

    The cursor only ever moves forward. An element handed out by
    children() must be consumed through text(), skip() or children()
    before the next sibling is requested; anything left unconsumed is
    skipped automatically.
    """

    def __init__(self, stream: IO[bytes]):
        """
        Initialize the cursor.

        Args:
            stream: Binary stream positioned at the start of the document
        """
        self._events = iterparse(
            stream,
            events=("start", "end"),
            forbid_dtd=True,
            forbid_entities=True,
            forbid_external=True,
        )
        self._closed: Element | None = None

    def root(self) -> Element:
        """Advance to the root element's start."""
        for event, elem in self._events:
            if event == "start":
                return elem
        raise ParseError("no element found")

    def children(self, parent: Element) -> Iterator[Element]:
        """
        Iterate over the direct children of an opened element.

        Each child is yielded at its start event, so its attributes are
        available but its content is not yet read.
        """
        for event, elem in self._events:
            if event == "end":
                # Every child was consumed, so this closes the parent
                self._closed = parent
                return
            yield elem
            if self._closed is not elem:
                self._skip_to_end(elem)
            parent.remove(elem)

    def text(self, elem: Element) -> str:
        """Consume an element and return its coalesced, trimmed descendant text."""
        self._skip_to_end(elem)
        return "".join(elem.itertext()).strip()

    def skip(self, elem: Element) -> None:
        """Consume an element without looking at its content."""
        self._skip_to_end(elem)

    def finish(self) -> None:
        """Drain the stream so trailing content is checked for well-formedness."""
        for _event, _elem in self._events:
            pass

    def attributes(self, elem: Element) -> dict[str, str]:
        """Attributes of an element keyed by local name."""
        return {local_name(key): value for key, value in elem.attrib.items()}

    def _skip_to_end(self, elem: Element) -> None:
        for event, current in self._events:
            if event == "end" and current is elem:
                self._closed = elem
                return
