"""Document outline: the list of headings and the one holding the cursor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from .document import TextDocument
from .markdownnode import MarkdownNode

_HEADING = re.compile(r"^\s*#*(.*?)\s*#*?\s*$")


@dataclass(frozen=True)
class OutlineEntry:
    """One heading: its display text, document position and level."""

    text: str
    position: int
    level: int


class Outline:
    """Headings of a document in order, with the current one tracked."""

    def __init__(self) -> None:
        self.entries: list[OutlineEntry] = []
        self.current_row: int | None = None
        self.listeners: list[Callable[[int], None]] = []

    def __len__(self) -> int:
        return len(self.entries)

    def reload(self, document: TextDocument, headings: Iterable[MarkdownNode]) -> None:
        """Rebuild the outline from heading nodes of ``document``."""
        self.entries = []
        self.current_row = None

        for heading in headings:
            label = "   " + "    " * max(heading.heading_level - 1, 0)
            number = heading.start_line - 1
            if not 0 <= number < document.block_count():
                continue
            match = _HEADING.match(document.block_text(number))
            if match is not None:
                label += match.group(1)
            self.entries.append(
                OutlineEntry(label, document.block_position(number), heading.heading_level)
            )

        self.current_heading(document.cursor.position)

    def find_heading(self, position: int, exact_match: bool = True) -> int:
        """Binary search for the heading at ``position``.

        Returns its row, or -1 if absent; with ``exact_match`` false the
        row where such a heading would be inserted is returned instead.
        """
        low = 0
        high = len(self.entries) - 1
        mid = 0

        while low <= high:
            mid = low + (high - low) // 2
            item_position = self.entries[mid].position
            if item_position == position:
                return mid
            if item_position < position:
                mid += 1
                low = mid
            else:
                high = mid - 1

        return -1 if exact_match else mid

    def current_heading(self, position: int) -> int | None:
        """Select and return the row of the section holding ``position``.

        ``None`` means the position lies before the first heading.
        """
        count = len(self.entries)
        if count == 0 or position < 0:
            return self.current_row

        row = self.find_heading(position, exact_match=False)
        if row == count or (0 <= row < count and self.entries[row].position != position):
            row -= 1

        self.current_row = row if row >= 0 else None
        return self.current_row

    def select(self, row: int) -> int:
        """Select a heading as the user would; return its document position."""
        if not 0 <= row < len(self.entries):
            raise IndexError(f"no heading at row {row}")
        self.current_row = row
        for listener in list(self.listeners):
            listener(row + 1)
        return self.entries[row].position