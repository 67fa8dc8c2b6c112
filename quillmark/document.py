"""A plain-text document split into blocks (lines), with a text cursor."""

from __future__ import annotations

import bisect
import enum
import re
from dataclasses import dataclass


class MarkdownState(enum.IntEnum):
    """Per-block Markdown state.

    A block state is an integer: the kind lives in the bits covered by
    ``MASK`` (``CODE_BLOCK`` and ``BLOCKQUOTE`` are flags that may be
    combined with a kind), and the indentation of the line occupies the
    low sixteen bits.
    """

    UNKNOWN = -1
    PARAGRAPH_BREAK = 0
    PARAGRAPH = 1 << 16
    SETEXT_HEADING_1 = 2 << 16
    SETEXT_HEADING_2 = 3 << 16
    ATX_HEADING_1 = 4 << 16
    ATX_HEADING_2 = 5 << 16
    ATX_HEADING_3 = 6 << 16
    ATX_HEADING_4 = 7 << 16
    ATX_HEADING_5 = 8 << 16
    ATX_HEADING_6 = 9 << 16
    NUMBERED_LIST = 10 << 16
    BULLET_POINT_LIST = 11 << 16
    TASK_LIST = 12 << 16
    HORIZONTAL_RULE = 13 << 16
    PIPE_TABLE_HEADER = 14 << 16
    PIPE_TABLE_ROW = 15 << 16
    PIPE_TABLE_DIVIDER = 16 << 16
    CODE_BLOCK = 1 << 24
    BLOCKQUOTE = 1 << 25
    MASK = 0x03FF0000


_INDENT_MASK = 0xFFFF
_FENCE_OPEN = 1 << 26

_ATX_KINDS = (
    MarkdownState.ATX_HEADING_1,
    MarkdownState.ATX_HEADING_2,
    MarkdownState.ATX_HEADING_3,
    MarkdownState.ATX_HEADING_4,
    MarkdownState.ATX_HEADING_5,
    MarkdownState.ATX_HEADING_6,
)
_LIST_KINDS = (
    MarkdownState.NUMBERED_LIST,
    MarkdownState.BULLET_POINT_LIST,
    MarkdownState.TASK_LIST,
)

_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_QUOTE = re.compile(r"^ {0,3}(>\s*)+")
_ATX = re.compile(r"^ {0,3}(#{1,6})(?:\s|$)")
_SETEXT_1 = re.compile(r"^ {0,3}=+\s*$")
_SETEXT_2 = re.compile(r"^ {0,3}-+\s*$")
_THEMATIC = re.compile(r"^ {0,3}([-*_])(?:\s*\1){2,}\s*$")
_TASK = re.compile(r"^\s*[-*+] \[([x ])\]\s+")
_BULLET = re.compile(r"^\s*[+*-]\s+")
_NUMBERED = re.compile(r"^\s*[0-9]+[.)]\s+")
_DIVIDER = re.compile(r"^\s*\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)+\|?\s*$")


def _line_kind(text: str, prev_kind: int) -> int:
    if not text.strip():
        return MarkdownState.PARAGRAPH_BREAK
    match = _ATX.match(text)
    if match:
        return _ATX_KINDS[len(match.group(1)) - 1]
    if prev_kind == MarkdownState.PARAGRAPH:
        if _SETEXT_1.match(text):
            return MarkdownState.SETEXT_HEADING_1
        if _SETEXT_2.match(text):
            return MarkdownState.SETEXT_HEADING_2
    if _THEMATIC.match(text):
        return MarkdownState.HORIZONTAL_RULE
    if _TASK.match(text):
        return MarkdownState.TASK_LIST
    if _BULLET.match(text):
        return MarkdownState.BULLET_POINT_LIST
    if _NUMBERED.match(text):
        return MarkdownState.NUMBERED_LIST
    if "|" in text:
        if _DIVIDER.match(text):
            return MarkdownState.PIPE_TABLE_DIVIDER
        if prev_kind in (MarkdownState.PIPE_TABLE_DIVIDER, MarkdownState.PIPE_TABLE_ROW):
            return MarkdownState.PIPE_TABLE_ROW
    if text[0].isspace() and prev_kind in _LIST_KINDS:
        return prev_kind
    return MarkdownState.PARAGRAPH


def classify_block(text: str, previous_state: int = MarkdownState.UNKNOWN) -> int:
    """Return the Markdown state of a line, given the state of the line before.

    Only fenced code blocks are recognised as code.
    """
    indent = min(len(text) - len(text.lstrip()), _INDENT_MASK)
    known = previous_state != MarkdownState.UNKNOWN

    if known and previous_state & _FENCE_OPEN:
        if _FENCE.match(text):
            return int(MarkdownState.CODE_BLOCK) | indent
        return int(MarkdownState.CODE_BLOCK) | _FENCE_OPEN | indent
    if _FENCE.match(text):
        return int(MarkdownState.CODE_BLOCK) | _FENCE_OPEN | indent

    prev_kind = (
        previous_state & MarkdownState.MASK & ~MarkdownState.BLOCKQUOTE
        if known
        else MarkdownState.UNKNOWN
    )

    quote = _QUOTE.match(text)
    if quote:
        inner = _line_kind(text[quote.end():], prev_kind)
        kind = inner if inner in _LIST_KINDS else MarkdownState.PARAGRAPH_BREAK
        return int(kind) | int(MarkdownState.BLOCKQUOTE) | indent

    return int(_line_kind(text, prev_kind)) | indent


@dataclass
class TextCursor:
    """A cursor position with an anchor; the two differ when text is selected."""

    position: int = 0
    anchor: int | None = None

    def __post_init__(self) -> None:
        if self.anchor is None:
            self.anchor = self.position

    def has_selection(self) -> bool:
        return self.anchor != self.position

    def selection_start(self) -> int:
        return min(self.position, self.anchor)

    def selection_end(self) -> int:
        return max(self.position, self.anchor)


class TextDocument:
    """Text split into blocks at newlines, with per-block Markdown states.

    Block states are recomputed from the text after every edit; a state
    set with :meth:`set_block_state` lasts until the next edit.
    """

    def __init__(self, text: str = "") -> None:
        self.cursor = TextCursor()
        self._text = text
        self._refresh()

    @property
    def text(self) -> str:
        return self._text

    def _refresh(self) -> None:
        self._blocks = self._text.split("\n")
        self._positions = []
        start = 0
        for block in self._blocks:
            self._positions.append(start)
            start += len(block) + 1
        self._states = []
        state: int = MarkdownState.UNKNOWN
        for block in self._blocks:
            state = classify_block(block, state)
            self._states.append(state)

    def _check_block(self, number: int) -> None:
        if not 0 <= number < len(self._blocks):
            raise IndexError(f"block {number} out of range")

    def _check_position(self, position: int) -> None:
        if not 0 <= position <= len(self._text):
            raise IndexError(f"position {position} out of range")

    def block_count(self) -> int:
        return len(self._blocks)

    def block_text(self, number: int) -> str:
        self._check_block(number)
        return self._blocks[number]

    def block_position(self, number: int) -> int:
        self._check_block(number)
        return self._positions[number]

    def find_block(self, position: int) -> int:
        """Return the number of the block holding ``position``."""
        self._check_position(position)
        return bisect.bisect_right(self._positions, position) - 1

    def block_state(self, number: int) -> int:
        self._check_block(number)
        return self._states[number]

    def set_block_state(self, number: int, state: int) -> None:
        self._check_block(number)
        self._states[number] = int(state)

    def current_block(self) -> int:
        return self.find_block(self.cursor.position)

    def blocks_in_selection(self) -> range:
        """Return the block numbers touched by the selection, or the cursor's block."""
        if self.cursor.has_selection():
            first = self.find_block(self.cursor.selection_start())
            last = self.find_block(self.cursor.selection_end())
            return range(first, last + 1)
        current = self.current_block()
        return range(current, current + 1)

    def position_in_block(self) -> int:
        return self.cursor.position - self._positions[self.current_block()]

    def char_at(self, position: int) -> str:
        """Return the character at ``position``, or an empty string outside the text."""
        if 0 <= position < len(self._text):
            return self._text[position]
        return ""

    def selected_text(self) -> str:
        return self._text[self.cursor.selection_start():self.cursor.selection_end()]

    def insert(self, position: int, text: str) -> None:
        """Insert ``text`` at ``position``; cursor ends at or after it move along."""
        self._check_position(position)
        self._text = self._text[:position] + text + self._text[position:]
        shift = len(text)
        if self.cursor.position >= position:
            self.cursor.position += shift
        if self.cursor.anchor >= position:
            self.cursor.anchor += shift
        self._refresh()

    def delete(self, start: int, end: int) -> None:
        """Remove the text between ``start`` and ``end``."""
        if start > end:
            raise ValueError("start must not be after end")
        self._check_position(start)
        self._check_position(end)
        self._text = self._text[:start] + self._text[end:]
        removed = end - start

        def adjust(value: int) -> int:
            if value > end:
                return value - removed
            if value > start:
                return start
            return value

        self.cursor.position = adjust(self.cursor.position)
        self.cursor.anchor = adjust(self.cursor.anchor)
        self._refresh()

    def insert_text(self, text: str) -> None:
        """Replace the selection, if any, with ``text`` at the cursor."""
        if self.cursor.has_selection():
            self.delete(self.cursor.selection_start(), self.cursor.selection_end())
        position = self.cursor.position
        self.insert(position, text)
        self.cursor.position = position + len(text)
        self.cursor.anchor = self.cursor.position