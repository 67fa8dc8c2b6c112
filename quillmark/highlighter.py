"""Syntax highlighting of a Markdown document, one block at a time."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Callable, Optional

from .document import MarkdownState, TextDocument
from .formats import (
    CharFormat,
    FormatSpan,
    HighlightOptions,
    Role,
    is_setext_heading_state,
)
from .markdownnode import MarkdownNode
from .nodeformatting import apply_formatting_for_node

_REFERENCE_DEFINITION = re.compile(r"^\s*\[(.+?)[^\\]\]:")
_INLINE_HTML_COMMENT = re.compile(r"^\s*<!--.*-->\s*$")
_WHITESPACE = re.compile(r"(\s+)")

SpellChecker = Callable[[str, int], Optional[tuple]]
"""Returns ``(start, length)`` of the next misspelled word from a column, or None."""


def _is_divider(state: int) -> bool:
    return (state & MarkdownState.MASK) == MarkdownState.PIPE_TABLE_DIVIDER


class MarkdownHighlighter:
    """Works out character formats and block states for a :class:`TextDocument`.

    Blocks that need highlighting again because of a change in another
    block are collected in :attr:`pending`.
    """

    def __init__(self, document: TextDocument) -> None:
        self.document = document
        self.options = HighlightOptions()
        self.typing_paused = True
        self.pending: list[int] = []
        self._checker: SpellChecker | None = None
        self._formats: dict[int, list[FormatSpan]] = {}
        self._nodes: dict[int, MarkdownNode | None] = {}

    def _default_format(self) -> CharFormat:
        return CharFormat(
            family=self.options.font_family, point_size=self.options.font_size
        )

    def highlight_block(
        self, block_number: int, node: MarkdownNode | None = None
    ) -> list[FormatSpan]:
        """Highlight one block using the block node found for its line."""
        document = self.document
        text = document.block_text(block_number)
        line = block_number + 1
        old_state = document.block_state(block_number)
        self._nodes[block_number] = node
        default = self._default_format()
        text_length = len(text)
        spans: list[FormatSpan] = []

        def set_format(start: int, count: int, fmt: CharFormat) -> None:
            if start < 0 or start >= text_length:
                return
            count = min(count, text_length - start)
            if count > 0:
                spans.append(FormatSpan(start, count, fmt))

        def format_at(column: int) -> CharFormat:
            for span in reversed(spans):
                if span.start <= column < span.end:
                    return span.format
            return default

        if node is not None and not node.is_invalid():
            node_spans, state, rehighlight_line = apply_formatting_for_node(
                node, line, text, self.options
            )
            spans.extend(node_spans)
            if state is not None:
                document.set_block_state(block_number, state)
            if rehighlight_line is not None and rehighlight_line != line:
                target = rehighlight_line - 1
                if 0 <= target < document.block_count():
                    self.pending.append(target)
        else:
            set_format(0, text_length + 1, default)
            if not text.strip():
                document.set_block_state(block_number, MarkdownState.PARAGRAPH_BREAK)
            elif _REFERENCE_DEFINITION.match(text):
                set_format(0, text.find(":"), replace(default, foreground=Role.LINK))
                document.set_block_state(block_number, MarkdownState.PARAGRAPH)
            elif _INLINE_HTML_COMMENT.match(text):
                set_format(0, text_length, replace(default, foreground=Role.INLINE_HTML))
                previous = (
                    document.block_state(block_number - 1)
                    if block_number > 0
                    else MarkdownState.UNKNOWN
                )
                if previous != MarkdownState.UNKNOWN:
                    document.set_block_state(block_number, previous)
                else:
                    document.set_block_state(block_number, MarkdownState.PARAGRAPH)

        new_state = document.block_state(block_number)

        if is_setext_heading_state(old_state) and not is_setext_heading_state(new_state):
            first = block_number
            while first > 0 and is_setext_heading_state(document.block_state(first - 1)):
                first -= 1
            if first != block_number:
                self.pending.append(first)
        elif block_number > 0 and _is_divider(old_state) != _is_divider(new_state):
            self.pending.append(block_number - 1)

        for match in _WHITESPACE.finditer(text):
            fmt = replace(format_at(match.start()), foreground=Role.TRANSPARENT)
            set_format(match.start(), match.end() - match.start(), fmt)

        if text.endswith("  "):
            fmt = replace(format_at(text_length - 2), foreground=Role.LIST_MARKUP)
            set_format(text_length - 2, 2, fmt)

        if self.options.spell_check_enabled and self._checker is not None:
            self._spell_check(block_number, text, set_format, format_at)

        self._formats[block_number] = spans
        return spans

    def _spell_check(self, block_number, text, set_format, format_at) -> None:
        document = self.document
        cursor_position = document.cursor.position
        cursor_in_block = -1
        if document.find_block(cursor_position) == block_number:
            cursor_in_block = cursor_position - document.block_position(block_number)

        found = self._checker(text, 0)
        while found is not None:
            start, length = found
            if self.typing_paused or cursor_in_block != start + length:
                fmt = replace(format_at(start), spelling_error=True, underline=True)
                set_format(start, length, fmt)
            found = self._checker(text, start + max(length, 1))

    def formats_for(self, block_number: int) -> list[FormatSpan]:
        """Return the format spans of a block, in the order they apply."""
        self.document.block_text(block_number)
        return list(self._formats.get(block_number, []))

    def rehighlight(self) -> None:
        """Highlight every block again with the nodes last given for it."""
        count = self.document.block_count()
        self._nodes = {n: v for n, v in self._nodes.items() if n < count}
        self._formats = {n: v for n, v in self._formats.items() if n < count}
        for number in range(count):
            self.highlight_block(number, self._nodes.get(number))

    def process_pending(self) -> None:
        """Highlight the blocks queued for highlighting, each at most once."""
        done: set[int] = set()
        while self.pending:
            number = self.pending.pop(0)
            if number in done or number >= self.document.block_count():
                continue
            done.add(number)
            self.highlight_block(number, self._nodes.get(number))

    def set_spell_checker(self, checker: SpellChecker | None) -> None:
        """Set the function used to find misspelled words."""
        self._checker = checker
        if self.options.spell_check_enabled:
            self.rehighlight()

    def increase_font_size(self) -> None:
        self.options.font_size += 1.0
        self.rehighlight()

    def decrease_font_size(self) -> None:
        self.options.font_size -= 1.0
        self.rehighlight()

    def set_font(self, family: str, size: float) -> None:
        self.options.font_family = family
        self.options.font_size = float(size)
        self.rehighlight()