"""Character formats and options used by the Markdown highlighter."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .document import MarkdownState
from .markdownnode import MarkdownNode


class Role(enum.Enum):
    """Colour roles of a colour scheme that a format may refer to."""

    FOREGROUND = "foreground"
    TRANSPARENT = "transparent"
    LINK = "link"
    IMAGE = "image"
    INLINE_HTML = "inline_html"
    LIST_MARKUP = "list_markup"
    BLOCKQUOTE_MARKUP = "blockquote_markup"
    BLOCKQUOTE_TEXT = "blockquote_text"
    HEADING_MARKUP = "heading_markup"
    HEADING_TEXT = "heading_text"
    CODE_MARKUP = "code_markup"
    CODE_TEXT = "code_text"
    EMPHASIS_MARKUP = "emphasis_markup"
    EMPHASIS_TEXT = "emphasis_text"
    DIVIDER = "divider"
    ERROR = "error"


@dataclass(frozen=True)
class CharFormat:
    """Formatting of a run of characters; use ``dataclasses.replace`` to vary it."""

    foreground: Role = Role.FOREGROUND
    family: str = "Monospace"
    point_size: float = 12.0
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike_out: bool = False
    spelling_error: bool = False


@dataclass(frozen=True)
class FormatSpan:
    """A format applied to ``length`` characters starting at column ``start``."""

    start: int
    length: int
    format: CharFormat

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass
class HighlightOptions:
    """User settings that affect highlighting."""

    use_large_headings: bool = False
    use_underline_for_emphasis: bool = False
    italicize_blockquotes: bool = False
    spell_check_enabled: bool = False
    font_family: str = "Monospace"
    font_size: float = 12.0


def line_matches_node(line: int, node: MarkdownNode) -> bool:
    """Return whether a node covers the given one-based line."""
    if node.is_block_type():
        return line >= node.start_line and (
            line <= node.end_line or node.end_line == 0
        )
    if node.is_inline_type():
        return line in (node.start_line, node.end_line) or node.end_line == 0
    return False


def is_setext_heading_state(state: int) -> bool:
    """Return whether a block state marks a setext heading line."""
    return (state & MarkdownState.MASK) in (
        MarkdownState.SETEXT_HEADING_1,
        MarkdownState.SETEXT_HEADING_2,
    )