"""Character formats for one line of text, derived from its Markdown node."""

from __future__ import annotations

import re
from dataclasses import replace

from .document import MarkdownState
from .formats import CharFormat, FormatSpan, HighlightOptions, Role, line_matches_node
from .markdownnode import MarkdownNode, NodeType

_REFERENCE_DEFINITION = re.compile(r"^\s*\[(.+?)[^\\]\]:")
_EMPHASIS_MARK = re.compile(r"[*_]")

_ATX_STATES = {
    1: MarkdownState.ATX_HEADING_1,
    2: MarkdownState.ATX_HEADING_2,
    3: MarkdownState.ATX_HEADING_3,
    4: MarkdownState.ATX_HEADING_4,
    5: MarkdownState.ATX_HEADING_5,
    6: MarkdownState.ATX_HEADING_6,
}
_SETEXT_STATES = {
    1: MarkdownState.SETEXT_HEADING_1,
    2: MarkdownState.SETEXT_HEADING_2,
}


def _find_first_char(line_text: str, node_text: str | None) -> int:
    if not node_text:
        return -1
    return line_text.find(node_text[0])


class ColumnTracker:
    """Maps node positions to columns of the current line.

    Inline nodes that follow a line break carry positions that do not
    match their line; the offset found for them is kept for the siblings
    that follow, until the next block node resets it.
    """

    def __init__(self) -> None:
        self.offset = 0

    def column(self, node: MarkdownNode, line_text: str) -> int:
        """Return the column in ``line_text`` where ``node`` starts."""
        prev_type = node.previous.type if node.previous is not None else NodeType.INVALID

        if node.is_block_type():
            self.offset = 0
        elif prev_type in (NodeType.SOFTBREAK, NodeType.LINEBREAK):
            node_text = node.text or ""
            kind = node.type

            if kind == NodeType.TEXT:
                pos = _find_first_char(line_text, node_text)
                if node_text.startswith("`"):
                    column = pos
                    pos += len(node_text) - node.length
                    self.offset = node.position - pos
                    return column
            elif kind == NodeType.CODE:
                pos = line_text.find("`")
                if pos >= 0:
                    for index in range(pos, len(line_text)):
                        if line_text[index] != "`":
                            pos = index
                            break
            elif kind in (NodeType.EMPH, NodeType.STRONG):
                match = _EMPHASIS_MARK.search(line_text)
                pos = match.start() if match else -1
            elif kind == NodeType.LINK:
                pos = line_text.find("[")
            elif kind == NodeType.IMAGE:
                pos = line_text.find("!")
            elif kind == NodeType.HTML_INLINE:
                pos = line_text.find("<")
            elif kind == NodeType.STRIKETHROUGH:
                pos = line_text.find("~")
            else:
                pos = _find_first_char(line_text, node_text)

            self.offset = node.position - pos

        return node.position - self.offset


def highlight_ref_links(
    text: str, pos: int, length: int, base: CharFormat
) -> list[FormatSpan]:
    """Return link-coloured spans for bracketed references within a range."""
    link_format = replace(base, foreground=Role.LINK)
    spans: list[FormatSpan] = []
    brackets: list[int] = []
    skip_next = False

    for index in range(max(pos, 0), min(pos + length, len(text))):
        if skip_next:
            skip_next = False
            continue
        char = text[index]
        if char == "\\":
            skip_next = True
        elif char == "[":
            brackets.append(index)
        elif char == "]" and brackets:
            start = brackets.pop()
            spans.append(FormatSpan(start, index - start + 1, link_format))

    return spans


def apply_formatting_for_node(
    node: MarkdownNode, line: int, text: str, options: HighlightOptions
) -> tuple[list[FormatSpan], int | None, int | None]:
    """Work out the formats and block state of one line.

    ``node`` is the block node found for the one-based ``line`` whose
    text is ``text``. Returns the format spans in the order they apply
    (later spans take precedence), the block state (``None`` when it
    stays unknown) and, for the lower line of a setext heading, the
    heading's start line that must be highlighted again, else ``None``.
    """
    spans: list[FormatSpan] = []
    text_length = len(text)
    block_length = text_length + 1

    def set_format(start: int, count: int, fmt: CharFormat) -> None:
        if start < 0 or start >= text_length:
            return
        count = min(count, text_length - start)
        if count > 0:
            spans.append(FormatSpan(start, count, fmt))

    tracker = ColumnTracker()
    state: int = MarkdownState.PARAGRAPH_BREAK
    rehighlight_line: int | None = None
    italic_quotes = options.italicize_blockquotes

    base = CharFormat(
        foreground=Role.FOREGROUND,
        family=options.font_family,
        point_size=options.font_size,
    )
    indent = text_length - len(text.lstrip())
    in_blockquote = node.is_inside_blockquote()

    if in_blockquote:
        base = replace(base, foreground=Role.BLOCKQUOTE_MARKUP, italic=italic_quotes)
        set_format(0, block_length, base)
        base = replace(base, foreground=Role.BLOCKQUOTE_TEXT)
    else:
        set_format(0, block_length, base)

    stack: list[tuple[MarkdownNode, CharFormat]] = [(node, base)]

    while stack:
        current, context = stack.pop()
        parent_type = current.parent.type if current.parent is not None else NodeType.INVALID
        pos = tracker.column(current, text)
        length = current.length
        kind = current.type

        if line_matches_node(line, current):
            if parent_type in (NodeType.FOOTNOTE_DEFINITION, NodeType.FOOTNOTE_REFERENCE):
                kind = parent_type

            fmt = context

            if kind == NodeType.HEADING:
                length = block_length
                fmt = replace(fmt, bold=True)
                context = replace(context, bold=True)
                if options.use_large_headings:
                    size = fmt.point_size + float(7 - current.heading_level)
                    fmt = replace(fmt, point_size=size)
                    context = replace(context, point_size=size)
                if in_blockquote:
                    fmt = replace(fmt, foreground=Role.BLOCKQUOTE_MARKUP)
                    context = replace(context, foreground=Role.BLOCKQUOTE_TEXT)
                else:
                    fmt = replace(fmt, foreground=Role.HEADING_MARKUP)
                    context = replace(context, foreground=Role.HEADING_TEXT)
                if current.is_setext_heading():
                    state = _SETEXT_STATES.get(current.heading_level, MarkdownState.UNKNOWN)
                    if line != current.start_line:
                        rehighlight_line = current.start_line
                else:
                    state = _ATX_STATES.get(current.heading_level, MarkdownState.UNKNOWN)
            elif kind == NodeType.TEXT:
                pass
            elif kind == NodeType.PARAGRAPH:
                if state == MarkdownState.UNKNOWN:
                    state = MarkdownState.PARAGRAPH
            elif kind == NodeType.BLOCK_QUOTE:
                fmt = replace(fmt, foreground=Role.BLOCKQUOTE_MARKUP, italic=italic_quotes)
                context = replace(
                    context, foreground=Role.BLOCKQUOTE_TEXT, italic=italic_quotes
                )
                in_blockquote = True
            elif kind == NodeType.CODE_BLOCK:
                if current.is_fenced_code_block() and line in (
                    current.start_line,
                    current.end_line,
                ):
                    fmt = replace(fmt, foreground=Role.CODE_MARKUP)
                    state = MarkdownState.CODE_BLOCK
                elif line == current.end_line and current.length <= 0:
                    state = MarkdownState.PARAGRAPH_BREAK
                else:
                    fmt = replace(fmt, foreground=Role.CODE_TEXT)
                    length = block_length - pos + 1
                    state = MarkdownState.CODE_BLOCK
            elif kind == NodeType.LIST_ITEM:
                fmt = replace(fmt, foreground=Role.LIST_MARKUP, bold=True)
                if current.is_numbered_list_item():
                    state = MarkdownState.NUMBERED_LIST
                else:
                    state = MarkdownState.BULLET_POINT_LIST
            elif kind == NodeType.TASK_LIST_ITEM:
                state = MarkdownState.TASK_LIST
                fmt = replace(fmt, foreground=Role.LIST_MARKUP, bold=True)
            elif kind == NodeType.EMPH:
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP)
                if options.use_underline_for_emphasis:
                    context = replace(context, underline=True)
                else:
                    context = replace(context, italic=True)
                    fmt = replace(fmt, italic=True)
                context = replace(context, foreground=Role.EMPHASIS_TEXT)
            elif kind == NodeType.STRONG:
                context = replace(context, foreground=Role.EMPHASIS_TEXT, bold=True)
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP, bold=True)
            elif kind == NodeType.CODE:
                backticks = 0
                for index in range(pos - 1, -1, -1):
                    if index < text_length and text[index] == "`":
                        backticks += 1
                    else:
                        break
                fmt = replace(fmt, foreground=Role.CODE_MARKUP)
                set_format(pos - backticks, length + 2 * backticks, fmt)
                fmt = replace(fmt, foreground=Role.CODE_TEXT)
            elif kind == NodeType.HTML_INLINE:
                fmt = replace(fmt, foreground=Role.INLINE_HTML)
                context = replace(context, foreground=Role.INLINE_HTML)
            elif kind in (NodeType.LINK, NodeType.FOOTNOTE_REFERENCE):
                fmt = replace(fmt, foreground=Role.LINK)
                context = replace(context, foreground=Role.LINK)
            elif kind == NodeType.IMAGE:
                fmt = replace(fmt, foreground=Role.IMAGE)
                context = replace(context, foreground=Role.IMAGE)
            elif kind == NodeType.THEMATIC_BREAK:
                fmt = replace(fmt, foreground=Role.DIVIDER)
                state = MarkdownState.HORIZONTAL_RULE
            elif kind == NodeType.FOOTNOTE_DEFINITION:
                fmt = replace(fmt, foreground=Role.LINK)
                context = replace(context, foreground=Role.LINK)
                state = MarkdownState.PARAGRAPH
            elif kind == NodeType.TABLE_HEADING:
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP)
                pos = 0
                length = block_length
                context = replace(context, bold=True)
                state = MarkdownState.PIPE_TABLE_HEADER
            elif kind == NodeType.TABLE_ROW:
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP)
                pos = 0
                length = block_length
                state = MarkdownState.PIPE_TABLE_ROW
            elif kind == NodeType.TABLE_CELL:
                fmt = context
                if parent_type == NodeType.TABLE_HEADING:
                    fmt = replace(fmt, bold=True)
            elif kind == NodeType.TABLE:
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP)
                pos = 0
                length = block_length
                state = MarkdownState.PIPE_TABLE_DIVIDER
            elif kind == NodeType.STRIKETHROUGH:
                fmt = replace(fmt, foreground=Role.EMPHASIS_MARKUP)
                context = replace(context, strike_out=True)
            elif _REFERENCE_DEFINITION.match(text):
                pos = 0
                length = text.find(":") + 1
                fmt = replace(fmt, foreground=Role.LINK)
            else:
                fmt = replace(fmt, foreground=Role.BLOCKQUOTE_MARKUP)

            if length <= 0 or length > block_length:
                length = block_length

            set_format(pos, length, fmt)

            if kind == NodeType.TEXT:
                for span in highlight_ref_links(text, pos, length, fmt):
                    set_format(span.start, span.length, span.format)
            elif kind == NodeType.TASK_LIST_ITEM:
                checkbox_start = text.find("[")
                checkbox_end = text.find("]")
                set_format(
                    checkbox_start,
                    checkbox_end - checkbox_start + 1,
                    replace(context, foreground=Role.LINK),
                )

        child = current.last_child
        while child is not None and not child.is_invalid():
            stack.append((child, context))
            child = child.previous

    if state == MarkdownState.UNKNOWN:
        return spans, None, rehighlight_line

    state = int(state) | indent
    if in_blockquote:
        state |= MarkdownState.BLOCKQUOTE
    return spans, state, rehighlight_line