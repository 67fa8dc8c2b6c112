"""Markdown syntax tree nodes with source positions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator


class NodeType(enum.IntEnum):
    """Kinds of Markdown nodes, block types first, then inline types."""

    INVALID = 0

    # Block types
    DOCUMENT = 1
    BLOCK_QUOTE = 2
    NUMBERED_LIST = 3
    BULLET_LIST = 4
    TASK_LIST_ITEM = 5
    LIST_ITEM = 6
    CODE_BLOCK = 7
    HTML_BLOCK = 8
    PARAGRAPH = 9
    HEADING = 10
    THEMATIC_BREAK = 11
    FOOTNOTE_DEFINITION = 12
    TABLE = 13
    TABLE_HEADING = 14
    TABLE_ROW = 15
    TABLE_CELL = 16

    # Inline types
    TEXT = 17
    SOFTBREAK = 18
    LINEBREAK = 19
    CODE = 20
    HTML_INLINE = 21
    EMPH = 22
    STRONG = 23
    LINK = 24
    IMAGE = 25
    STRIKETHROUGH = 26
    FOOTNOTE_REFERENCE = 27


_FIRST_BLOCK = NodeType.DOCUMENT
_LAST_BLOCK = NodeType.TABLE_CELL
_FIRST_INLINE = NodeType.TEXT
_LAST_INLINE = NodeType.FOOTNOTE_REFERENCE

_NAMES = {
    NodeType.INVALID: "Invalid",
    NodeType.DOCUMENT: "Document",
    NodeType.BLOCK_QUOTE: "BlockQuote",
    NodeType.NUMBERED_LIST: "NumberedList",
    NodeType.BULLET_LIST: "BulletList",
    NodeType.TASK_LIST_ITEM: "TaskList",
    NodeType.LIST_ITEM: "ListItem",
    NodeType.CODE_BLOCK: "CodeBlock",
    NodeType.HTML_BLOCK: "HtmlBlock",
    NodeType.PARAGRAPH: "Paragraph",
    NodeType.HEADING: "Heading",
    NodeType.THEMATIC_BREAK: "ThematicBreak",
    NodeType.FOOTNOTE_DEFINITION: "FootnoteDefinition",
    NodeType.TABLE: "Table",
    NodeType.TABLE_HEADING: "TableHeading",
    NodeType.TABLE_ROW: "TableRow",
    NodeType.TABLE_CELL: "TableCell",
    NodeType.TEXT: "Text",
    NodeType.SOFTBREAK: "Softbreak",
    NodeType.LINEBREAK: "Linebreak",
    NodeType.CODE: "Code",
    NodeType.HTML_INLINE: "HtmlInline",
    NodeType.EMPH: "Emph",
    NodeType.STRONG: "Strong",
    NodeType.LINK: "Link",
    NodeType.IMAGE: "Image",
    NodeType.STRIKETHROUGH: "Strikethrough",
    NodeType.FOOTNOTE_REFERENCE: "FootnoteReference",
}


def type_name(node_type: int) -> str:
    """Return the display name of a node type, or its number if unknown."""
    return _NAMES.get(node_type, str(int(node_type)))


@dataclass(eq=False)
class MarkdownNode:
    """A node of a Markdown tree, with its place in the source text.

    ``position`` is the zero-based column of the node, ``start_line`` and
    ``end_line`` are one-based line numbers.
    """

    type: NodeType = NodeType.INVALID
    position: int = 0
    length: int = 0
    start_line: int = 0
    end_line: int = 0
    text: str | None = None
    fence_char: str = ""
    heading_level: int = 0
    list_start_num: int = 0
    parent: MarkdownNode | None = field(default=None, init=False, repr=False)
    previous: MarkdownNode | None = field(default=None, init=False, repr=False)
    next: MarkdownNode | None = field(default=None, init=False, repr=False)
    first_child: MarkdownNode | None = field(default=None, init=False, repr=False)
    last_child: MarkdownNode | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.type == NodeType.HEADING and self.text is not None:
            self.text = " ".join(self.text.split())

    def append_child(self, node: MarkdownNode | None) -> None:
        """Append ``node`` as the last child of this node."""
        if node is None:
            return
        node.parent = self
        node.next = None
        if self.first_child is None:
            self.first_child = node
            self.last_child = node
            node.previous = None
        else:
            assert self.last_child is not None
            self.last_child.next = node
            node.previous = self.last_child
            self.last_child = node

    def children(self) -> Iterator[MarkdownNode]:
        """Yield the children of this node in order."""
        child = self.first_child
        while child is not None:
            yield child
            child = child.next

    def is_invalid(self) -> bool:
        return self.type == NodeType.INVALID

    def is_block_type(self) -> bool:
        return _FIRST_BLOCK <= self.type <= _LAST_BLOCK

    def is_inline_type(self) -> bool:
        return _FIRST_INLINE <= self.type <= _LAST_INLINE

    def is_setext_heading(self) -> bool:
        return (
            self.type == NodeType.HEADING
            and (self.end_line - self.start_line + 1) > 1
        )

    def is_atx_heading(self) -> bool:
        return self.type == NodeType.HEADING and not self.is_setext_heading()

    def is_inside_blockquote(self) -> bool:
        ancestor = self.parent
        while ancestor is not None:
            if ancestor.type == NodeType.BLOCK_QUOTE:
                return True
            ancestor = ancestor.parent
        return False

    def is_fenced_code_block(self) -> bool:
        return self.fence_char not in ("", "\0")

    def is_numbered_list_item(self) -> bool:
        return (
            self.type == NodeType.LIST_ITEM
            and self.parent is not None
            and self.parent.type == NodeType.NUMBERED_LIST
        )

    def is_bullet_list_item(self) -> bool:
        return (
            self.type == NodeType.LIST_ITEM
            and self.parent is not None
            and self.parent.type == NodeType.BULLET_LIST
        )

    def list_item_number(self) -> int:
        """Return the number of this item, counted from the list's start."""
        count = 1
        sibling = self.previous
        while sibling is not None and sibling is not self.parent:
            count += 1
            sibling = sibling.previous
        return self.list_start_num + count

    def __str__(self) -> str:
        label = self.text if self.text is not None else "<<Empty Node>>"
        left = min(20, len(label))
        right = max(len(label) - left, 0)
        text = self.text or ""
        snippet = text[:left] + "..." + (text[-right:] if right else "")
        return (
            f"> [lines {self.start_line} - {self.end_line}]"
            f"[col {self.position}, len {self.length}] "
            f"{type_name(self.type)} -> {snippet}"
        )