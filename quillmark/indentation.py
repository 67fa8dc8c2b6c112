"""Indentation, block quote removal and task toggling for Markdown text."""

from __future__ import annotations

import re

from .document import MarkdownState, TextDocument

_NUMBERED_LIST_EMPTY = re.compile(r"^\s*([0-9]+)[.)]\s+$")
_BULLET_LIST_EMPTY = re.compile(r"^\s*[+*-]\s+$")
_TASK_LIST_EMPTY = re.compile(r"^\s*[-*+] \[([x ])\]\s+$")
_TASK_LIST = re.compile(r"^\s*[-*+] \[([x ])\]\s+")
_NUMBER = re.compile(r"\d+")

# Bullet marks used when a list item is indented or unindented.
_NEXT_BULLET = {"*": "-", "-": "+"}
_PREVIOUS_BULLET = {"*": "+", "-": "*"}


def _kind(document: TextDocument, number: int) -> int:
    return document.block_state(number) & MarkdownState.MASK


def _replace_block(document: TextDocument, number: int, text: str) -> None:
    start = document.block_position(number)
    end = start + len(document.block_text(number))
    document.delete(start, end)
    document.insert(start, text)


def _indent_string(width: int, insert_spaces: bool) -> str:
    return " " * width if insert_spaces else "\t"


def remove_blockquote(document: TextDocument) -> None:
    """Remove a leading '>' and one following space from the selected blocks."""
    for number in document.blocks_in_selection():
        start = document.block_position(number)
        if document.char_at(start) != ">":
            continue
        document.delete(start, start + 1)
        following = document.char_at(start)
        if following and following != "\n" and following.isspace():
            document.delete(start, start + 1)


def indent_text(
    document: TextDocument,
    tab_width: int = 4,
    insert_spaces: bool = False,
    cycle_bullets: bool = True,
) -> None:
    """Indent the selected blocks, or the text at the cursor.

    An empty list item is indented as a whole: numbered items restart at
    one and bullet marks cycle through '*', '-' and '+'.
    """
    cursor = document.cursor

    if cursor.has_selection():
        for number in document.blocks_in_selection():
            document.insert(
                document.block_position(number),
                _indent_string(tab_width, insert_spaces),
            )
        return

    number = document.current_block()
    text = document.block_text(number)
    block_start = document.block_position(number)
    kind = _kind(document, number)
    indent = tab_width
    insert_at = cursor.position

    if kind == MarkdownState.NUMBERED_LIST:
        if _NUMBERED_LIST_EMPTY.match(text):
            _replace_block(document, number, _NUMBER.sub("1", text))
            insert_at = block_start
    elif kind == MarkdownState.TASK_LIST:
        if _TASK_LIST_EMPTY.match(text):
            insert_at = block_start
    elif kind == MarkdownState.BULLET_POINT_LIST:
        if _BULLET_LIST_EMPTY.match(text):
            if cycle_bullets:
                old = text.strip()[0]
                new = _NEXT_BULLET.get(old, "*")
                _replace_block(document, number, text.replace(old, new))
            insert_at = block_start
    else:
        indent = tab_width - (document.position_in_block() % tab_width)

    document.insert(insert_at, _indent_string(indent, insert_spaces))


def unindent_text(
    document: TextDocument, tab_width: int = 4, cycle_bullets: bool = True
) -> None:
    """Remove one level of indentation from the selected blocks.

    A tab or up to ``tab_width`` spaces are removed from each block. If the
    last block is an empty bullet item, its mark cycles backwards.
    """
    last = None
    for number in document.blocks_in_selection():
        last = number
        start = document.block_position(number)
        if document.char_at(start) == "\t":
            document.delete(start, start + 1)
            continue
        removed = 0
        while document.char_at(start) == " " and removed < tab_width:
            document.delete(start, start + 1)
            removed += 1

    if last is None or not cycle_bullets:
        return

    text = document.block_text(last)
    if _kind(document, last) == MarkdownState.BULLET_POINT_LIST and _BULLET_LIST_EMPTY.match(
        text
    ):
        old = text.strip()[0]
        new = _PREVIOUS_BULLET.get(old, "-")
        _replace_block(document, last, text.replace(old, new))


def toggle_task_complete(document: TextDocument) -> bool:
    """Check or uncheck the task items among the selected blocks."""
    for number in document.blocks_in_selection():
        if _kind(document, number) != MarkdownState.TASK_LIST:
            continue
        text = document.block_text(number)
        match = _TASK_LIST.match(text)
        if match is None:
            continue
        index = text.find(" [")
        if index >= 0:
            index += 2
        else:
            index = 0
        replacement = " " if match.group(1) == "x" else "x"
        position = document.block_position(number) + index
        document.delete(position, position + 1)
        document.insert(position, replacement)
    return True