"""Editing commands for Markdown lists, block quotes and inline markup."""

from __future__ import annotations

import re

from .autopair import AutoPairer
from .document import MarkdownState, TextDocument

_BLOCKQUOTE = re.compile(r"^ {0,3}(>\s*)+")
_NUMBERED_LIST = re.compile(r"^\s*([0-9]+)[.)]\s+")
_BULLET_LIST = re.compile(r"^\s*[+*-]\s+")
_TASK_LIST = re.compile(r"^\s*[-*+] \[([x ])\]\s+")
_EMPTY_BLOCKQUOTE = re.compile(r"^ {0,3}(>\s*)+$")
_EMPTY_NUMBERED_LIST = re.compile(r"^\s*([0-9]+)[.)]\s+$")
_EMPTY_BULLET_LIST = re.compile(r"^\s*[+*-]\s+$")
_EMPTY_TASK_LIST = re.compile(r"^\s*[-*+] \[([x ])\]\s+$")
_NUMBER = re.compile(r"\d+")
_DIGIT = re.compile(r"\d")
_BULLET_MARK = re.compile(r"[+*-]")


def _block_kind(document: TextDocument, number: int) -> int:
    return document.block_state(number) & MarkdownState.MASK


def _current_text(document: TextDocument) -> str:
    return document.block_text(document.current_block())


def prior_indentation(document: TextDocument) -> str:
    """Return the leading whitespace of the block holding the cursor."""
    text = _current_text(document)
    return text[: len(text) - len(text.lstrip())]


def _item_start(
    document: TextDocument, pattern: re.Pattern[str]
) -> tuple[str, re.Match[str] | None]:
    match = pattern.match(_current_text(document))
    if match is None:
        return "", None
    return match.group(0), match


def handle_carriage_return(document: TextDocument) -> None:
    """Insert a new line, continuing the list or quote the cursor is in.

    An empty list item ends the list instead: its markup is replaced by
    the line's indentation.
    """
    number = document.current_block()
    text = document.block_text(number)
    pos = document.position_in_block()
    end_list = False

    if pos < len(text):
        auto_insert = prior_indentation(document)[:pos]
    else:
        kind = _block_kind(document, number)
        if kind == MarkdownState.NUMBERED_LIST:
            auto_insert, match = _item_start(document, _NUMBERED_LIST)
            if auto_insert and match is not None:
                if len(text) == len(auto_insert):
                    end_list = True
                else:
                    following = str(int(match.group(1)) + 1)
                    auto_insert = _NUMBER.sub(lambda _: following, auto_insert)
            else:
                auto_insert = prior_indentation(document)
        elif kind == MarkdownState.TASK_LIST:
            auto_insert, _ = _item_start(document, _TASK_LIST)
            if len(text) == len(auto_insert):
                end_list = True
            else:
                # A new task never starts out checked off.
                auto_insert = auto_insert.replace("x", " ")
        elif kind == MarkdownState.BULLET_POINT_LIST:
            auto_insert, _ = _item_start(document, _BULLET_LIST)
            if not auto_insert:
                auto_insert = prior_indentation(document)
            elif len(text) == len(auto_insert):
                end_list = True
        elif kind == MarkdownState.BLOCKQUOTE:
            auto_insert, _ = _item_start(document, _BLOCKQUOTE)
        else:
            auto_insert = prior_indentation(document)

    if end_list:
        indentation = prior_indentation(document)
        start = document.block_position(number)
        document.cursor.anchor = start
        document.cursor.position = start + len(text)
        document.insert_text(indentation)
        auto_insert = ""

    document.insert_text("\n" + auto_insert)


def handle_backspace(document: TextDocument, pairer: AutoPairer | None) -> bool:
    """Handle backspace specially for empty list items, quotes and pairs.

    Returns whether the key press was consumed.
    """
    if document.cursor.has_selection():
        return False

    number = document.current_block()
    text = document.block_text(number)
    kind = _block_kind(document, number)
    backtrack = -1

    if kind == MarkdownState.NUMBERED_LIST:
        if _EMPTY_NUMBERED_LIST.match(text):
            digit = _DIGIT.search(text)
            backtrack = digit.start() if digit else -1
    elif kind == MarkdownState.TASK_LIST:
        if _EMPTY_BULLET_LIST.match(text) or _EMPTY_TASK_LIST.match(text):
            mark = _BULLET_MARK.search(text)
            backtrack = mark.start() if mark else -1
    elif kind == MarkdownState.BLOCKQUOTE:
        if _EMPTY_BLOCKQUOTE.match(text):
            backtrack = text.rfind(">")
    else:
        return pairer is not None and pairer.delete_pair(document)

    if backtrack < 0:
        return False

    start = document.block_position(number)
    document.delete(start + backtrack, start + len(text))
    return True


def insert_prefix_for_blocks(document: TextDocument, prefix: str) -> None:
    """Insert ``prefix`` at the start of every selected block."""
    for number in document.blocks_in_selection():
        document.insert(document.block_position(number), prefix)


def create_numbered_list(document: TextDocument, marker: str) -> None:
    """Number the selected blocks from one, using ``marker`` after each number."""
    for count, number in enumerate(document.blocks_in_selection(), start=1):
        document.insert(document.block_position(number), f"{count}{marker} ")


def insert_formatting_markup(document: TextDocument, markup: str) -> None:
    """Surround the selection with ``markup``, or insert an empty pair of it."""
    cursor = document.cursor
    size = len(markup)

    if cursor.has_selection():
        start = cursor.selection_start()
        end = cursor.selection_end() + size
        document.insert(start, markup)
        document.insert(end, markup)
        cursor.position = max(cursor.position - size, 0)
    else:
        document.insert_text(markup + markup)
        cursor.position -= size
        cursor.anchor = cursor.position


def insert_comment(document: TextDocument) -> None:
    """Wrap the selection in an HTML comment, or insert an empty one."""
    cursor = document.cursor
    if cursor.has_selection():
        document.insert_text("<!-- " + document.selected_text() + " -->")
    else:
        document.insert_text("<!--  -->")
        cursor.position -= 4
        cursor.anchor = cursor.position