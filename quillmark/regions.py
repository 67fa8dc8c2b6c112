"""Block-quote and code-block areas of a document, and focus-mode fading."""

from __future__ import annotations

import enum
import re

from .document import MarkdownState, TextDocument

# The state reported for a block that does not exist.
_INVALID_STATE = -1

_SENTENCE_END = re.compile(r"[.!?]+['\"\)\]]*\s+")


class BlockType(enum.IntEnum):
    """Kind of a shaded block area; ``NONE`` is falsy."""

    NONE = 0
    QUOTE = 1
    CODE = 2


class FocusMode(enum.Enum):
    """Which part of the text around the cursor stays unfaded."""

    DISABLED = "disabled"
    CURRENT_LINE = "current_line"
    THREE_LINES = "three_lines"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    TYPEWRITER = "typewriter"


def _valid(document: TextDocument, number: int) -> bool:
    return 0 <= number < document.block_count()


def _state(document: TextDocument, number: int) -> int:
    if not _valid(document, number):
        return _INVALID_STATE
    return document.block_state(number)


def _is_blockquote(document: TextDocument, number: int) -> bool:
    flag = int(MarkdownState.BLOCKQUOTE)
    return (_state(document, number) & flag) == flag


def _is_code_block(document: TextDocument, number: int) -> bool:
    flag = int(MarkdownState.CODE_BLOCK)
    return (_state(document, number) & flag) == flag


def _at_code_block_start(document: TextDocument, number: int) -> bool:
    return _is_code_block(document, number) and not _is_code_block(document, number - 1)


def _at_code_block_end(document: TextDocument, number: int) -> bool:
    return not _is_code_block(document, number)


def inside_block_area(document: TextDocument, number: int) -> BlockType:
    """Return the kind of area a block lies in, or ``BlockType.NONE``."""
    if not _valid(document, number):
        return BlockType.NONE
    if _is_blockquote(document, number):
        return BlockType.QUOTE
    if _is_code_block(document, number):
        return BlockType.CODE
    return BlockType.NONE


def at_block_area_start(document: TextDocument, number: int) -> BlockType:
    """Return the kind of area a block begins, or ``BlockType.NONE``."""
    if not _valid(document, number):
        return BlockType.NONE
    if _at_code_block_start(document, number):
        return BlockType.CODE
    if _is_blockquote(document, number):
        return BlockType.QUOTE
    return BlockType.NONE


def at_block_area_end(document: TextDocument, number: int, block_type: BlockType) -> bool:
    """Return whether a block lies past the end of an area of ``block_type``."""
    if block_type == BlockType.CODE:
        return _at_code_block_end(document, number) and not _is_blockquote(document, number)
    if block_type == BlockType.QUOTE:
        return not _is_blockquote(document, number)
    return True


def block_areas(document: TextDocument) -> list[tuple[int, int, BlockType]]:
    """Return the shaded areas as ``(first_block, last_block, type)`` tuples."""
    areas: list[tuple[int, int, BlockType]] = []
    last_block = document.block_count() - 1
    in_area = False
    first = 0
    block_type = BlockType.NONE

    for number in range(document.block_count()):
        if not in_area:
            block_type = at_block_area_start(document, number)
            if block_type:
                first = number
                in_area = True
        elif at_block_area_end(document, number, block_type):
            areas.append((first, number - 1, block_type))
            in_area = False

        if in_area and number == last_block:
            areas.append((first, number, block_type))
            in_area = False

    return areas


def _sentence_boundaries(text: str) -> list[int]:
    boundaries = {0, len(text)}
    for match in _SENTENCE_END.finditer(text):
        if match.end() < len(text):
            boundaries.add(match.end())
    return sorted(boundaries)


def _block_end(document: TextDocument, number: int) -> int:
    return document.block_position(number) + len(document.block_text(number))


def faded_ranges(document: TextDocument, mode: FocusMode) -> list[tuple[int, int]]:
    """Return the ``(start, end)`` character ranges to fade for a focus mode."""
    total = len(document.text)
    current = document.current_block()
    last = document.block_count() - 1
    ranges: list[tuple[int, int]] = []

    if mode == FocusMode.CURRENT_LINE:
        if current > 0:
            ranges.append((0, _block_end(document, current - 1)))
        ranges.append((_block_end(document, current), total))
    elif mode == FocusMode.THREE_LINES:
        if current >= 2:
            ranges.append((0, _block_end(document, current - 2)))
        ranges.append((_block_end(document, min(current + 1, last)), total))
    elif mode == FocusMode.PARAGRAPH:
        ranges.append((0, document.block_position(current)))
        ranges.append((_block_end(document, current), total))
    elif mode == FocusMode.SENTENCE:
        text = document.block_text(current)
        start = document.block_position(current)
        pos = document.position_in_block()
        boundaries = _sentence_boundaries(text)
        previous = max((b for b in boundaries if b < pos), default=-1)
        following = min((b for b in boundaries if b > pos), default=-1)

        ranges.append((0, start if previous < 0 else start + previous))
        after = _block_end(document, current) if following < 0 else start + following
        ranges.append((after, total))

    return ranges