"""A Markdown editing model: key handling, formatting commands and typing state."""

from __future__ import annotations

import enum
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from .autopair import AutoPairer
from .document import MarkdownState, TextDocument, classify_block
from .highlighter import MarkdownHighlighter
from .indentation import (
    indent_text as _indent_text,
    remove_blockquote as _remove_blockquote,
    toggle_task_complete as _toggle_task_complete,
    unindent_text as _unindent_text,
)
from .listediting import (
    create_numbered_list as _create_numbered_list,
    handle_backspace,
    handle_carriage_return,
    insert_comment as _insert_comment,
    insert_formatting_markup,
    insert_prefix_for_blocks,
)
from .regions import FocusMode, faded_ranges as _faded_ranges

_IMAGE_EXTENSIONS = frozenset(
    {"jpg", "jpeg", "gif", "bmp", "png", "tif", "tiff", "svg"}
)
_BULLET_MARKERS = frozenset("*-+")
_NUMBER_MARKERS = frozenset(".)")


class Key(enum.Enum):
    """Keys that the editor treats specially; ``OTHER`` carries typed text."""

    RETURN = "return"
    DELETE = "delete"
    BACKSPACE = "backspace"
    TAB = "tab"
    BACKTAB = "backtab"
    SPACE = "space"
    OTHER = "other"


class _Signal:
    """A list of callbacks that are called together."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., None]] = []

    def connect(self, slot: Callable[..., None]) -> None:
        self._slots.append(slot)

    def emit(self, *args: object) -> None:
        for slot in list(self._slots):
            slot(*args)


class MarkdownEditor:
    """Edits a Markdown document the way a writer's editor would.

    Block states are recomputed after every change of the text, and the
    typing-paused signals follow the user's pauses as reported by the
    timer methods.
    """

    def __init__(self, text: str = "") -> None:
        self.document = TextDocument(text)
        self.pairer = AutoPairer()
        self.highlighter = MarkdownHighlighter(self.document)

        self.hemingway_mode_enabled = False
        self.bullet_point_cycling_enabled = True
        self.insert_spaces_for_tabs = False
        self.tab_width = 4
        self.focus_mode = FocusMode.DISABLED
        self.font_family = "Monospace"
        self.font_size = 12

        self.typing_has_paused = True
        self.scaled_typing_has_paused = True
        self.typing_paused_signal_sent = True
        self.typing_paused_scaled_signal_sent = True
        self.scaled_typing_interval = 1000

        self.typing_resumed = _Signal()
        self.typing_paused = _Signal()
        self.typing_paused_scaled = _Signal()
        self.font_size_changed = _Signal()

        self._refresh_states()

    # Internal helpers

    def _refresh_states(self) -> None:
        document = self.document
        previous: int = MarkdownState.PARAGRAPH_BREAK
        for number in range(document.block_count()):
            state = classify_block(document.block_text(number), previous)
            document.set_block_state(number, state)
            previous = state

    @contextmanager
    def _editing(self) -> Iterator[None]:
        before = self.document.text
        yield
        if self.document.text != before:
            self.on_contents_changed()

    def _place_cursor(self, position: int) -> None:
        self.document.cursor.position = position
        self.document.cursor.anchor = position

    def _type_text(self, text: str) -> None:
        if text:
            self.document.insert_text(text)

    def _delete_forward(self) -> None:
        document = self.document
        cursor = document.cursor
        if cursor.has_selection():
            document.insert_text("")
            return
        position = cursor.position
        if position < len(document.text):
            document.delete(position, position + 1)
            self._place_cursor(position)

    def _delete_backward(self) -> None:
        document = self.document
        cursor = document.cursor
        if cursor.has_selection():
            document.insert_text("")
            return
        position = cursor.position
        if position > 0:
            document.delete(position - 1, position)
            self._place_cursor(position - 1)

    # Key handling

    def key_press(
        self,
        key: Key,
        text: str = "",
        shift: bool = False,
        control: bool = False,
    ) -> None:
        """Handle one key press; ``text`` is what the key types, if anything."""
        document = self.document
        with self._editing():
            if key is Key.RETURN:
                if document.cursor.has_selection():
                    document.insert_text("\n")
                    return
                if shift:
                    # A Markdown line break.
                    document.insert_text("  ")
                    self._refresh_states()
                if control:
                    document.insert_text("\n")
                else:
                    handle_carriage_return(document)
            elif key is Key.DELETE:
                if not self.hemingway_mode_enabled:
                    self._delete_forward()
            elif key is Key.BACKSPACE:
                if not self.hemingway_mode_enabled and not handle_backspace(
                    document, self.pairer
                ):
                    self._delete_backward()
            elif key is Key.TAB:
                if not self.pairer.handle_whitespace_in_empty_match(document, "\t"):
                    self._indent()
            elif key is Key.BACKTAB:
                self._unindent()
            elif key is Key.SPACE:
                if not self.pairer.handle_whitespace_in_empty_match(document, " "):
                    document.insert_text(" ")
            elif len(text) == 1:
                if not self.pairer.handle_end_pair_character(
                    document, text
                ) and not self.pairer.insert_paired_characters(document, text):
                    document.insert_text(text)
            else:
                self._type_text(text)

    # Formatting commands

    def bold(self) -> None:
        with self._editing():
            insert_formatting_markup(self.document, "**")

    def italic(self) -> None:
        with self._editing():
            insert_formatting_markup(self.document, "*")

    def strikethrough(self) -> None:
        with self._editing():
            insert_formatting_markup(self.document, "~~")

    def insert_comment(self) -> None:
        """Wrap the selection in an HTML comment, or insert an empty one."""
        with self._editing():
            _insert_comment(self.document)

    def create_bullet_list(self, marker: str = "*") -> None:
        """Turn the selected lines into bullet items marked with ``marker``."""
        if marker not in _BULLET_MARKERS:
            raise ValueError(f"invalid bullet marker: {marker!r}")
        with self._editing():
            insert_prefix_for_blocks(self.document, f"{marker} ")

    def create_numbered_list(self, marker: str = ".") -> None:
        """Number the selected lines, using ``marker`` after each number."""
        if marker not in _NUMBER_MARKERS:
            raise ValueError(f"invalid numbered list marker: {marker!r}")
        with self._editing():
            _create_numbered_list(self.document, marker)

    def create_task_list(self) -> None:
        with self._editing():
            insert_prefix_for_blocks(self.document, "- [ ] ")

    def create_blockquote(self) -> None:
        with self._editing():
            insert_prefix_for_blocks(self.document, "> ")

    def remove_blockquote(self) -> None:
        with self._editing():
            _remove_blockquote(self.document)

    def _indent(self) -> None:
        _indent_text(
            self.document,
            self.tab_width,
            self.insert_spaces_for_tabs,
            self.bullet_point_cycling_enabled,
        )

    def _unindent(self) -> None:
        _unindent_text(self.document, self.tab_width, self.bullet_point_cycling_enabled)

    def indent_text(self) -> None:
        with self._editing():
            self._indent()

    def unindent_text(self) -> None:
        with self._editing():
            self._unindent()

    def toggle_task_complete(self) -> bool:
        with self._editing():
            return _toggle_task_complete(self.document)

    # Navigation and drops

    def navigate_document(self, position: int) -> None:
        """Move the cursor to ``position``."""
        if not 0 <= position <= len(self.document.text):
            raise IndexError(f"position {position} is outside the document")
        self._place_cursor(position)

    def drop_file(
        self,
        path: str | os.PathLike[str],
        position: int,
        document_path: str | os.PathLike[str] | None = None,
    ) -> bool:
        """Insert an image link for a dropped image file at ``position``.

        The link is relative to the document's directory when the document
        has been saved, otherwise it is a file URI. Returns False for files
        that are not images, leaving the text unchanged.
        """
        if not 0 <= position <= len(self.document.text):
            raise IndexError(f"position {position} is outside the document")

        dropped = Path(path)
        if dropped.suffix.lower().lstrip(".") not in _IMAGE_EXTENSIONS:
            return False

        link: str | None = None
        if document_path is not None:
            saved = Path(document_path)
            if saved.exists():
                link = Path(os.path.relpath(dropped, saved.parent)).as_posix()
        if link is None:
            link = dropped.absolute().as_uri()

        with self._editing():
            self.document.insert(position, f"![]({link})")
        return True

    # Fonts

    def _apply_font_size(self, size: int) -> None:
        self.font_size = size
        self.highlighter.set_font(self.font_family, size)
        self._refresh_states()
        self.font_size_changed.emit(size)

    def increase_font_size(self) -> None:
        self._apply_font_size(self.font_size + 1)

    def decrease_font_size(self) -> None:
        self._apply_font_size(max(self.font_size - 1, 1))

    def zoom(self, degrees: int) -> None:
        """Change the font size by one point per wheel turn with control held."""
        if degrees == 0:
            return
        size = self.font_size + (1 if degrees > 0 else -1)
        self._apply_font_size(max(size, 1))

    # Typing state

    def on_contents_changed(self) -> None:
        """Update block states and report that typing has resumed."""
        self._refresh_states()
        if self.typing_has_paused or self.scaled_typing_has_paused:
            self.typing_has_paused = False
            self.scaled_typing_has_paused = False
            self.typing_paused_signal_sent = False
            self.typing_paused_scaled_signal_sent = False
            self.highlighter.typing_paused = False
            self.typing_resumed.emit()

    def check_if_typing_paused(self) -> None:
        """Called once a second; reports the first pause after typing."""
        if self.typing_has_paused and not self.typing_paused_signal_sent:
            self.typing_paused_signal_sent = True
            self.typing_paused.emit()
        self.typing_has_paused = True

    def check_if_typing_paused_scaled(self) -> None:
        """Like :meth:`check_if_typing_paused`, on an interval scaled by size."""
        if self.scaled_typing_has_paused and not self.typing_paused_scaled_signal_sent:
            self.typing_paused_scaled_signal_sent = True
            self.highlighter.typing_paused = True
            self.typing_paused_scaled.emit()

        character_count = len(self.document.text) + 1
        interval = (character_count // 30000) * 20
        self.scaled_typing_interval = min(max(interval, 20), 1000)
        self.scaled_typing_has_paused = True

    def faded_ranges(self) -> list[tuple[int, int]]:
        """Return the character ranges the current focus mode fades out."""
        if self.focus_mode is FocusMode.DISABLED:
            return []
        return _faded_ranges(self.document, self.focus_mode)