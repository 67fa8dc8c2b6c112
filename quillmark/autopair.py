"""Automatic pairing of Markdown markup characters while typing."""

from __future__ import annotations

from .document import TextDocument

# Characters that may be paired even right after a non-whitespace character,
# as in mathematical or programming expressions.
_PAIR_AFTER_WORD = frozenset("([{<")


class AutoPairer:
    """Inserts, skips over and removes matching pairs of markup characters."""

    def __init__(self) -> None:
        self.enabled = True
        self.markup_pairs: dict[str, str] = {
            '"': '"',
            "'": "'",
            "(": ")",
            "[": "]",
            "{": "}",
            "*": "*",
            "_": "_",
            "`": "`",
            "<": ">",
        }
        self.auto_match_filter: dict[str, bool] = {
            opening: True for opening in self.markup_pairs
        }
        # Pairs between which typed whitespace replaces the closing character.
        self.non_empty_pairs: dict[str, str] = {"*": "*", "_": "_", "<": ">"}

    def set_enabled_for(self, character: str, enabled: bool) -> None:
        """Enable or disable automatic matching for an opening character."""
        self.auto_match_filter[character] = enabled

    def _matching_allowed(self, opening: str) -> bool:
        return self.auto_match_filter.get(opening, False)

    def insert_paired_characters(self, document: TextDocument, first_char: str) -> bool:
        """Insert ``first_char`` with its closing partner; return whether it was done."""
        if not (
            self.enabled
            and first_char in self.markup_pairs
            and self._matching_allowed(first_char)
        ):
            return False

        last_char = self.markup_pairs[first_char]
        cursor = document.cursor

        if cursor.has_selection():
            start = cursor.selection_start()
            end = cursor.selection_end()
            # Only surround a selection that lies within a single block.
            if document.find_block(start) != document.find_block(end):
                return False
            document.insert(start, first_char)
            document.insert(document.cursor.selection_end(), last_char)
            new_start = document.cursor.selection_start()
            new_end = document.cursor.selection_end() - 1
            document.cursor.anchor = new_start
            document.cursor.position = new_end
            return True

        text = document.block_text(document.current_block())
        block_pos = document.position_in_block()
        at_block_end = block_pos == len(text)
        do_match = True

        if block_pos > 0:
            block_pos -= 1
            if not text[block_pos].isspace() and first_char not in _PAIR_AFTER_WORD:
                do_match = False

        if not at_block_end:
            following = text[block_pos + 1] if block_pos + 1 < len(text) else ""
            if not following.isspace():
                do_match = False

        if not do_match:
            return False

        document.insert_text(first_char + last_char)
        document.cursor.position -= 1
        document.cursor.anchor = document.cursor.position
        return True

    def handle_end_pair_character(self, document: TextDocument, char: str) -> bool:
        """Step over an already present closing character instead of typing it."""
        cursor = document.cursor
        if not self.enabled or cursor.has_selection():
            return False

        opening = next(
            (key for key, value in self.markup_pairs.items() if value == char), None
        )
        if opening is None or not self._matching_allowed(opening):
            return False

        text = document.block_text(document.current_block())
        pos = document.position_in_block()
        if pos < len(text) and text[pos] == char:
            cursor.position += 1
            cursor.anchor = cursor.position
            return True
        return False

    def handle_whitespace_in_empty_match(
        self, document: TextDocument, whitespace: str
    ) -> bool:
        """Replace the closing character of an empty emphasis-like pair with whitespace."""
        text = document.block_text(document.current_block())
        pos = document.position_in_block()

        if (
            text
            and 0 < pos < len(text)
            and text[pos - 1] in self.non_empty_pairs
            and text[pos] == self.non_empty_pairs[text[pos - 1]]
        ):
            position = document.cursor.position
            document.delete(position, position + 1)
            document.insert_text(whitespace)
            return True
        return False

    def delete_pair(self, document: TextDocument) -> bool:
        """On backspace inside an empty pair, remove both characters."""
        cursor = document.cursor
        if not self.enabled or cursor.has_selection():
            return False

        pos = document.position_in_block()
        text = document.block_text(document.current_block())
        if not 0 < pos < len(text):
            return False

        if self.markup_pairs.get(text[pos - 1]) == text[pos]:
            position = cursor.position
            document.delete(position - 1, position + 1)
            return True
        return False