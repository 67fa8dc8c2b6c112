import pytest

from quillmark.document import TextCursor, TextDocument
from quillmark.indentation import (
    indent_text,
    remove_blockquote,
    toggle_task_complete,
    unindent_text,
)


def doc_with_cursor(text, position, anchor=None):
    document = TextDocument(text)
    document.cursor = TextCursor(position, anchor)
    return document


def test_remove_blockquote_single_line():
    document = doc_with_cursor("> quote", 0)
    remove_blockquote(document)
    assert document.text == "quote"


def test_remove_blockquote_selection():
    lines = ["> a", "> b", "c"]
    text = "\n".join(lines)
    document = doc_with_cursor(text, 0, len(text))
    remove_blockquote(document)
    assert document.text.split("\n") == [line.lstrip("> ") for line in lines]


def test_remove_blockquote_without_marker_unchanged():
    document = doc_with_cursor("plain", 2)
    remove_blockquote(document)
    assert document.text == "plain"


def test_indent_plain_text_with_tab():
    document = doc_with_cursor("abc", 1)
    indent_text(document, 4, False)
    assert document.text == "a" + "\t" + "bc"
    assert document.cursor.position == 2


def test_indent_aligns_to_tab_stop_with_spaces():
    document = doc_with_cursor("abc", 1)
    indent_text(document, 4, True)
    # The inserted run ends on the next tab stop.
    assert document.text.index("b") == 4
    assert document.text.strip() == "a" + " " * 3 + "bc"


def test_indent_selection_then_unindent_round_trip():
    text = "one\ntwo"
    document = doc_with_cursor(text, 0, len(text))
    indent_text(document, 2, True)
    assert all(line.startswith("  ") for line in document.text.split("\n"))
    document.cursor = TextCursor(0, len(document.text))
    unindent_text(document, 2)
    assert document.text == text


def test_indent_empty_numbered_item_restarts_numbering():
    document = doc_with_cursor("3. ", 3)
    indent_text(document, 4, False)
    assert document.text == "\t1. "
    assert document.cursor.position == len(document.text)


@pytest.mark.parametrize(
    "item, expected",
    [("* ", "\t- "), ("- ", "\t+ "), ("+ ", "\t* ")],
)
def test_indent_empty_bullet_cycles_mark(item, expected):
    document = doc_with_cursor(item, len(item))
    indent_text(document, 4, False, True)
    assert document.text == expected


def test_indent_empty_bullet_without_cycling():
    document = doc_with_cursor("* ", 2)
    indent_text(document, 4, False, False)
    assert document.text == "\t" + "* "


def test_indent_empty_task_item():
    document = doc_with_cursor("- [ ] ", 6)
    indent_text(document, 4, False)
    assert document.text == "\t" + "- [ ] "


def test_unindent_removes_tab():
    document = doc_with_cursor("\tabc", 2)
    unindent_text(document, 4)
    assert document.text == "abc"


def test_unindent_removes_at_most_tab_width_spaces():
    document = doc_with_cursor(" " * 6 + "abc", 7)
    unindent_text(document, 4)
    assert document.text == " " * 2 + "abc"


@pytest.mark.parametrize(
    "item, expected",
    [("\t- ", "* "), ("\t* ", "+ "), ("\t+ ", "- ")],
)
def test_unindent_empty_bullet_cycles_backwards(item, expected):
    document = doc_with_cursor(item, len(item))
    unindent_text(document, 4, True)
    assert document.text == expected


def test_indent_then_unindent_bullet_restores_mark():
    document = doc_with_cursor("* ", 2)
    indent_text(document, 4, False, True)
    document.cursor = TextCursor(len(document.text))
    unindent_text(document, 4, True)
    assert document.text == "* "


def test_toggle_task_complete_round_trip():
    document = doc_with_cursor("- [ ] task", 0)
    assert toggle_task_complete(document) is True
    assert document.text == "- [x] task"
    toggle_task_complete(document)
    assert document.text == "- [ ] task"


def test_toggle_task_complete_selection_and_cursor_kept():
    text = "- [ ] a\n- [x] b\nplain"
    document = doc_with_cursor(text, len(text), 0)
    toggle_task_complete(document)
    assert document.text == "- [x] a\n- [ ] b\nplain"
    assert len(document.text) == len(text)
    assert document.cursor.selection_end() == len(text)