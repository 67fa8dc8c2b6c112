import pytest

from quillmark.autopair import AutoPairer
from quillmark.document import TextCursor, TextDocument
from quillmark.listediting import (
    create_numbered_list,
    handle_backspace,
    handle_carriage_return,
    insert_comment,
    insert_formatting_markup,
    insert_prefix_for_blocks,
    prior_indentation,
)


def at_end(text):
    document = TextDocument(text)
    document.cursor = TextCursor(len(text))
    return document


def test_prior_indentation():
    text = "   abc"
    assert prior_indentation(at_end(text)) == text[:3]


def test_return_keeps_indentation_of_paragraph():
    text = "  hello"
    document = at_end(text)
    handle_carriage_return(document)
    assert document.block_count() == 2
    assert document.block_text(1) == text[:2]
    assert document.cursor.position == len(document.text)


def test_return_in_middle_of_line_splits_it():
    text = "  hello world"
    document = TextDocument(text)
    document.cursor = TextCursor(4)
    handle_carriage_return(document)
    assert document.block_text(0) == text[:4]
    assert document.block_text(1) == text[:2] + text[4:]


def test_return_continues_bullet_list():
    document = at_end("- item")
    handle_carriage_return(document)
    assert document.block_text(1) == "- "


def test_return_on_empty_bullet_ends_list():
    document = at_end("- item\n- ")
    handle_carriage_return(document)
    assert document.block_count() == 3
    assert document.block_text(1) == ""
    assert document.block_text(2) == ""


def test_return_increments_numbered_list():
    document = at_end("1. one")
    handle_carriage_return(document)
    assert document.block_text(1) == "2. "


def test_return_on_empty_numbered_item_ends_list():
    document = at_end("1. a\n2. ")
    handle_carriage_return(document)
    assert document.block_text(0) == "1. a"
    assert document.block_text(1) == ""


def test_return_adds_unchecked_task():
    document = at_end("- [x] done")
    handle_carriage_return(document)
    assert document.block_text(1) == "- [ ] "


def test_return_continues_blockquote():
    document = at_end("> quoted")
    handle_carriage_return(document)
    assert document.block_text(1) == "> "


def test_backspace_clears_empty_numbered_item():
    text = "1. a\n2. "
    document = at_end(text)
    assert handle_backspace(document, AutoPairer()) is True
    assert document.text == text[: text.index("\n") + 1]


def test_backspace_on_filled_numbered_item_is_not_consumed():
    document = at_end("1. a")
    assert handle_backspace(document, AutoPairer()) is False
    assert document.text == "1. a"


def test_backspace_clears_empty_blockquote():
    document = at_end("> ")
    assert handle_backspace(document, AutoPairer()) is True
    assert document.text == ""


def test_backspace_clears_empty_task():
    document = at_end("- [ ] ")
    assert handle_backspace(document, AutoPairer()) is True
    assert document.text == ""


def test_backspace_on_empty_bullet_defers_to_default():
    document = at_end("- ")
    assert handle_backspace(document, AutoPairer()) is False
    assert document.text == "- "


def test_backspace_deletes_empty_pair():
    document = TextDocument("a()")
    document.cursor = TextCursor(2)
    assert handle_backspace(document, AutoPairer()) is True
    assert document.text == "a"


@pytest.mark.parametrize("pairer_enabled", [False, None])
def test_backspace_without_pairing(pairer_enabled):
    document = TextDocument("a()")
    document.cursor = TextCursor(2)
    pairer = None
    if pairer_enabled is not None:
        pairer = AutoPairer()
        pairer.enabled = pairer_enabled
    assert handle_backspace(document, pairer) is False
    assert document.text == "a()"


def test_backspace_with_selection_is_not_consumed():
    document = TextDocument("> ")
    document.cursor = TextCursor(position=2, anchor=0)
    assert handle_backspace(document, AutoPairer()) is False
    assert document.text == "> "


def test_insert_prefix_for_selected_blocks():
    lines = ["a", "b", "c"]
    document = TextDocument("\n".join(lines))
    document.cursor = TextCursor(position=len(document.text), anchor=0)
    insert_prefix_for_blocks(document, "> ")
    result = [document.block_text(i) for i in range(document.block_count())]
    assert result == ["> " + line for line in lines]


def test_insert_prefix_only_current_block():
    document = TextDocument("a\nb")
    document.cursor = TextCursor(0)
    insert_prefix_for_blocks(document, "* ")
    assert document.block_text(0) == "* a"
    assert document.block_text(1) == "b"


def test_create_numbered_list_numbers_from_one():
    lines = ["a", "b"]
    document = TextDocument("\n".join(lines))
    document.cursor = TextCursor(position=len(document.text), anchor=0)
    create_numbered_list(document, ")")
    result = [document.block_text(i) for i in range(document.block_count())]
    assert result == [f"{n}) {line}" for n, line in enumerate(lines, start=1)]


def test_formatting_markup_without_selection():
    document = TextDocument("")
    insert_formatting_markup(document, "**")
    assert document.text == "****"
    assert document.cursor.position == len("**")
    assert not document.cursor.has_selection()


def test_formatting_markup_surrounds_selection():
    document = TextDocument("word")
    document.cursor = TextCursor(position=4, anchor=0)
    insert_formatting_markup(document, "~~")
    assert document.text == "~~word~~"
    assert document.selected_text() == "word"


def test_insert_empty_comment_places_cursor_inside():
    document = TextDocument("")
    insert_comment(document)
    assert document.text == "<!--  -->"
    assert document.cursor.position == len("<!-- ")


def test_insert_comment_around_selection():
    document = TextDocument("hi")
    document.cursor = TextCursor(position=2, anchor=0)
    insert_comment(document)
    assert document.text == "<!-- " + "hi" + " -->"