import pytest

from quillmark.autopair import AutoPairer
from quillmark.document import TextCursor, TextDocument


def make_doc(text, position, anchor=None):
    doc = TextDocument(text)
    doc.cursor = TextCursor(position, anchor)
    return doc


@pytest.fixture
def pairer():
    return AutoPairer()


def test_inserts_pair_after_space(pairer):
    doc = make_doc("say ", 4)
    assert pairer.insert_paired_characters(doc, "(") is True
    assert doc.text == "say ()"
    assert doc.cursor.position == 5
    assert not doc.cursor.has_selection()


def test_parenthesis_pairs_after_word(pairer):
    doc = make_doc("f", 1)
    assert pairer.insert_paired_characters(doc, "(") is True
    assert doc.text == "f()"
    assert doc.cursor.position == 2


def test_emphasis_not_paired_after_word(pairer):
    doc = make_doc("f", 1)
    assert pairer.insert_paired_characters(doc, "*") is False
    assert doc.text == "f"


def test_no_pair_before_non_whitespace(pairer):
    doc = make_doc("a b", 2)
    assert pairer.insert_paired_characters(doc, "(") is False
    assert doc.text == "a b"


def test_surrounds_selection(pairer):
    doc = make_doc("one two", 4, 7)
    assert pairer.insert_paired_characters(doc, "*") is True
    assert doc.text == "one *two*"
    assert doc.selected_text() == "two"


def test_selection_across_blocks_not_surrounded(pairer):
    doc = make_doc("one\ntwo", 1, 6)
    assert pairer.insert_paired_characters(doc, "[") is False
    assert doc.text == "one\ntwo"


def test_filter_disables_character(pairer):
    pairer.set_enabled_for("(", False)
    doc = make_doc("", 0)
    assert pairer.insert_paired_characters(doc, "(") is False
    assert doc.text == ""


def test_globally_disabled(pairer):
    pairer.enabled = False
    doc = make_doc("", 0)
    assert pairer.insert_paired_characters(doc, "[") is False
    assert doc.text == ""


def test_unknown_character_not_paired(pairer):
    doc = make_doc("", 0)
    assert pairer.insert_paired_characters(doc, "a") is False
    assert doc.text == ""


def test_step_over_closing_character(pairer):
    doc = make_doc("()", 1)
    assert pairer.handle_end_pair_character(doc, ")") is True
    assert doc.text == "()"
    assert doc.cursor.position == 2


def test_no_step_when_next_differs(pairer):
    doc = make_doc("(x", 2)
    assert pairer.handle_end_pair_character(doc, ")") is False
    assert doc.cursor.position == 2


def test_no_step_when_opening_filtered(pairer):
    pairer.set_enabled_for("(", False)
    doc = make_doc("()", 1)
    assert pairer.handle_end_pair_character(doc, ")") is False
    assert doc.cursor.position == 1


def test_whitespace_replaces_empty_emphasis_close(pairer):
    doc = make_doc("**", 1)
    assert pairer.handle_whitespace_in_empty_match(doc, " ") is True
    assert doc.text == "* "
    assert doc.cursor.position == 2


def test_whitespace_in_parentheses_untouched(pairer):
    doc = make_doc("()", 1)
    assert pairer.handle_whitespace_in_empty_match(doc, " ") is False
    assert doc.text == "()"


def test_delete_empty_pair(pairer):
    doc = make_doc("x ()", 3)
    assert pairer.delete_pair(doc) is True
    assert doc.text == "x "
    assert doc.cursor.position == 2


def test_delete_pair_on_second_line(pairer):
    doc = make_doc("ab\n[]", 4)
    assert pairer.delete_pair(doc) is True
    assert doc.text == "ab\n"


def test_delete_pair_requires_match(pairer):
    doc = make_doc("(x", 1)
    assert pairer.delete_pair(doc) is False
    assert doc.text == "(x"


def test_delete_pair_at_block_start(pairer):
    doc = make_doc("()", 0)
    assert pairer.delete_pair(doc) is False
    assert doc.text == "()"


def test_delete_pair_with_selection(pairer):
    doc = make_doc("()", 1, 2)
    assert pairer.delete_pair(doc) is False
    assert doc.text == "()"