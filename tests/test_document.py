import pytest

from quillmark.document import MarkdownState, TextCursor, TextDocument, classify_block

SAMPLE = "first line\nsecond\n\nlast"


def kind(state):
    return state & MarkdownState.MASK


def test_blocks_follow_newlines():
    doc = TextDocument(SAMPLE)
    lines = SAMPLE.split("\n")
    assert doc.block_count() == len(lines)
    assert [doc.block_text(n) for n in range(doc.block_count())] == lines


def test_block_positions_are_contiguous():
    doc = TextDocument(SAMPLE)
    assert doc.block_position(0) == 0
    for n in range(doc.block_count() - 1):
        assert doc.block_position(n + 1) == doc.block_position(n) + len(doc.block_text(n)) + 1


def test_find_block_contains_position():
    doc = TextDocument(SAMPLE)
    for position in range(len(SAMPLE) + 1):
        n = doc.find_block(position)
        start = doc.block_position(n)
        assert start <= position <= start + len(doc.block_text(n))


@pytest.mark.parametrize("position", [-1, len(SAMPLE) + 1])
def test_find_block_out_of_range(position):
    with pytest.raises(IndexError):
        TextDocument(SAMPLE).find_block(position)


def test_block_text_out_of_range():
    with pytest.raises(IndexError):
        TextDocument(SAMPLE).block_text(10)


def test_insert_then_delete_round_trip():
    doc = TextDocument(SAMPLE)
    doc.insert(5, "XYZ\nnew")
    assert doc.text == SAMPLE[:5] + "XYZ\nnew" + SAMPLE[5:]
    doc.delete(5, 5 + len("XYZ\nnew"))
    assert doc.text == SAMPLE


def test_insert_moves_cursor_after_insertion_point():
    doc = TextDocument(SAMPLE)
    doc.cursor = TextCursor(8)
    doc.insert(2, "abc")
    assert doc.cursor.position == 8 + len("abc")
    doc.insert(len(doc.text), "tail")
    assert doc.cursor.position == 8 + len("abc")


def test_delete_clamps_cursor_inside_range():
    doc = TextDocument(SAMPLE)
    doc.cursor = TextCursor(6)
    doc.delete(3, 9)
    assert doc.cursor.position == 3


def test_delete_rejects_reversed_range():
    with pytest.raises(ValueError):
        TextDocument(SAMPLE).delete(5, 2)


def test_insert_rejects_bad_position():
    with pytest.raises(IndexError):
        TextDocument(SAMPLE).insert(len(SAMPLE) + 1, "x")


def test_insert_text_replaces_selection():
    doc = TextDocument(SAMPLE)
    doc.cursor = TextCursor(position=0, anchor=5)
    assert doc.selected_text() == SAMPLE[:5]
    doc.insert_text("FIRST")
    assert doc.text == "FIRST" + SAMPLE[5:]
    assert doc.cursor.position == len("FIRST")
    assert not doc.cursor.has_selection()


def test_cursor_selection_bounds():
    cursor = TextCursor(position=2, anchor=9)
    assert cursor.selection_start() == 2
    assert cursor.selection_end() == 9
    assert cursor.has_selection()
    assert not TextCursor(4).has_selection()


def test_blocks_in_selection_spans_lines():
    doc = TextDocument(SAMPLE)
    doc.cursor = TextCursor(position=2, anchor=SAMPLE.index("second") + 1)
    assert list(doc.blocks_in_selection()) == [0, 1]
    doc.cursor = TextCursor(SAMPLE.index("last"))
    assert list(doc.blocks_in_selection()) == [doc.block_count() - 1]


def test_position_in_block():
    doc = TextDocument(SAMPLE)
    start = SAMPLE.index("second")
    doc.cursor = TextCursor(start + 3)
    assert doc.current_block() == 1
    assert doc.position_in_block() == 3


def test_char_at():
    doc = TextDocument(SAMPLE)
    assert doc.char_at(0) == SAMPLE[0]
    assert doc.char_at(SAMPLE.index("\n")) == "\n"
    assert doc.char_at(-1) == ""
    assert doc.char_at(len(SAMPLE)) == ""


@pytest.mark.parametrize(
    "line, previous, expected",
    [
        ("", MarkdownState.UNKNOWN, MarkdownState.PARAGRAPH_BREAK),
        ("plain text", MarkdownState.UNKNOWN, MarkdownState.PARAGRAPH),
        ("# Title", MarkdownState.UNKNOWN, MarkdownState.ATX_HEADING_1),
        ("### Title", MarkdownState.UNKNOWN, MarkdownState.ATX_HEADING_3),
        ("- item", MarkdownState.UNKNOWN, MarkdownState.BULLET_POINT_LIST),
        ("* item", MarkdownState.UNKNOWN, MarkdownState.BULLET_POINT_LIST),
        ("1. item", MarkdownState.UNKNOWN, MarkdownState.NUMBERED_LIST),
        ("2) item", MarkdownState.UNKNOWN, MarkdownState.NUMBERED_LIST),
        ("- [ ] task", MarkdownState.UNKNOWN, MarkdownState.TASK_LIST),
        ("- [x] done", MarkdownState.UNKNOWN, MarkdownState.TASK_LIST),
        ("> quoted", MarkdownState.UNKNOWN, MarkdownState.BLOCKQUOTE),
        ("***", MarkdownState.PARAGRAPH_BREAK, MarkdownState.HORIZONTAL_RULE),
        ("---", MarkdownState.PARAGRAPH, MarkdownState.SETEXT_HEADING_2),
        ("===", MarkdownState.PARAGRAPH, MarkdownState.SETEXT_HEADING_1),
        ("|---|---|", MarkdownState.PARAGRAPH, MarkdownState.PIPE_TABLE_DIVIDER),
        ("| a | b |", MarkdownState.PIPE_TABLE_DIVIDER, MarkdownState.PIPE_TABLE_ROW),
        ("   more", MarkdownState.BULLET_POINT_LIST, MarkdownState.BULLET_POINT_LIST),
    ],
)
def test_classify_block_kinds(line, previous, expected):
    assert kind(classify_block(line, previous)) == expected


def test_classify_list_inside_blockquote():
    state = classify_block("> - item", MarkdownState.UNKNOWN)
    assert state & MarkdownState.BLOCKQUOTE
    assert kind(state) & ~MarkdownState.BLOCKQUOTE == MarkdownState.BULLET_POINT_LIST


def test_classify_records_indentation():
    state = classify_block("   text", MarkdownState.UNKNOWN)
    assert state & ~MarkdownState.MASK == len("   ")
    assert kind(state) == MarkdownState.PARAGRAPH


def test_fenced_code_states():
    doc = TextDocument("```\ncode\n```\nafter")
    for n in range(3):
        assert doc.block_state(n) & MarkdownState.CODE_BLOCK
    assert not doc.block_state(3) & MarkdownState.CODE_BLOCK
    assert kind(doc.block_state(3)) == MarkdownState.PARAGRAPH


def test_set_block_state_lasts_until_edit():
    doc = TextDocument(SAMPLE)
    doc.set_block_state(0, MarkdownState.TASK_LIST)
    assert doc.block_state(0) == MarkdownState.TASK_LIST
    doc.insert(len(doc.text), "!")
    assert kind(doc.block_state(0)) == MarkdownState.PARAGRAPH


def test_states_follow_edits():
    doc = TextDocument("item")
    assert kind(doc.block_state(0)) == MarkdownState.PARAGRAPH
    doc.insert(0, "- ")
    assert kind(doc.block_state(0)) == MarkdownState.BULLET_POINT_LIST