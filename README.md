# quillmark

The editing behaviour of a distraction-free Markdown writing tool, as a
plain Python library with no user interface and no dependencies.

## What is in it

- `quillmark.document`: `TextDocument`, text split into blocks (lines) with a
  `TextCursor` (position and anchor, so it can hold a selection), and
  `classify_block`, which gives each line a `MarkdownState` (paragraph,
  headings, numbered, bullet and task lists, rules, pipe tables, fenced code,
  block quotes) plus its indentation.
- `quillmark.markdownnode`: `MarkdownNode` and `NodeType`, a Markdown tree
  with source lines and columns.
- `quillmark.autopair`: `AutoPairer`, which pairs quotes, brackets and
  emphasis markers as they are typed, steps over closing characters, and
  removes an empty pair on backspace.
- `quillmark.listediting`: Enter continues numbered (incrementing the
  number), bullet and task lists and block quotes, an empty item ends its
  list; backspace on an empty item removes its markup; list, quote,
  emphasis and comment insertion.
- `quillmark.indentation`: `indent_text`, `unindent_text` (with bullet-marker
  cycling `*` → `-` → `+`), `remove_blockquote`, `toggle_task_complete`.
- `quillmark.formats`, `quillmark.nodeformatting`, `quillmark.highlighter`:
  `MarkdownHighlighter` turns a block and its Markdown node into
  `FormatSpan`s of `CharFormat`s whose colours are named by `Role`, and
  updates the block's state.
- `quillmark.regions`: code-block and block-quote areas (`block_areas`) and
  the text ranges faded by each `FocusMode` (`faded_ranges`).
- `quillmark.editor`: `MarkdownEditor`, which ties these together behind
  `key_press(Key, text, shift, control)` and commands such as `bold`,
  `italic`, `strikethrough`, `insert_comment`, `create_bullet_list`,
  `create_numbered_list`, `create_task_list`, `create_blockquote`,
  `indent_text`, `toggle_task_complete`, `drop_file` and font zooming, with
  `typing_resumed`, `typing_paused`, `typing_paused_scaled` and
  `font_size_changed` callbacks.
- `quillmark.outline`: `Outline`, the list of headings and the one holding a
  given position.

## Installation

```
pip install quillmark
```

## Examples

```python
from quillmark.editor import Key, MarkdownEditor

editor = MarkdownEditor("1. first item")
editor.navigate_document(len("1. first item"))
editor.key_press(Key.RETURN)
print(editor.document.text)   # "1. first item\n2. "

editor.key_press(Key.RETURN)  # an empty item ends the list
print(editor.document.text)   # "1. first item\n\n"
```

Formatting commands act on the cursor or the selection:

```python
editor = MarkdownEditor("word")
editor.navigate_document(4)
editor.bold()                 # "word****", cursor between the markers
```

An outline is built from heading nodes of a document:

```python
from quillmark.document import TextDocument
from quillmark.markdownnode import MarkdownNode, NodeType
from quillmark.outline import Outline

doc = TextDocument("# Intro\ntext\n## Details")
headings = [
    MarkdownNode(NodeType.HEADING, start_line=1, end_line=1, heading_level=1),
    MarkdownNode(NodeType.HEADING, start_line=3, end_line=3, heading_level=2),
]
outline = Outline()
outline.reload(doc, headings)
print([entry.position for entry in outline.entries])  # [0, 13]
print(outline.current_heading(10))                    # 0
```

## What it does not do

- It has no Markdown parser. The highlighter and the outline work from
  `MarkdownNode` trees that the caller builds or obtains elsewhere; the
  editor's own block states come from the line classifier in
  `quillmark.document`, which recognises only fenced code blocks as code.
- It has no spelling dictionary. `MarkdownHighlighter.set_spell_checker`
  takes a function that finds misspelled words.
- It draws nothing, runs no timers and provides no command: the caller
  displays the text and spans, and calls `check_if_typing_paused` and
  `check_if_typing_paused_scaled` on its own schedule.

## Running the tests

```
pip install -e .[test]
pytest
```