import pytest

from md_to_tex.converter import close_open_blocks, process_line
from md_to_tex.exceptions import UnknownStateError
from md_to_tex.models import CodeBlockContext, ParserContext, ParserState, TableContext


def test_blank_line_in_text_emits_blank_line():
    ctx = ParserContext()

    assert process_line(ctx, "   ") == [""]
    assert ctx.state is ParserState.TEXT


@pytest.mark.parametrize(
    "line, state",
    [
        ("1. one", ParserState.ORDERED_LIST),
        ("- one", ParserState.UNORDERED_LIST),
        ("> quote", ParserState.QUOTE),
        ("```", ParserState.CODE),
        ("|figure", ParserState.FIGURE),
        ("| A | B |", ParserState.TABLE),
        ("|literal", ParserState.LITERAL),
        ("[^1]: note", ParserState.FOOTNOTE),
        ("$$", ParserState.EQUATION),
        ("$$<!--eq:a-->", ParserState.NUMBERED_EQUATION),
    ],
)
def test_text_state_transitions(line: str, state: ParserState):
    ctx = ParserContext()

    process_line(ctx, line)

    assert ctx.state is state


def test_heading_does_not_change_state():
    ctx = ParserContext()

    assert process_line(ctx, "### Methods") == ["\\section{Methods}\\label{}"]
    assert ctx.state is ParserState.TEXT


def test_code_fence_records_block_settings():
    ctx = ParserContext()

    process_line(ctx, "```rust<!--lst:a--><!--A listing-->")

    assert ctx.code == CodeBlockContext(language="rust", label="lst:a", caption="A listing")


def test_closing_code_fence_clears_block_settings():
    ctx = ParserContext(state=ParserState.CODE, code=CodeBlockContext(language="python"))

    assert process_line(ctx, "```  ") == ["\\end{lstlisting}"]
    assert ctx.state is ParserState.TEXT
    assert ctx.code is None


def test_code_block_does_not_close_on_fence_with_language():
    ctx = ParserContext(state=ParserState.CODE, code=CodeBlockContext())

    assert process_line(ctx, "```python") == ["```python"]
    assert ctx.state is ParserState.CODE


def test_figure_blank_line_moves_to_caption():
    ctx = ParserContext(state=ParserState.FIGURE)

    assert process_line(ctx, "") == []
    assert ctx.state is ParserState.FIGURE_CAPTION


def test_caption_separates_labels():
    ctx = ParserContext(state=ParserState.FIGURE_CAPTION)

    process_line(ctx, "The *caption*")
    process_line(ctx, "\\label{fig:x}")

    assert ctx.caption == ["The \\textbf{caption}"]
    assert ctx.caption_labels == ["\\label{fig:x}"]


def test_table_separator_row_is_discarded():
    ctx = ParserContext(state=ParserState.TABLE, table=TableContext(alignments=["l"]))

    assert process_line(ctx, "|---|") == []
    assert ctx.state is ParserState.TABLE


def test_table_blank_line_closes_body():
    ctx = ParserContext(state=ParserState.TABLE, table=TableContext(alignments=["l"]))

    assert process_line(ctx, "") == ["\\bottomrule", "\\end{tabular}"]
    assert ctx.state is ParserState.TABLE_CAPTION


def test_table_caption_blank_line_drops_table():
    ctx = ParserContext(
        state=ParserState.TABLE_CAPTION,
        table=TableContext(alignments=["l"]),
        caption=["Cap"],
    )

    assert process_line(ctx, "") == ["\\caption{Cap}", "\\end{table}", ""]
    assert ctx.state is ParserState.TEXT
    assert ctx.table is None


def test_table_state_without_table_raises():
    ctx = ParserContext(state=ParserState.TABLE)

    with pytest.raises(UnknownStateError):
        process_line(ctx, "| x |")


def test_unknown_state_raises():
    ctx = ParserContext()
    ctx.state = "BOGUS"

    with pytest.raises(UnknownStateError, match="Error, unknown state BOGUS"):
        process_line(ctx, "text")


def test_quote_blank_line_closes_without_separator():
    ctx = ParserContext(state=ParserState.QUOTE)

    assert process_line(ctx, "") == ["\\end{displayquote}"]
    assert ctx.state is ParserState.TEXT


def test_quote_line_without_marker_is_kept():
    ctx = ParserContext(state=ParserState.QUOTE)

    assert process_line(ctx, "lazy line") == ["lazy line"]


def test_equation_lines_are_verbatim():
    ctx = ParserContext(state=ParserState.EQUATION)

    assert process_line(ctx, "a & b \\\\") == ["a & b \\\\"]
    assert process_line(ctx, "$$") == ["\\end{equation*}"]
    assert ctx.state is ParserState.TEXT


def test_close_open_blocks_in_text_emits_nothing():
    ctx = ParserContext()

    assert close_open_blocks(ctx) == []


def test_close_open_blocks_closes_numbered_equation_with_warning():
    ctx = ParserContext(state=ParserState.NUMBERED_EQUATION)
    warnings: list[str] = []

    assert close_open_blocks(ctx, warn=warnings.append) == ["\\end{equation}"]
    assert ctx.state is ParserState.TEXT
    assert warnings == ["Warning: input ended inside an unterminated numbered_equation block"]


def test_close_open_blocks_closes_table_and_caption():
    ctx = ParserContext(state=ParserState.TABLE, table=TableContext(alignments=["l"]))

    assert close_open_blocks(ctx) == [
        "\\bottomrule",
        "\\end{tabular}",
        "\\caption{}",
        "\\end{table}",
        "",
    ]


def test_close_open_blocks_does_not_warn_for_blank_terminated_blocks():
    ctx = ParserContext(state=ParserState.FOOTNOTE)
    warnings: list[str] = []

    assert close_open_blocks(ctx, warn=warnings.append) == ["}", ""]
    assert warnings == []


@pytest.mark.parametrize("line", [" |figure", " |literal", " | A | B |"])
def test_pipe_blocks_must_start_at_first_column(line: str):
    ctx = ParserContext()

    assert process_line(ctx, line) == [line]
    assert ctx.state is ParserState.TEXT


@pytest.mark.parametrize(
    "line, state",
    [("|figure  ", ParserState.FIGURE), ("|literal\t", ParserState.LITERAL)],
)
def test_pipe_markers_tolerate_trailing_whitespace(line: str, state: ParserState):
    ctx = ParserContext()

    process_line(ctx, line)

    assert ctx.state is state
