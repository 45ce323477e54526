"""Line-by-line conversion of markdown documents to LaTeX.

Conversion is a finite-state machine over block-level constructs. Each input
line is handed to the handler of the current `ParserState`, which emits zero
or more output lines and may move the `ParserContext` to another state.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from .config import ConfigError, TexConfig, validate_config
from .constants import (
    CODE_FENCE,
    CODE_FLOAT_PATTERN,
    COMMENT_LINE_PATTERN,
    EQUATION_FENCE,
    FIGURE_MARKER,
    FOOTNOTE_BODY_PATTERN,
    INLINE_CODE_LINE_PATTERN,
    LINK_LINE_PATTERN,
    LITERAL_MARKER,
    LOCAL_PAGE_PATTERN,
    NUMBERED_EQUATION_PATTERN,
    ORDERED_ITEM_PATTERN,
    QUOTE_PATTERN,
    UNORDERED_ITEM_PATTERN,
)
from .exceptions import ConversionError, LineTooLongError, UnknownStateError
from .figures import close_figure, collect_caption_line, open_figure
from .filesystem import safe_read
from .headings import parse_heading, render_heading
from .inline import CODE_LINE_SKIP, LINK_LINE_SKIP, escape_ampersands, transform_inline
from .models import CodeBlockContext, ConversionResult, ParserContext, ParserState
from .tables import (
    apply_table_config,
    close_table,
    close_table_body,
    is_config_row,
    is_separator_row,
    open_table,
    render_table_row,
)

LineHandler = Callable[[ParserContext, str, TexConfig], list[str]]


def _is_blank(line: str) -> bool:
    return not line.strip()


def _open_code_block(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    float_match = CODE_FLOAT_PATTERN.match(line)
    if float_match:
        code = CodeBlockContext(
            language=float_match.group("lang").strip(),
            label=float_match.group("label").strip(),
            caption=float_match.group("caption").strip(),
        )
        language = escape_ampersands(code.language)
        label = escape_ampersands(code.label)
        options = (
            f"[language={language},label={label},"
            f"caption={{{transform_inline(code.caption)}}},float]"
        )
    else:
        language = line[len(CODE_FENCE) :].strip()
        code = CodeBlockContext(language=language or None)
        options = f"[language={escape_ampersands(language)}]" if language else ""

    ctx.code = code
    ctx.state = ParserState.CODE
    return [f"\\begin{{{config.code_environment}}}{options}"]


def _process_text(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        return [""]

    heading = parse_heading(line)
    if heading is not None:
        ctx.headings.append(heading)
        return render_heading(heading, config)

    # Block markers starting with a pipe must sit at the start of the line
    if line.rstrip() == FIGURE_MARKER:
        ctx.state = ParserState.FIGURE
        return open_figure()

    if line.rstrip() == LITERAL_MARKER:
        ctx.state = ParserState.LITERAL
        return []

    if line.startswith("|"):
        ctx.table, preamble = open_table(line, config.default_alignment)
        ctx.state = ParserState.TABLE
        return preamble

    stripped = line.strip()
    if line.startswith(CODE_FENCE):
        return _open_code_block(ctx, line, config)

    if line.startswith("> "):
        ctx.state = ParserState.QUOTE
        return [f"\\begin{{{config.quote_environment}}}", transform_inline(line[2:])]

    item_match = UNORDERED_ITEM_PATTERN.match(line)
    if item_match:
        ctx.state = ParserState.UNORDERED_LIST
        return ["\\begin{itemize}", f"\\item {transform_inline(item_match.group('item'))}"]

    item_match = ORDERED_ITEM_PATTERN.match(line)
    if item_match:
        ctx.state = ParserState.ORDERED_LIST
        return ["\\begin{enumerate}", f"\\item {transform_inline(item_match.group('item'))}"]

    page_match = LOCAL_PAGE_PATTERN.match(stripped)
    if page_match:
        return [f"\\input{{{escape_ampersands(page_match.group('path'))}}}"]

    footnote_match = FOOTNOTE_BODY_PATTERN.match(stripped)
    if footnote_match:
        ctx.state = ParserState.FOOTNOTE
        return [
            f"\\footnotetext[{escape_ampersands(footnote_match.group('mark'))}]{{",
            transform_inline(footnote_match.group("body")),
        ]

    # Only the visible text of a link is kept; the destination is dropped
    link_match = LINK_LINE_PATTERN.match(line)
    if link_match:
        text = transform_inline(link_match.group("text"), skip=LINK_LINE_SKIP)
        trailing = transform_inline(link_match.group("trailing"), skip=LINK_LINE_SKIP)
        return [f"\\url{{{text}}}{trailing}"]

    if INLINE_CODE_LINE_PATTERN.match(line):
        return [transform_inline(line, skip=CODE_LINE_SKIP)]

    if stripped == EQUATION_FENCE:
        ctx.state = ParserState.EQUATION
        return ["\\begin{equation*}"]

    equation_match = NUMBERED_EQUATION_PATTERN.match(stripped)
    if equation_match:
        ctx.state = ParserState.NUMBERED_EQUATION
        label = escape_ampersands(equation_match.group("label").strip())
        return [f"\\begin{{equation}}\\label{{{label}}}"]

    if COMMENT_LINE_PATTERN.match(line):
        return []

    return [transform_inline(line)]


def _list_handler(environment: str, item_pattern: re.Pattern[str]) -> LineHandler:
    def process(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
        if _is_blank(line):
            ctx.state = ParserState.TEXT
            return [f"\\end{{{environment}}}", ""]

        item_match = item_pattern.match(line.strip())
        if item_match:
            return [f"\\item {transform_inline(item_match.group('item'))}"]
        # Continuation of the current item
        return [transform_inline(line.strip())]

    return process


def _process_quote(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.TEXT
        return [f"\\end{{{config.quote_environment}}}"]

    quote_match = QUOTE_PATTERN.match(line)
    text = quote_match.group("text") if quote_match else line
    return [transform_inline(text)]


def _process_code(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if line.rstrip() == CODE_FENCE:
        ctx.state = ParserState.TEXT
        ctx.code = None
        return [f"\\end{{{config.code_environment}}}"]
    return [line]


def _process_figure(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.FIGURE_CAPTION
        return []
    return [line]


def _process_figure_caption(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.TEXT
        return close_figure(ctx)
    collect_caption_line(ctx, line)
    return []


def _process_table(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if ctx.table is None:
        raise UnknownStateError(f"{ctx.state} without an open table")

    if _is_blank(line):
        ctx.state = ParserState.TABLE_CAPTION
        return close_table_body()

    if is_separator_row(line):
        return []

    if is_config_row(line):
        return apply_table_config(ctx.table, line)

    return render_table_row(ctx.table, line)


def _process_table_caption(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.TEXT
        ctx.table = None
        return close_table(ctx)
    collect_caption_line(ctx, line)
    return []


def _process_literal(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.TEXT
        return []
    return [line]


def _process_footnote(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
    if _is_blank(line):
        ctx.state = ParserState.TEXT
        return ["}", ""]
    return [transform_inline(line)]


def _equation_handler(environment: str) -> LineHandler:
    def process(ctx: ParserContext, line: str, config: TexConfig) -> list[str]:
        if line.strip() == EQUATION_FENCE:
            ctx.state = ParserState.TEXT
            return [f"\\end{{{environment}}}"]
        return [line]

    return process


_STATE_HANDLERS: dict[ParserState, LineHandler] = {
    ParserState.TEXT: _process_text,
    ParserState.ORDERED_LIST: _list_handler("enumerate", ORDERED_ITEM_PATTERN),
    ParserState.UNORDERED_LIST: _list_handler("itemize", UNORDERED_ITEM_PATTERN),
    ParserState.QUOTE: _process_quote,
    ParserState.CODE: _process_code,
    ParserState.FIGURE: _process_figure,
    ParserState.FIGURE_CAPTION: _process_figure_caption,
    ParserState.TABLE: _process_table,
    ParserState.TABLE_CAPTION: _process_table_caption,
    ParserState.LITERAL: _process_literal,
    ParserState.FOOTNOTE: _process_footnote,
    ParserState.EQUATION: _equation_handler("equation*"),
    ParserState.NUMBERED_EQUATION: _equation_handler("equation"),
}

# Blocks closed by a fence rather than a blank line
_FENCE_TERMINATORS = {
    ParserState.CODE: CODE_FENCE,
    ParserState.EQUATION: EQUATION_FENCE,
    ParserState.NUMBERED_EQUATION: EQUATION_FENCE,
}


def process_line(ctx: ParserContext, line: str, config: TexConfig | None = None) -> list[str]:
    """Feed one line through the state machine.

    Args:
        ctx: Parser context; its state and sub-contexts are updated in place.
        line: Input line without its terminator.
        config: Output configuration. Defaults to a new `TexConfig`.

    Returns:
        list[str]: Output lines emitted for this input line, possibly none.

    Raises:
        UnknownStateError: If `ctx.state` has no handler.

    Examples:
        ctx = ParserContext()
        process_line(ctx, "1. first")  # ["\\begin{enumerate}", "\\item first"]
        ctx.state  # ParserState.ORDERED_LIST
    """
    handler = _STATE_HANDLERS.get(ctx.state)
    if handler is None:
        raise UnknownStateError(ctx.state)
    return handler(ctx, line, config or TexConfig())


def close_open_blocks(
    ctx: ParserContext,
    config: TexConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> list[str]:
    """Close whatever block is still open when the input ends.

    Blocks are closed as though their terminator had been read, so lists and
    captions ending at the last line still produce balanced environments.

    Args:
        ctx: Parser context left by the last input line.
        config: Output configuration.
        warn: Optional callback notified when a fenced block was never closed.

    Returns:
        list[str]: Closing output lines.
    """
    if ctx.state in _FENCE_TERMINATORS and warn is not None:
        warn(f"Warning: input ended inside an unterminated {ctx.state.name.lower()} block")

    lines: list[str] = []
    while ctx.state is not ParserState.TEXT:
        terminator = _FENCE_TERMINATORS.get(ctx.state, "")
        lines.extend(process_line(ctx, terminator, config))
    return lines


def _convert(
    lines: Iterable[str],
    ctx: ParserContext,
    config: TexConfig,
    max_line_length: int,
    warn: Callable[[str], None] | None,
) -> Iterator[str]:
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if len(line) > max_line_length:
            raise LineTooLongError(line_number, max_line_length)
        yield from process_line(ctx, line, config)
    yield from close_open_blocks(ctx, config, warn)


def convert_lines(
    lines: Iterable[str],
    config: TexConfig | None = None,
    max_line_length: int | None = None,
    warn: Callable[[str], None] | None = None,
) -> Iterator[str]:
    """Stream LaTeX output lines for an iterable of markdown lines.

    Args:
        lines: Markdown lines, with or without line terminators.
        config: Output configuration. Defaults to a new `TexConfig`.
        max_line_length: Optional override for the maximum line length.
        warn: Optional callback for non-fatal diagnostics.

    Yields:
        str: LaTeX lines without terminators.

    Raises:
        ConfigError: If the configuration fails validation.
        LineTooLongError: If an input line exceeds the maximum length.
        UnknownStateError: If the state machine reaches an unhandled state.
    """
    config = config or TexConfig()
    validate_config(config)
    limit = config.max_line_length if max_line_length is None else max_line_length
    return _convert(lines, ParserContext(), config, limit, warn)


def convert_markdown(
    content: str,
    max_line_length: int | None = None,
    config: TexConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> ConversionResult:
    """Convert a markdown document held in memory.

    Args:
        content: The markdown content to convert.
        max_line_length: Optional override for the maximum allowed line length
            (excluding line endings).
        config: Configuration controlling the output. Defaults to a new
            `TexConfig` when omitted.
        warn: Optional callback for non-fatal diagnostics.

    Returns:
        ConversionResult: Output lines and the headings encountered.

    Raises:
        ConfigError: If the configuration fails validation.
        LineTooLongError: If a line exceeds `max_line_length`.
        UnknownStateError: If the state machine reaches an unhandled state.

    Examples:
        convert_markdown("## Intro\\n\\nSome *bold* text.\\n").lines
    """
    config = config or TexConfig()
    validate_config(config)
    limit = config.max_line_length if max_line_length is None else max_line_length

    ctx = ParserContext()
    lines = list(_convert(content.splitlines(), ctx, config, limit, warn))
    return ConversionResult(lines=lines, headings=ctx.headings)


def render_tex(lines: Iterable[str]) -> str:
    """Join output lines into file content with a trailing newline."""
    return "".join(f"{line}\n" for line in lines)


class ConvertFileError(Exception):
    """Raised when converting a markdown file fails."""


def convert_file(
    filepath: Path,
    max_line_length: int | None = None,
    config: TexConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> ConversionResult:
    """Convert a markdown file to LaTeX.

    Args:
        filepath: Path to the markdown file to convert.
        max_line_length: Optional override for the maximum allowed line length
            (excluding line endings).
        config: Configuration controlling the output; defaults to a new
            `TexConfig` when omitted.
        warn: Optional callback for non-fatal diagnostics.

    Returns:
        ConversionResult: Output lines and the headings encountered.

    Raises:
        ConvertFileError: If configuration is invalid, conversion fails, or the
            file cannot be read or decoded.

    Examples:
        result = convert_file(Path("content.md"), 120, config)
    """
    config = config or TexConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ConvertFileError(str(error)) from error

    effective_max_line_length = (
        config.max_line_length if max_line_length is None else max_line_length
    )
    if effective_max_line_length <= 0:
        raise ConvertFileError("`max_line_length` override must be a positive integer")

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ConvertFileError(error_message) from error
    except IOError as error:
        raise ConvertFileError(str(error)) from error

    try:
        return convert_markdown(content, effective_max_line_length, config, warn)
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise ConvertFileError(error_message) from error
    except ConversionError as error:
        error_message = f"{filepath}: {error}"
        raise ConvertFileError(error_message) from error
