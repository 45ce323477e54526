"""Data models for md-to-tex."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ParserState(Enum):
    """Block-level states of the line converter.

    Attributes:
        TEXT: Default state for regular paragraphs.
        ORDERED_LIST: Inside an ``enumerate`` environment.
        UNORDERED_LIST: Inside an ``itemize`` environment.
        QUOTE: Inside a block quote.
        CODE: Inside a fenced code block.
        FIGURE: Inside a figure body.
        FIGURE_CAPTION: Collecting a figure caption.
        TABLE: Inside a table body.
        TABLE_CAPTION: Collecting a table caption.
        LITERAL: Inside a raw passthrough block.
        FOOTNOTE: Inside a footnote body.
        EQUATION: Inside an unnumbered display equation.
        NUMBERED_EQUATION: Inside a labelled display equation.
    """

    TEXT = auto()
    ORDERED_LIST = auto()
    UNORDERED_LIST = auto()
    QUOTE = auto()
    CODE = auto()
    FIGURE = auto()
    FIGURE_CAPTION = auto()
    TABLE = auto()
    TABLE_CAPTION = auto()
    LITERAL = auto()
    FOOTNOTE = auto()
    EQUATION = auto()
    NUMBERED_EQUATION = auto()


@dataclass
class TableContext:
    """Per-table settings fixed when the header row is read.

    Attributes:
        alignments: One tabular column specifier per header cell.
        rule_every_row: Whether a ``\\midrule`` precedes every body row.
    """

    alignments: list[str] = field(default_factory=list)
    rule_every_row: bool = False


@dataclass
class CodeBlockContext:
    """Settings captured from an opening code fence.

    Attributes:
        language: Language tag following the fence, if any.
        label: Cross-reference label of a floating listing, if any.
        caption: Caption of a floating listing, if any.
    """

    language: str | None = None
    label: str | None = None
    caption: str | None = None


@dataclass
class Heading:
    """A heading line resolved into its parts.

    Attributes:
        level: Number of leading ``#`` characters (1-5).
        title: Title text with any anchor marker removed.
        anchor: Cross-reference identifier, empty when absent.
    """

    level: int
    title: str
    anchor: str = ""


@dataclass
class ParserContext:
    """Mutable conversion state for one document.

    Attributes:
        state: Current parser state.
        table: Active table settings while inside a table block.
        code: Active code fence settings while inside a code block.
        caption: Caption fragments collected for the open figure or table.
        caption_labels: Raw ``\\label`` lines collected alongside the caption.
        headings: Headings resolved so far, in document order.
    """

    state: ParserState = ParserState.TEXT
    table: TableContext | None = None
    code: CodeBlockContext | None = None
    caption: list[str] = field(default_factory=list)
    caption_labels: list[str] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)


@dataclass
class ConversionResult:
    """Structured result of converting a markdown document.

    Attributes:
        lines: Emitted LaTeX lines, without line terminators.
        headings: Headings resolved during conversion, in document order.
    """

    lines: list[str]
    headings: list[Heading]
