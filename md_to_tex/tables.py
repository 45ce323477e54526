"""Pipe-delimited tables rendered as booktabs tabular environments."""

from __future__ import annotations

from .constants import (
    LINE_EVERY_ROW,
    LINE_HEADER_ONLY,
    TABLE_ANNOTATION_PATTERN,
    TABLE_CONFIG_PATTERN,
    TABLE_SEPARATOR_PATTERN,
)
from .figures import render_caption
from .inline import transform_inline
from .models import ParserContext, TableContext


def split_row(line: str) -> list[str]:
    """Split a pipe-delimited row into trimmed cells.

    The empty fields produced by the leading and trailing pipes are dropped;
    empty cells between pipes are kept.

    Examples:
        split_row("| a | b |")  # ["a", "b"]
        split_row("|a||c|")  # ["a", "", "c"]
    """
    fields = line.strip().split("|")
    if fields and not fields[0].strip():
        fields = fields[1:]
    if fields and not fields[-1].strip():
        fields = fields[:-1]
    return [field.strip() for field in fields]


def parse_table_header(line: str, default_alignment: str = "l") -> tuple[TableContext, list[str]]:
    """Read column alignments and labels from a table header row.

    A header cell may carry an HTML comment holding its tabular column
    specifier, for example ``| <!-- c --> Count |``. Cells without one use
    `default_alignment`.

    Args:
        line: The header row.
        default_alignment: Column specifier for unannotated cells.

    Returns:
        tuple[TableContext, list[str]]: The table settings and the header
            labels with annotations removed.

    Examples:
        parse_table_header("| A | <!-- r --> B |")  # alignments ["l", "r"], labels ["A", "B"]
    """
    alignments: list[str] = []
    labels: list[str] = []
    for cell in split_row(line):
        annotation = TABLE_ANNOTATION_PATTERN.search(cell)
        alignment = annotation.group("spec").strip() if annotation else ""
        alignments.append(alignment or default_alignment)
        labels.append(TABLE_ANNOTATION_PATTERN.sub("", cell).strip())
    return TableContext(alignments=alignments), labels


def open_table(line: str, default_alignment: str = "l") -> tuple[TableContext, list[str]]:
    """Start a table from its header row.

    Returns:
        tuple[TableContext, list[str]]: The table settings and the preamble
            lines (table and tabular openers, top rule, bold header row).
    """
    table, labels = parse_table_header(line, default_alignment)
    header = " & ".join(f"\\textbf{{{transform_inline(label)}}}" for label in labels)
    return table, [
        "\\begin{table}",
        f"\\begin{{tabular}}{{{' '.join(table.alignments)}}}",
        "\\toprule",
        f"{header} \\\\",
    ]


def is_separator_row(line: str) -> bool:
    return bool(TABLE_SEPARATOR_PATTERN.match(line.strip()))


def is_config_row(line: str) -> bool:
    return bool(TABLE_CONFIG_PATTERN.match(line.strip()))


def apply_table_config(table: TableContext, line: str) -> list[str]:
    """Apply a ``|<!-- ... -->`` configuration row to the table.

    ``line every row`` draws a rule above every body row; ``line header
    only`` draws a single rule under the header. Other comments are ignored.
    """
    if LINE_EVERY_ROW in line:
        table.rule_every_row = True
        return []
    if LINE_HEADER_ONLY in line:
        table.rule_every_row = False
        return ["\\midrule"]
    return []


def render_table_row(table: TableContext, line: str) -> list[str]:
    """Render a body row; cell counts are not checked against the header."""
    cells = " & ".join(transform_inline(cell) for cell in split_row(line))
    row = f"{cells} \\\\"
    if table.rule_every_row:
        return ["\\midrule", row]
    return [row]


def close_table_body() -> list[str]:
    return ["\\bottomrule", "\\end{tabular}"]


def close_table(ctx: ParserContext) -> list[str]:
    return [*render_caption(ctx), "\\end{table}", ""]
