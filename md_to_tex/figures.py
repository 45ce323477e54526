"""Figure environments and the captions shared by figures and tables."""

from __future__ import annotations

from .constants import CAPTION_LABEL_PREFIX
from .inline import transform_inline
from .models import ParserContext


def open_figure() -> list[str]:
    return ["\\begin{figure}"]


def collect_caption_line(ctx: ParserContext, line: str) -> None:
    """Add one caption line to the context's caption buffer.

    Lines starting with ``\\label{`` are kept verbatim and emitted after the
    caption; any other line is inline-transformed and joined into the caption
    argument.

    Args:
        ctx: Parser context holding the caption buffer.
        line: Non-blank caption line.
    """
    if line.strip().startswith(CAPTION_LABEL_PREFIX):
        ctx.caption_labels.append(line.strip())
    else:
        ctx.caption.append(transform_inline(line.strip()))


def render_caption(ctx: ParserContext) -> list[str]:
    """Emit the buffered caption and labels, then clear the buffers."""
    lines = [f"\\caption{{{' '.join(ctx.caption)}}}", *ctx.caption_labels]
    ctx.caption = []
    ctx.caption_labels = []
    return lines


def close_figure(ctx: ParserContext) -> list[str]:
    return [*render_caption(ctx), "\\end{figure}", ""]
