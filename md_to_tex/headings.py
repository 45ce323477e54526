"""Heading recognition and rendering."""

from __future__ import annotations

from .config import TexConfig
from .constants import ANCHOR_PATTERN, HEADING_PATTERN
from .inline import escape_ampersands, transform_inline
from .models import Heading


def parse_heading(line: str) -> Heading | None:
    """Split a heading line into level, title, and anchor.

    The title may embed an anchor marker, ``[](#ref)`` or ``[]{#ref}``. The
    reference becomes the anchor and the text around the marker becomes the
    title.

    Args:
        line: A single line of markdown.

    Returns:
        Heading | None: The resolved heading, or None when the line is not a
            level 1-5 heading.

    Examples:
        parse_heading("### [](#sec-a) My Section")  # Heading(3, "My Section", "sec-a")
        parse_heading("## Title")  # Heading(2, "Title", "")
    """
    match = HEADING_PATTERN.match(line)
    if not match:
        return None

    level = len(match.group("marks"))
    text = match.group("text")

    anchor_match = ANCHOR_PATTERN.search(text)
    if anchor_match is None:
        return Heading(level=level, title=text.strip())

    anchor = anchor_match.group("ref")
    if anchor is None:
        anchor = anchor_match.group("braced_ref")
    title = text[: anchor_match.start()] + text[anchor_match.end() :]
    return Heading(level=level, title=title.strip(), anchor=anchor.strip())


def render_heading(heading: Heading, config: TexConfig | None = None) -> list[str]:
    """Render a heading as a sectioning command followed by its label.

    Level 1 is the document title and produces no output.

    Args:
        heading: Heading to render.
        config: Supplies the sectioning command for each level.

    Returns:
        list[str]: Zero or one output line.
    """
    if heading.level == 1:
        return []

    config = config or TexConfig()
    command = config.heading_commands[heading.level - 2]
    title = transform_inline(heading.title)
    return [f"\\{command}{{{title}}}\\label{{{escape_ampersands(heading.anchor)}}}"]
