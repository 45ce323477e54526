"""
md-to-tex: convert lightweight markdown into LaTeX fragments.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-to-tex convert content.md -o content.tex
    md-to-tex build -xxx

Library Usage:
    from pathlib import Path
    from md_to_tex import convert_markdown, render_tex

    content = Path("content.md").read_text()
    result = convert_markdown(content)
    tex = render_tex(result.lines)
"""

from .config import ConfigError, TexConfig
from .converter import (
    ConvertFileError,
    close_open_blocks,
    convert_file,
    convert_lines,
    convert_markdown,
    process_line,
    render_tex,
)
from .exceptions import ConversionError, LineTooLongError, UnknownStateError
from .headings import parse_heading, render_heading
from .inline import transform_inline
from .models import ConversionResult, Heading, ParserContext, ParserState

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "convert_markdown",
    "convert_lines",
    "convert_file",
    "process_line",
    "close_open_blocks",
    "render_tex",
    "transform_inline",
    "parse_heading",
    "render_heading",
    # Data models
    "ConversionResult",
    "Heading",
    "ParserContext",
    "ParserState",
    "TexConfig",
    # Exceptions
    "ConfigError",
    "ConversionError",
    "ConvertFileError",
    "LineTooLongError",
    "UnknownStateError",
    # Version
    "__version__",
]
