"""Constants used across the md-to-tex package."""

from __future__ import annotations

import re

from .config import TexConfig

DEFAULT_CONFIG = TexConfig()
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length
MARKDOWN_EXTENSIONS = (".md", ".markdown")
TEX_SUFFIX = ".tex"

# Headings
HEADING_PATTERN = re.compile(r"^(?P<marks>#{1,5}) (?P<text>.*)$")
ANCHOR_PATTERN = re.compile(r"\[\]\(#(?P<ref>[^)]*)\)|\[\]\{#(?P<braced_ref>[^}]*)\}")

# Block starts
FIGURE_MARKER = "|figure"
LITERAL_MARKER = "|literal"
CODE_FENCE = "```"
CODE_FLOAT_PATTERN = re.compile(
    r"^```(?P<lang>[^<]+)<!--(?P<label>.+?)--><!--(?P<caption>.+)-->\s*$"
)
QUOTE_PATTERN = re.compile(r"^>\s?(?P<text>.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^[*+-] (?P<item>.*)$")
ORDERED_ITEM_PATTERN = re.compile(r"^[0-9]+\. (?P<item>.*)$")
LOCAL_PAGE_PATTERN = re.compile(r"^\[(?P<label>.+)\]\(\./(?P<path>.+)\.md\)$")
FOOTNOTE_BODY_PATTERN = re.compile(r"^\[\^(?P<mark>[^\]]+)\]:?\s*(?P<body>.+)$")
LINK_LINE_PATTERN = re.compile(r"^\[(?P<text>.*)\]\((?P<destination>.*)\)(?P<trailing>.*)$")
INLINE_CODE_LINE_PATTERN = re.compile(r"^`.*`")
EQUATION_FENCE = "$$"
NUMBERED_EQUATION_PATTERN = re.compile(r"^\$\$<!--(?P<label>.+)-->$")
COMMENT_LINE_PATTERN = re.compile(r"^\s*<!--.*-->\s*$")

# Tables
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|\s*:?-{3,}")
TABLE_CONFIG_PATTERN = re.compile(r"^\|\s*<!--")
TABLE_ANNOTATION_PATTERN = re.compile(r"<!--(?P<spec>.*)-->")
LINE_EVERY_ROW = "line every row"
LINE_HEADER_ONLY = "line header only"

# Captions
CAPTION_LABEL_PREFIX = "\\label{"

# Typesetting
MAX_TYPESET_PASSES = 3
