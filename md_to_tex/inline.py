"""Inline span substitutions applied to a single line of text."""

from __future__ import annotations

import re
from collections.abc import Callable, Collection
from dataclasses import dataclass


@dataclass(frozen=True)
class InlineRule:
    """A named substitution applied to every match of `pattern` on a line.

    Attributes:
        name: Identifier used to skip the rule.
        pattern: Compiled pattern locating the span.
        replace: Callback building the replacement text from a match.
    """

    name: str
    pattern: re.Pattern[str]
    replace: Callable[[re.Match[str]], str]


def _wrap(command: str) -> Callable[[re.Match[str]], str]:
    def replace(match: re.Match[str]) -> str:
        return f"\\{command}{{{match.group('span')}}}"

    return replace


# Delimited spans are greedy: a span runs from the first delimiter on the line
# to the last one, so two spans sharing a delimiter merge into one.
INLINE_RULES: tuple[InlineRule, ...] = (
    InlineRule("ampersand", re.compile(r"&"), lambda match: "\\&"),
    InlineRule("comment", re.compile(r"<!--.*?-->"), lambda match: ""),
    InlineRule(
        "footnote_mark",
        re.compile(r"\[\^(?P<mark>[^\]]+)\]"),
        lambda match: f"\\footnotemark[{match.group('mark')}]",
    ),
    InlineRule("superscript", re.compile(r"\^(?P<span>.+)\^"), _wrap("textsuperscript")),
    InlineRule("bold", re.compile(r"\*(?P<span>.+)\*"), _wrap("textbf")),
    InlineRule("code", re.compile(r"`(?P<span>.+)`"), _wrap("texttt")),
    InlineRule(
        "single_quote",
        re.compile(r"'(?P<span>.+)'"),
        lambda match: f"`{match.group('span')}'",
    ),
    InlineRule(
        "double_quote",
        re.compile(r'"(?P<span>.+)"'),
        lambda match: f"``{match.group('span')}''",
    ),
    InlineRule(
        "emphasis",
        re.compile(r" _(?P<span>.+)_ "),
        lambda match: f" \\emph{{{match.group('span')}}} ",
    ),
)

RULE_NAMES = tuple(rule.name for rule in INLINE_RULES)

# Lines opening with an inline code span keep their quotes and punctuation.
CODE_LINE_SKIP = frozenset(RULE_NAMES) - {"ampersand", "code"}
# Link lines are emitted as-is apart from escaping.
LINK_LINE_SKIP = frozenset(RULE_NAMES) - {"ampersand"}


def transform_inline(text: str, skip: Collection[str] = ()) -> str:
    r"""Apply the inline substitution pipeline to one line of text.

    Rules run in the order of `INLINE_RULES`. Ampersands are escaped first so
    that backslashes inserted by later rules are never escaped themselves.

    Args:
        text: A single line without its terminator.
        skip: Names of rules to leave out.

    Returns:
        str: The line with LaTeX inline commands substituted.

    Raises:
        ValueError: If `skip` names a rule that does not exist.

    Examples:
        transform_inline("*bold* & 'quoted'")  # "\\textbf{bold} \\& `quoted'"
        transform_inline("`x['k']`", skip=CODE_LINE_SKIP)  # "\\texttt{x['k']}"
    """
    unknown = set(skip) - set(RULE_NAMES)
    if unknown:
        raise ValueError(f"Unknown inline rules: {', '.join(sorted(unknown))}")

    for rule in INLINE_RULES:
        if rule.name in skip:
            continue
        text = rule.pattern.sub(rule.replace, text)
    return text


def escape_ampersands(text: str) -> str:
    """Escape ampersands in text copied verbatim into a command argument."""
    return transform_inline(text, skip=LINK_LINE_SKIP)
