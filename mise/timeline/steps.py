"""
Parsing of method steps within a timeline block.

A timeline block is the markdown under a single timeline marker heading. It
may be divided into components with ``#### <name>`` sub-headings and steps
may be written in several styles. The parsers here return step text with
markdown formatting removed but *not yet* HTML-escaped; callers escape steps
as they file them into a :py:data:`~mise.recipe.TimelineMap`.
"""

from typing import Callable, List, MutableMapping

import re

from mise.sanitize import escape_html

DEFAULT_COMPONENT = "Main"

TRAILING_SECTION = re.compile(r"\s*##\s+.*", re.DOTALL)
BOLD = re.compile(r"\*\*(.+?)\*\*")
ITALIC = re.compile(r"\*(.+?)\*")
ORDINAL_PREFIX = re.compile(r"^\d+\.\s*")
WHITESPACE = re.compile(r"\s+")

NUMBERED_ITEM = re.compile(r"^\d+\.\s+", re.MULTILINE)
BULLET_ITEM = re.compile(r"^[-*]\s+(.+)$", re.MULTILINE)

INLINE_BOLD_STEP = re.compile(r"\*\*\d+\.\s*([^*]+)\*\*")
LINE_BOLD_STEP = re.compile(r"^\*\*\d+\.\s*([^*\n]+)\*\*", re.MULTILINE)

COMPONENT_SUB_HEADING = re.compile(r"^#### ([^\n]+)$", re.MULTILINE)


def clean_step_text(text: str) -> str:
    """
    Remove markdown formatting from a step:

    * Any trailing ``##``-headed section (e.g. notes following the last step)
    * Bold and italic markers
    * A leading ``N.`` ordinal
    * Runs of whitespace (collapsed into single spaces)
    """
    text = TRAILING_SECTION.sub("", text)
    text = BOLD.sub(r"\1", text)
    text = ITALIC.sub(r"\1", text)
    text = text.replace("*", "")
    text = ORDINAL_PREFIX.sub("", text)
    text = WHITESPACE.sub(" ", text)
    return text.strip()


def _clean_all(steps: List[str]) -> List[str]:
    out = []
    for step in steps:
        step = clean_step_text(step)
        if step:
            out.append(step)
    return out


def parse_numbered_steps(content: str) -> List[str]:
    """
    Parse ``N. text`` list items, which may span several lines. Text preceding
    the first numbered item is not a step and is ignored.
    """
    parts = NUMBERED_ITEM.split(content)
    if len(parts) <= 1:
        return []
    return _clean_all(parts[1:])


def parse_bullet_steps(content: str) -> List[str]:
    """Parse ``- text`` (or ``* text``) list items."""
    return _clean_all(BULLET_ITEM.findall(content))


def parse_inline_bold_steps(content: str) -> List[str]:
    """
    Parse bold numbered step titles appearing anywhere, e.g.
    ``**1. Start kombu water**``.
    """
    return _clean_all(INLINE_BOLD_STEP.findall(content))


def parse_line_bold_steps(content: str) -> List[str]:
    """Parse bold numbered step titles only where they start a line."""
    return _clean_all(LINE_BOLD_STEP.findall(content))


STEP_PARSERS: List[Callable[[str], List[str]]] = [
    parse_inline_bold_steps,
    parse_line_bold_steps,
    parse_numbered_steps,
    parse_bullet_steps,
]
"""Step notations, in order of preference. The first yielding steps wins."""


def parse_steps(content: str) -> List[str]:
    """
    Parse steps using the first notation in :py:data:`STEP_PARSERS` which
    finds any.
    """
    for parser in STEP_PARSERS:
        steps = parser(content)
        if steps:
            return steps
    return []


def parse_timeline_content(
    content: str, components: MutableMapping[str, List[str]]
) -> None:
    """
    Parse the content of a single timeline block, appending HTML-escaped steps
    to ``components`` (a mapping from component name to step list), which is
    modified in place.

    ``#### <name>`` sub-headings start a new component. Steps before the first
    sub-heading belong to the ``Main`` component.
    """
    component = DEFAULT_COMPONENT

    # NB: re.split with a capture group alternates between body text (even
    # indices) and sub-heading names (odd indices).
    parts = COMPONENT_SUB_HEADING.split(content)
    for i, part in enumerate(parts):
        part = part.strip()
        if i % 2 == 1:
            component = part
            continue
        if not part:
            continue

        steps = parse_steps(part)
        if steps:
            components.setdefault(component, []).extend(
                escape_html(step) for step in steps
            )
