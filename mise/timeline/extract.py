"""
Timeline (method) extraction strategies.

Each strategy is a function taking a recipe's markdown and returning a
:py:data:`~mise.recipe.TimelineMap`, empty when the strategy does not apply.
:py:func:`extract_timeline` tries the dialect-specific strategy followed by
each of the :py:data:`FALLBACK_STRATEGIES` in turn, stopping at the first
non-empty result.
"""

from typing import Callable, List, Mapping, NamedTuple, Optional, Tuple

import re

import logging

from mise.formats import RecipeFormat, detect_recipe_format, normalize_newlines
from mise.recipe import ComponentMap, TimelineMap
from mise.sanitize import escape_html
from mise.timeline.markers import (
    DAY_OF,
    SERVICE,
    looks_like_timeline_marker,
    normalize_timeline_marker,
)
from mise.timeline.steps import (
    DEFAULT_COMPONENT,
    parse_bullet_steps,
    parse_numbered_steps,
    parse_timeline_content,
)

logger = logging.getLogger(__name__)


TimelineStrategy = Callable[[str], TimelineMap]

DEFAULT_MARKER = "T-1h"
"""The marker used for method steps in documents without any timeline."""


KOMBU_COD_METHOD_SECTION = re.compile(
    r"^## METHOD BY TIMELINE[ \t]*\n(.*?)(?=\n## |\Z)",
    re.MULTILINE | re.DOTALL | re.IGNORECASE,
)

MARKER_HEADING = re.compile(r"^### ([^\n]+)$", re.MULTILINE)

# Headings within a METHOD BY TIMELINE section which summarise rather than
# describe a stage.
NON_TIMELINE_HEADING = re.compile(
    r"timeline\s*summary|at\s+service\s+you\s+are", re.IGNORECASE
)

COMPONENT_SECTION = re.compile(
    r"^## Component \d+ [—–-] ([^\n]+)\n(.*?)(?=\n## |\Z)", re.MULTILINE | re.DOTALL
)

METHOD_SUB_SECTION = re.compile(
    r"^### Method\s*\(([^)]+)\)[ \t]*\n(.*?)(?=\n### |\Z)", re.MULTILINE | re.DOTALL
)

PLATING_SECTION = re.compile(
    r"^## Plating[ \t]*\n(.*?)(?=\n## |\Z)", re.MULTILINE | re.DOTALL
)
ASSEMBLY_SUB_SECTION = re.compile(
    r"^### Assembly[^\n]*\n(.*?)(?=\n### |\Z)", re.MULTILINE | re.DOTALL
)
PREP_SUB_SECTION = re.compile(
    r"^### Prep[^\n]*\n(.*?)(?=\n### |\Z)", re.MULTILINE | re.DOTALL
)

ANY_HEADING = re.compile(r"^###?\s+[^\n]*$", re.MULTILINE)

GENERIC_MARKER_HEADING = re.compile(r"^###\s+([^\n]+)$", re.MULTILINE)

INLINE_METHOD_SECTION = re.compile(
    r"^### Method\s*\(([^)]+)\)[ \t]*\n(.*?)(?=\n### |\n## |\Z)",
    re.MULTILINE | re.DOTALL,
)

SIMPLE_METHOD_SECTION = re.compile(
    r"^##\s+Method[ \t]*\n(.*?)(?=\n##\s|\Z)",
    re.MULTILINE | re.DOTALL | re.IGNORECASE,
)


def _drop_empty(timeline: TimelineMap) -> TimelineMap:
    out: TimelineMap = {}
    for marker, components in timeline.items():
        non_empty: ComponentMap = {
            component: steps for component, steps in components.items() if steps
        }
        if non_empty:
            out[marker] = non_empty
    return out


def _file_steps(
    timeline: TimelineMap, marker: str, component: str, steps: List[str]
) -> None:
    if steps:
        timeline.setdefault(marker, {}).setdefault(component, []).extend(
            escape_html(step) for step in steps
        )


def parse_kombu_cod_timeline(markdown: str) -> TimelineMap:
    """
    Parse a ``## METHOD BY TIMELINE`` section made up of ``### <marker>``
    blocks::

        ## METHOD BY TIMELINE

        ### T – 48 HOURS

        #### Miso Cure

        **1. Make the cure**
        Whisk together...
    """
    match = KOMBU_COD_METHOD_SECTION.search(markdown)
    if match is None:
        return {}

    timeline: TimelineMap = {}

    # NB: re.split with a capture group alternates between body text (even
    # indices) and heading text (odd indices).
    parts = MARKER_HEADING.split(match.group(1))
    for i in range(1, len(parts), 2):
        heading = parts[i].strip()
        content = parts[i + 1] if i + 1 < len(parts) else ""

        if NON_TIMELINE_HEADING.search(heading):
            continue
        if not looks_like_timeline_marker(heading):
            continue

        marker = normalize_timeline_marker(heading)
        parse_timeline_content(content, timeline.setdefault(marker, {}))

    return _drop_empty(timeline)


def parse_section_based_timeline(markdown: str) -> TimelineMap:
    """
    Parse ``## Component <N> — <name>`` sections containing one or more
    ``### Method (<marker>)`` sub-sections of numbered steps. Steps are filed
    under the component's name.

    A ``## Plating`` section contributes its ``### Assembly`` steps at
    ``Service`` and its ``### Prep`` list on the ``Day-of``.
    """
    timeline: TimelineMap = {}

    for component_match in COMPONENT_SECTION.finditer(markdown):
        component = component_match.group(1).strip()
        for method_match in METHOD_SUB_SECTION.finditer(component_match.group(2)):
            marker = normalize_timeline_marker(method_match.group(1))
            _file_steps(
                timeline,
                marker,
                component,
                parse_numbered_steps(method_match.group(2)),
            )

    plating = PLATING_SECTION.search(markdown)
    if plating is not None:
        assembly = ASSEMBLY_SUB_SECTION.search(plating.group(1))
        if assembly is not None:
            _file_steps(
                timeline, SERVICE, "Assembly", parse_numbered_steps(assembly.group(1))
            )

        prep = PREP_SUB_SECTION.search(plating.group(1))
        if prep is not None:
            _file_steps(
                timeline, DAY_OF, "Plating Prep", parse_bullet_steps(prep.group(1))
            )

    return _drop_empty(timeline)


def parse_generic_timeline(markdown: str) -> TimelineMap:
    """
    Fallback: treat any ``### <heading>`` which looks like a timeline marker
    (see :py:func:`~mise.timeline.markers.looks_like_timeline_marker`) as a
    timeline block running until the next ``##`` or ``###`` heading.
    """
    timeline: TimelineMap = {}

    for heading_match in GENERIC_MARKER_HEADING.finditer(markdown):
        heading = heading_match.group(1).strip()
        if not looks_like_timeline_marker(heading):
            continue

        start = heading_match.end()
        next_heading = ANY_HEADING.search(markdown, start + 1)
        end = next_heading.start() if next_heading is not None else len(markdown)

        marker = normalize_timeline_marker(heading)
        parse_timeline_content(markdown[start:end], timeline.setdefault(marker, {}))

    return _drop_empty(timeline)


def parse_inline_method_timeline(markdown: str) -> TimelineMap:
    """
    Fallback: find ``### Method (<marker>)`` headings anywhere in the document
    regardless of the surrounding structure. Steps are filed under ``Main``.
    """
    timeline: TimelineMap = {}

    for match in INLINE_METHOD_SECTION.finditer(markdown):
        marker = normalize_timeline_marker(match.group(1))
        _file_steps(
            timeline, marker, DEFAULT_COMPONENT, parse_numbered_steps(match.group(2))
        )

    return _drop_empty(timeline)


def parse_simple_method_as_default(markdown: str) -> TimelineMap:
    """
    Last resort: file every numbered step of a plain ``## Method`` section under
    :py:data:`DEFAULT_MARKER`.
    """
    match = SIMPLE_METHOD_SECTION.search(markdown)
    if match is None:
        return {}

    timeline: TimelineMap = {}
    steps = parse_numbered_steps(match.group(1))
    _file_steps(timeline, DEFAULT_MARKER, DEFAULT_COMPONENT, steps)
    return timeline


DIALECT_STRATEGIES: Mapping[RecipeFormat, Optional[TimelineStrategy]] = {
    RecipeFormat.kombu_cod: parse_kombu_cod_timeline,
    RecipeFormat.section_based: parse_section_based_timeline,
    RecipeFormat.simple: None,
}
"""The dialect-specific strategy for each format (simple recipes have none)."""

FALLBACK_STRATEGIES: List[TimelineStrategy] = [
    parse_generic_timeline,
    parse_inline_method_timeline,
    parse_simple_method_as_default,
]
"""Strategies tried, in order, when the dialect strategy finds nothing."""


def timeline_strategies(recipe_format: RecipeFormat) -> List[TimelineStrategy]:
    """The ordered list of strategies to try for a recipe of a given format."""
    dialect_strategy = DIALECT_STRATEGIES[recipe_format]
    if dialect_strategy is None:
        return list(FALLBACK_STRATEGIES)
    return [dialect_strategy] + FALLBACK_STRATEGIES


class TimelineExtraction(NamedTuple):
    strategy: Optional[str]
    """
    The name of the strategy function which produced the timeline, or None if
    no strategy found anything.
    """

    timeline: TimelineMap


def extract_timeline_with_strategy(
    markdown: str, recipe_format: Optional[RecipeFormat] = None
) -> TimelineExtraction:
    """
    Like :py:func:`extract_timeline` but also reports which strategy produced
    the result.
    """
    markdown = normalize_newlines(markdown)
    if recipe_format is None:
        recipe_format = detect_recipe_format(markdown)

    for strategy in timeline_strategies(recipe_format):
        timeline = strategy(markdown)
        if timeline:
            logger.debug(
                "Timeline for %s recipe found by %s",
                recipe_format.value,
                strategy.__name__,
            )
            return TimelineExtraction(strategy.__name__, timeline)

    logger.debug("No timeline found in %s recipe", recipe_format.value)
    return TimelineExtraction(None, {})


def extract_timeline(
    markdown: str, recipe_format: Optional[RecipeFormat] = None
) -> TimelineMap:
    """
    Extract the method steps of a recipe, organised by canonical timeline
    marker and then by component.

    Every key of the result is a canonical marker (see
    :py:mod:`mise.timeline.markers`) and every step is HTML-escaped. Returns
    an empty mapping if no method could be found.
    """
    return extract_timeline_with_strategy(markdown, recipe_format).timeline


__all__: Tuple[str, ...] = (
    "DEFAULT_MARKER",
    "DIALECT_STRATEGIES",
    "FALLBACK_STRATEGIES",
    "TimelineExtraction",
    "TimelineStrategy",
    "extract_timeline",
    "extract_timeline_with_strategy",
    "parse_generic_timeline",
    "parse_inline_method_timeline",
    "parse_kombu_cod_timeline",
    "parse_section_based_timeline",
    "parse_simple_method_as_default",
    "timeline_strategies",
)
