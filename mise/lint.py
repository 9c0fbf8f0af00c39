"""
A collection of (fairly basic) linting functions for sanity checking recipe
markdown.

Extraction never fails outright: unexpected structure results in missing
ingredients or steps. The checks here point out the likely culprits.

.. autofunction:: check

Linting errors are described by :py:class:`Lint` objects:

.. autoclass:: Lint
    :members:
    :undoc-members:

Different categories of linting errors are identified by members of the
following enumeration. Further details, however, are only given as
human-readable strings.

.. autoclass:: LintKind
    :members:
    :undoc-members:

"""

from typing import Iterable, Optional

from dataclasses import dataclass

from enum import Enum, auto

import re

from mise.formats import detect_recipe_format, normalize_newlines
from mise.ingredients import extract_ingredients
from mise.timeline.extract import (
    DEFAULT_MARKER,
    NON_TIMELINE_HEADING,
    extract_timeline_with_strategy,
    parse_simple_method_as_default,
)
from mise.timeline.markers import (
    SERVICE,
    is_recognized_timeline_marker,
    looks_like_timeline_marker,
)


class LintKind(Enum):
    """Kinds of lint."""

    unrecognized_timeline_marker = auto()
    no_ingredients = auto()
    no_timeline = auto()
    default_timeline = auto()


@dataclass(frozen=True)
class Lint:
    """
    A description a piece of lint found in a recipe.
    """

    kind: LintKind
    description: str

    line: Optional[int] = None
    """The (1-based) line number the lint relates to, if applicable."""


HEADING = re.compile(r"^###\s+(.+?)\s*$")
METHOD_HEADING = re.compile(r"^Method\s*\(([^)]*)\)", re.IGNORECASE)


def check_timeline_markers(markdown: str) -> Iterable[Lint]:
    """
    Check for headings which appear to name a timeline marker but which use an
    unrecognised notation, for example::

        ### T-2 weeks

    Steps under such headings are filed at service time, which is almost
    certainly not what was intended.
    """
    for line_number, line in enumerate(normalize_newlines(markdown).split("\n"), 1):
        heading_match = HEADING.match(line)
        if heading_match is None:
            continue
        heading = heading_match.group(1)

        method_match = METHOD_HEADING.match(heading)
        if method_match is not None:
            marker = method_match.group(1).strip()
        elif looks_like_timeline_marker(heading) and not NON_TIMELINE_HEADING.search(
            heading
        ):
            marker = heading
        else:
            continue

        if not is_recognized_timeline_marker(marker):
            yield Lint(
                kind=LintKind.unrecognized_timeline_marker,
                description=(
                    f"Timeline marker '{marker}' was not recognised "
                    f"and will be treated as '{SERVICE}'."
                ),
                line=line_number,
            )


def check_extraction(markdown: str) -> Iterable[Lint]:
    """
    Check that ingredients and a timeline could be extracted and that the
    timeline was not just a plain method filed under the default marker.
    """
    recipe_format = detect_recipe_format(markdown)

    if not extract_ingredients(markdown, recipe_format):
        yield Lint(
            kind=LintKind.no_ingredients,
            description=(
                f"No ingredients were found (recipe read as "
                f"{recipe_format.value} format)."
            ),
        )

    strategy, _timeline = extract_timeline_with_strategy(markdown, recipe_format)
    if strategy is None:
        yield Lint(
            kind=LintKind.no_timeline,
            description=(
                f"No method steps were found (recipe read as "
                f"{recipe_format.value} format)."
            ),
        )
    elif strategy == parse_simple_method_as_default.__name__:
        yield Lint(
            kind=LintKind.default_timeline,
            description=(
                f"The method has no timeline markers so all steps were "
                f"scheduled at {DEFAULT_MARKER}."
            ),
        )


def check(markdown: str) -> Iterable[Lint]:
    """
    Run all linting checks against a given recipe's markdown body.
    """
    yield from check_timeline_markers(markdown)
    yield from check_extraction(markdown)
