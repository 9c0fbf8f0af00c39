"""
Recipe markdown dialect detection.

Recipes have been written in three historically-evolved markdown structures.
:py:func:`detect_recipe_format` classifies a document so that the matching
extraction strategy can be chosen.

.. autoclass:: RecipeFormat
    :members:

.. autofunction:: detect_recipe_format
"""

from enum import Enum

import re


class RecipeFormat(Enum):
    """The supported recipe markdown dialects."""

    kombu_cod = "kombu-cod"
    """
    An uppercase ``## INGREDIENTS`` section with ``###`` components and a
    ``## METHOD BY TIMELINE`` section with ``### <marker>`` blocks.
    """

    section_based = "section-based"
    """
    A series of ``## Component <N> — <name>`` sections, each with an
    ``### Ingredients`` table and a ``### Method (<marker>)`` list.
    """

    simple = "simple"
    """
    A ``## Ingredients`` list and (usually) a ``## Method`` list. Also used for
    anything not recognised as another dialect.
    """


KOMBU_COD_INGREDIENTS_HEADING = re.compile(r"^## INGREDIENTS[ \t]*$", re.MULTILINE)
KOMBU_COD_METHOD_HEADING = re.compile(r"^## METHOD BY TIMELINE[ \t]*$", re.MULTILINE)

# NB: Hyphen last so it is not read as a range
COMPONENT_HEADING = re.compile(r"^## Component \d+ [—–-]", re.MULTILINE)

SIMPLE_INGREDIENTS_HEADING = re.compile(
    r"^## Ingredients[ \t]*$", re.MULTILINE | re.IGNORECASE
)


def normalize_newlines(markdown: str) -> str:
    """Convert Windows and old-Mac line endings into ``\\n``."""
    return markdown.replace("\r\n", "\n").replace("\r", "\n")


def detect_recipe_format(markdown: str) -> RecipeFormat:
    """
    Classify a recipe's markdown body. Never fails: documents matching no
    dialect in particular are treated as :py:attr:`RecipeFormat.simple`.
    """
    markdown = normalize_newlines(markdown)

    if KOMBU_COD_INGREDIENTS_HEADING.search(
        markdown
    ) and KOMBU_COD_METHOD_HEADING.search(markdown):
        return RecipeFormat.kombu_cod

    if COMPONENT_HEADING.search(markdown):
        return RecipeFormat.section_based

    if SIMPLE_INGREDIENTS_HEADING.search(markdown):
        return RecipeFormat.simple

    return RecipeFormat.simple
