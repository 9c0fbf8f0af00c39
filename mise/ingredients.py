"""
Ingredient extraction.

:py:func:`extract_ingredients` pulls a :py:data:`~mise.recipe.ComponentMap`
out of a recipe's markdown, using the parser matching the document's
:py:class:`~mise.formats.RecipeFormat`. Every ingredient string is
HTML-escaped and components without any ingredients are omitted.

Unexpected structure never causes an error: the worst case is an empty
mapping.

.. autofunction:: extract_ingredients
"""

from typing import Callable, Dict, List, Mapping, Optional

import re

import logging

from mise.formats import RecipeFormat, detect_recipe_format, normalize_newlines
from mise.recipe import ComponentMap
from mise.sanitize import escape_html

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT = "Main"
"""The component name used for ingredients listed before any sub-heading."""


KOMBU_COD_INGREDIENTS_SECTION = re.compile(
    r"^## INGREDIENTS[ \t]*\n(.*?)(?=\n## |\Z)", re.MULTILINE | re.DOTALL
)

SUB_HEADING = re.compile(r"^### (.+)$", re.MULTILINE)

LIST_ITEM = re.compile(r"^[-*]\s+(.+)$")

COMPONENT_SECTION = re.compile(
    r"^## Component \d+ [—–-] ([^\n]+)\n(.*?)(?=\n## |\Z)", re.MULTILINE | re.DOTALL
)

INGREDIENTS_SUB_SECTION = re.compile(
    r"^### Ingredients[ \t]*\n(.*?)(?=\n### |\Z)", re.MULTILINE | re.DOTALL
)

TABLE_SEPARATOR_CELL = re.compile(r"^:?-+:?$")

SIMPLE_INGREDIENTS_SECTION = re.compile(
    r"^##\s*Ingredients[ \t]*\n(.*?)(?=\n##\s|\Z)",
    re.MULTILINE | re.DOTALL | re.IGNORECASE,
)

SIMPLE_COMPONENT_HEADING = re.compile(r"^#{2,3}\s+(.+)$")

BOLD_COMPONENT_HEADING = re.compile(r"^\*\*([^*]+)\*\*\s*:?$")


def _drop_empty(ingredients: ComponentMap) -> ComponentMap:
    return {component: items for component, items in ingredients.items() if items}


def parse_kombu_cod_ingredients(markdown: str) -> ComponentMap:
    """
    Parse an ``## INGREDIENTS`` section in which ``### <name>`` sub-headings
    introduce named components and ingredients are given as list items, for
    example::

        ## INGREDIENTS

        ### Miso Cure
        - White miso: 60g
        - Mirin: 15ml
    """
    match = KOMBU_COD_INGREDIENTS_SECTION.search(markdown)
    if match is None:
        return {}

    ingredients: ComponentMap = {DEFAULT_COMPONENT: []}
    component = DEFAULT_COMPONENT

    # NB: re.split with a capture group alternates between body text (even
    # indices) and sub-heading names (odd indices).
    parts = SUB_HEADING.split(match.group(1))
    for i, part in enumerate(parts):
        if i % 2 == 1:
            component = part.strip()
            ingredients.setdefault(component, [])
            continue

        for line in part.split("\n"):
            item = LIST_ITEM.match(line.strip())
            if item is not None:
                ingredients[component].append(escape_html(item.group(1).strip()))

    return _drop_empty(ingredients)


def _split_table_row(line: str) -> List[str]:
    line = line.strip()
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|"):
        line = line[:-1]
    return [cell.strip() for cell in line.split("|")]


def _is_separator_row(cells: List[str]) -> bool:
    return all(TABLE_SEPARATOR_CELL.match(cell) for cell in cells if cell) and any(
        cells
    )


def parse_ingredient_table(table: str) -> List[str]:
    """
    Parse a markdown table of the form::

        | Ingredient   | Amount | Notes   |
        |--------------|--------|---------|
        | silken tofu  | 150g   | Drained |

    into a list of HTML-escaped strings of the form ``"{amount} {item}"`` or
    ``"{amount} {item}, {notes}"`` (e.g. ``"150g silken tofu, drained"``).
    Header and separator rows are skipped.
    """
    rows = [
        _split_table_row(line)
        for line in table.split("\n")
        if line.strip().startswith("|") or line.count("|") >= 2
    ]

    # The row preceding a separator row is a header
    header_rows = set()
    for i, cells in enumerate(rows):
        if _is_separator_row(cells) and i > 0:
            header_rows.add(i - 1)

    items = []
    for i, cells in enumerate(rows):
        if i in header_rows or _is_separator_row(cells) or len(cells) < 2:
            continue
        if cells[0].lower() in ("ingredient", "ingredients", "item"):
            continue

        item, amount = cells[0], cells[1]
        notes = cells[2] if len(cells) > 2 else ""
        if not item:
            continue

        combined = f"{amount} {item}".strip()
        if notes:
            combined += f", {notes.lower()}"
        items.append(escape_html(combined))

    return items


def parse_section_based_ingredients(markdown: str) -> ComponentMap:
    """
    Parse a document made up of ``## Component <N> — <name>`` sections, each
    of which may contain an ``### Ingredients`` sub-section holding a table
    (see :py:func:`parse_ingredient_table`) or, failing that, a plain list.
    """
    ingredients: ComponentMap = {}

    for match in COMPONENT_SECTION.finditer(markdown):
        component = match.group(1).strip()
        sub_section = INGREDIENTS_SUB_SECTION.search(match.group(2))
        if sub_section is None:
            continue

        items = parse_ingredient_table(sub_section.group(1))
        if not items:
            for line in sub_section.group(1).split("\n"):
                item = LIST_ITEM.match(line.strip())
                if item is not None:
                    items.append(escape_html(item.group(1).strip()))

        ingredients.setdefault(component, []).extend(items)

    return _drop_empty(ingredients)


def parse_simple_ingredients(markdown: str) -> ComponentMap:
    """
    Parse a (case-insensitive) ``## Ingredients`` section. Within the section,
    a heading or a line containing only bold text starts a new component::

        ## Ingredients

        **For the dressing:**
        - 2 tbsp olive oil
    """
    match = SIMPLE_INGREDIENTS_SECTION.search(markdown)
    if match is None:
        return {}

    ingredients: ComponentMap = {DEFAULT_COMPONENT: []}
    component = DEFAULT_COMPONENT

    for line in match.group(1).strip().split("\n"):
        line = line.strip()

        heading = SIMPLE_COMPONENT_HEADING.match(
            line
        ) or BOLD_COMPONENT_HEADING.match(line)
        if heading is not None:
            component = heading.group(1).strip().rstrip(":").strip()
            ingredients.setdefault(component, [])
            continue

        item = LIST_ITEM.match(line)
        if item is not None:
            ingredients[component].append(escape_html(item.group(1).strip()))

    return _drop_empty(ingredients)


INGREDIENT_PARSERS: Mapping[RecipeFormat, Callable[[str], ComponentMap]] = {
    RecipeFormat.kombu_cod: parse_kombu_cod_ingredients,
    RecipeFormat.section_based: parse_section_based_ingredients,
    RecipeFormat.simple: parse_simple_ingredients,
}
"""The ingredient parser for each recipe dialect."""


def extract_ingredients(
    markdown: str, recipe_format: Optional[RecipeFormat] = None
) -> ComponentMap:
    """
    Extract the ingredients, grouped by component, from a recipe's markdown.

    Parameters
    ==========
    markdown : str
        The recipe's markdown body.
    recipe_format : RecipeFormat or None
        The recipe's dialect. Detected automatically when not given.
    """
    markdown = normalize_newlines(markdown)
    if recipe_format is None:
        recipe_format = detect_recipe_format(markdown)

    ingredients: Dict[str, List[str]] = INGREDIENT_PARSERS[recipe_format](markdown)
    logger.debug(
        "Extracted %d ingredient component(s) from %s recipe",
        len(ingredients),
        recipe_format.value,
    )
    return ingredients
