"""
Validation of recipe frontmatter and generation of recipe and meal slugs.

.. autofunction:: validate_recipe_frontmatter

.. autofunction:: load_recipe_document

.. autofunction:: generate_slug

.. autofunction:: ensure_unique_slug

.. autofunction:: generate_meal_slug
"""

from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

import random
import re
import unicodedata
import uuid

from mise.exceptions import FieldError, RecipeValidationError
from mise.markdown.frontmatter import parse_frontmatter
from mise.recipe import Category, Difficulty, RecipeDocument


USER_SLUG_PREFIX = "user-"
"""Prefix given to slugs of recipes created by users."""

MEAL_SLUG_CHARS = "bcdfghjkmnpqrstvwxyz23456789"
"""
Characters used in the random suffix of meal slugs. Vowels are omitted so
that no words can be spelt and ambiguous characters (0/o, 1/l) are omitted.
"""

MEAL_SLUG_SUFFIX_LENGTH = 6

NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


class ValidationResult(NamedTuple):
    valid: bool

    data: Optional[Dict[str, Any]]
    """The trimmed and normalised frontmatter when valid, otherwise None."""

    errors: List[FieldError]


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_recipe_frontmatter(data: Mapping[str, Any]) -> ValidationResult:
    """
    Validate the frontmatter fields of a recipe. Never raises: all problems
    are reported in the returned :py:class:`ValidationResult`.

    Required fields are ``title``, ``category``, ``difficulty``,
    ``active_time``, ``total_time``, ``serves`` and ``tags``. A ``subtitle``
    may optionally be given.
    """
    errors = []

    if not _is_non_empty_string(data.get("title")):
        errors.append(FieldError("title", "Title must be a non-empty string"))

    categories = [c.value for c in Category]
    if data.get("category") not in categories:
        errors.append(
            FieldError("category", f"Category must be one of: {', '.join(categories)}")
        )

    difficulties = [d.value for d in Difficulty]
    if data.get("difficulty") not in difficulties:
        errors.append(
            FieldError(
                "difficulty", f"Difficulty must be one of: {', '.join(difficulties)}"
            )
        )

    if not _is_non_empty_string(data.get("active_time")):
        errors.append(
            FieldError("active_time", "Active time must be a non-empty string")
        )

    if not _is_non_empty_string(data.get("total_time")):
        errors.append(FieldError("total_time", "Total time must be a non-empty string"))

    serves = data.get("serves")
    # NB: bool is a subclass of int
    if not isinstance(serves, int) or isinstance(serves, bool) or serves <= 0:
        errors.append(FieldError("serves", "Serves must be a positive integer"))

    tags = data.get("tags")
    if not isinstance(tags, list) or not tags:
        errors.append(FieldError("tags", "Tags must be a non-empty list"))
    elif not all(_is_non_empty_string(tag) for tag in tags):
        errors.append(FieldError("tags", "Tags must be a list of non-empty strings"))

    subtitle = data.get("subtitle")
    if subtitle is not None and not isinstance(subtitle, str):
        errors.append(FieldError("subtitle", "Subtitle must be a string if provided"))

    if errors:
        return ValidationResult(False, None, errors)

    return ValidationResult(
        True,
        {
            "title": data["title"].strip(),
            "subtitle": subtitle.strip() if subtitle is not None else None,
            "category": data["category"],
            "difficulty": data["difficulty"],
            "active_time": data["active_time"].strip(),
            "total_time": data["total_time"].strip(),
            "serves": serves,
            "tags": [tag.strip() for tag in tags],
        },
        [],
    )


def load_recipe_document(slug: str, document: str) -> RecipeDocument:
    """
    Parse and validate a complete recipe document (frontmatter and body).

    Raises :py:exc:`~mise.exceptions.FrontmatterError` if the frontmatter
    cannot be parsed or :py:exc:`~mise.exceptions.RecipeValidationError` if it
    is not valid.
    """
    frontmatter, body = parse_frontmatter(document)

    result = validate_recipe_frontmatter(frontmatter)
    if not result.valid or result.data is None:
        raise RecipeValidationError(slug, result.errors)

    data = result.data
    return RecipeDocument(
        slug=slug,
        title=data["title"],
        subtitle=data["subtitle"],
        category=Category(data["category"]),
        difficulty=Difficulty(data["difficulty"]),
        serves=data["serves"],
        active_time=data["active_time"],
        total_time=data["total_time"],
        tags=data["tags"],
        markdown=body,
    )


def generate_slug(title: str) -> str:
    """
    Generate a URL-safe slug for a user-created recipe from its title.

        >>> generate_slug("Crème Brûlée (for 4)")
        'user-creme-brulee-for-4'
    """
    ascii_title = (
        unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    )
    slug = NON_ALPHANUMERIC.sub("-", ascii_title.lower()).strip("-")
    return f"{USER_SLUG_PREFIX}{slug}"


def ensure_unique_slug(base_slug: str, exists: Callable[[str], bool]) -> str:
    """
    Return ``base_slug``, or if ``exists`` reports that it is taken, the first
    of ``base_slug-1``, ``base_slug-2``, ... which is not.
    """
    slug = base_slug
    counter = 1
    while exists(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def generate_meal_slug(title: str, rng: Optional[random.Random] = None) -> str:
    """
    Generate a slug for a meal: the title's slug (see :py:func:`generate_slug`)
    followed by a random six character suffix drawn from
    :py:data:`MEAL_SLUG_CHARS`.
    """
    choice = rng.choice if rng is not None else random.choice
    suffix = "".join(choice(MEAL_SLUG_CHARS) for _ in range(MEAL_SLUG_SUFFIX_LENGTH))
    return f"{generate_slug(title)}-{suffix}"


def ensure_unique_meal_slug(
    title: str,
    exists: Callable[[str], bool],
    max_retries: int = 5,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a meal slug not reported as taken by ``exists``, making up to
    ``max_retries`` attempts before falling back on a hexadecimal suffix.
    """
    for _ in range(max_retries):
        slug = generate_meal_slug(title, rng)
        if not exists(slug):
            return slug
    return f"{generate_slug(title)}-{uuid.uuid4().hex[:MEAL_SLUG_SUFFIX_LENGTH]}"
