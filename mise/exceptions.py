from typing import List, NamedTuple


class MiseError(Exception):
    """Base class for exceptions thrown by Mise."""


class FrontmatterError(MiseError):
    """Thrown when a recipe's frontmatter block is missing or malformed."""


class FieldError(NamedTuple):
    field: str
    """The name of the offending frontmatter field."""

    message: str
    """A human-readable explanation."""


class RecipeValidationError(MiseError):
    """Thrown when a recipe's frontmatter fails validation."""

    def __init__(self, slug: str, errors: List[FieldError]) -> None:
        super().__init__(
            f"Invalid recipe {slug!r}: "
            + "; ".join(f"{e.field}: {e.message}" for e in errors)
        )
        self.slug = slug
        self.errors = errors


class SnapshotGenerationError(MiseError):
    """Thrown when a meal snapshot cannot be generated."""


class RecipeNotFoundError(SnapshotGenerationError):
    """Thrown when a recipe named in a meal does not exist (or was deleted)."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Recipe not found: {slug}")
        self.slug = slug


class MealNotFoundError(MiseError):
    """Thrown when a meal does not exist (or was deleted)."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Meal not found: {slug}")
        self.slug = slug
