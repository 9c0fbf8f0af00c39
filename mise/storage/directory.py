"""
A recipe store backed by a directory of markdown files.

Every file with a ``.md`` extension directly within the directory is assumed
to be a recipe document (YAML frontmatter followed by a markdown body) whose
slug is its filename without the extension. For example ``miso-cod.md``
holds the recipe with slug ``miso-cod``.
"""

from typing import Iterator, Optional, Union

from pathlib import Path

import logging

from mise.recipe import RecipeDocument
from mise.storage.base import RecipeStore
from mise.validation import load_recipe_document

logger = logging.getLogger(__name__)


RECIPE_EXTENSION = ".md"


class DirectoryRecipeStore(RecipeStore):
    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def _path_for(self, slug: str) -> Optional[Path]:
        # Slugs never contain path separators; anything which would escape the
        # directory simply does not exist.
        if not slug or "/" in slug or "\\" in slug or slug.startswith("."):
            return None
        return self.directory / f"{slug}{RECIPE_EXTENSION}"

    def get_recipe(self, slug: str) -> Optional[RecipeDocument]:
        """
        Load and validate the named recipe. Returns None if the file does not
        exist.

        Raises :py:exc:`~mise.exceptions.FrontmatterError` or
        :py:exc:`~mise.exceptions.RecipeValidationError` if the file exists but
        is not a valid recipe.
        """
        path = self._path_for(slug)
        if path is None or not path.is_file():
            return None

        logger.debug("Loading recipe %s from %s", slug, path)
        return load_recipe_document(slug, path.read_text(encoding="utf-8"))

    def recipe_exists(self, slug: str) -> bool:
        path = self._path_for(slug)
        return path is not None and path.is_file()

    def iter_slugs(self) -> Iterator[str]:
        """Iterate over the slugs of every recipe file, in sorted order."""
        for path in sorted(self.directory.glob(f"*{RECIPE_EXTENSION}")):
            if path.is_file():
                yield path.stem
