"""
Abstract interfaces to the stores holding recipes and meals.

The extraction and snapshot code never talks to a database directly: a store
is passed explicitly to every operation which needs one.
"""

from typing import Iterator, Optional

from abc import ABC, abstractmethod

from mise.recipe import Meal, RecipeDocument


class RecipeStore(ABC):
    """
    Read access to recipes.

    Implementations:

    * :py:class:`~mise.storage.memory.InMemoryRecipeStore`
    * :py:class:`~mise.storage.directory.DirectoryRecipeStore`
    """

    @abstractmethod
    def get_recipe(self, slug: str) -> Optional[RecipeDocument]:
        """
        Fetch a recipe by slug. Returns None if no such recipe exists or the
        recipe has been (soft) deleted.
        """

    def recipe_exists(self, slug: str) -> bool:
        """True if a non-deleted recipe with the given slug exists."""
        return self.get_recipe(slug) is not None


class MealStore(ABC):
    """Read and write access to meals."""

    @abstractmethod
    def get_meal(self, slug: str) -> Optional[Meal]:
        """Fetch a meal by slug. Returns None if it does not exist."""

    @abstractmethod
    def save_meal(self, meal: Meal) -> None:
        """Insert or replace the meal with the same slug."""

    @abstractmethod
    def iter_meals(self) -> Iterator[Meal]:
        """Iterate over every (non-deleted) meal."""

    def meal_exists(self, slug: str) -> bool:
        return self.get_meal(slug) is not None
