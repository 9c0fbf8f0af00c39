"""
Dictionary-backed stores, used in tests and by tools which load everything up
front.
"""

from typing import Dict, Iterable, Iterator, Optional, Set

from mise.recipe import Meal, RecipeDocument
from mise.storage.base import MealStore, RecipeStore


class InMemoryRecipeStore(RecipeStore):
    def __init__(self, recipes: Iterable[RecipeDocument] = ()) -> None:
        self._recipes: Dict[str, RecipeDocument] = {}
        self._deleted: Set[str] = set()
        for recipe in recipes:
            self.add_recipe(recipe)

    def add_recipe(self, recipe: RecipeDocument) -> None:
        """Add (or replace) a recipe, undeleting it if necessary."""
        self._recipes[recipe.slug] = recipe
        self._deleted.discard(recipe.slug)

    def delete_recipe(self, slug: str) -> None:
        """Soft-delete a recipe: it is kept but no longer returned."""
        if slug in self._recipes:
            self._deleted.add(slug)

    def get_recipe(self, slug: str) -> Optional[RecipeDocument]:
        if slug in self._deleted:
            return None
        return self._recipes.get(slug)


class InMemoryMealStore(MealStore):
    def __init__(self, meals: Iterable[Meal] = ()) -> None:
        self._meals: Dict[str, Meal] = {}
        self._deleted: Set[str] = set()
        for meal in meals:
            self.save_meal(meal)

    def delete_meal(self, slug: str) -> None:
        if slug in self._meals:
            self._deleted.add(slug)

    def get_meal(self, slug: str) -> Optional[Meal]:
        if slug in self._deleted:
            return None
        return self._meals.get(slug)

    def save_meal(self, meal: Meal) -> None:
        self._meals[meal.slug] = meal
        self._deleted.discard(meal.slug)

    def iter_meals(self) -> Iterator[Meal]:
        for slug, meal in list(self._meals.items()):
            if slug not in self._deleted:
                yield meal
