"""
Stores of recipes and meals.

.. autoclass:: RecipeStore
    :members:

.. autoclass:: MealStore
    :members:
"""

from mise.storage.base import RecipeStore, MealStore
from mise.storage.memory import InMemoryRecipeStore, InMemoryMealStore
from mise.storage.directory import DirectoryRecipeStore
