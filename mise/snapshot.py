"""
Assembly of meal snapshots.

A meal is an ordered list of recipes (its courses). Rather than re-parsing
every member recipe whenever a meal is viewed, a :py:class:`MealSnapshot` is
generated once: a denormalised copy of each recipe's extracted ingredients and
timeline along with a combined shopping list and the sorted set of timeline
markers used across the meal.

Snapshots are point-in-time copies. When a member recipe is edited the meals
containing it are flagged as stale (:py:func:`mark_meals_stale`) and must be
refreshed explicitly (:py:func:`refresh_meal`).

.. autofunction:: generate_meal_snapshot

.. autofunction:: refresh_meal_snapshot

.. autofunction:: refresh_meal

.. autofunction:: create_meal

.. autofunction:: update_meal

.. autofunction:: mark_recipe_deleted

.. autofunction:: mark_meals_stale

.. autofunction:: timeline_span
"""

from typing import Dict, Iterable, List, Optional, Tuple

from dataclasses import replace

from datetime import datetime, timezone

import logging

from mise.exceptions import MealNotFoundError, RecipeNotFoundError
from mise.ingredients import extract_ingredients
from mise.formats import detect_recipe_format
from mise.recipe import (
    AggregatedIngredient,
    ComponentMap,
    IngredientSource,
    Meal,
    MealSnapshot,
    RecipeDocument,
    RecipeMetadata,
    RecipeSnapshot,
)
from mise.sanitize import escape_html
from mise.storage.base import MealStore, RecipeStore
from mise.timeline import extract_timeline, sort_timeline_markers
from mise.validation import ensure_unique_meal_slug

logger = logging.getLogger(__name__)


SAME_DAY_MEAL = "Same-day meal"


def _timestamp(now: Optional[datetime]) -> str:
    if now is None:
        now = datetime.now(timezone.utc)
    return now.isoformat(timespec="seconds")


def snapshot_recipe(recipe: RecipeDocument, course_order: int) -> RecipeSnapshot:
    """Extract the data for a single recipe's entry in a meal snapshot."""
    recipe_format = detect_recipe_format(recipe.markdown)
    return RecipeSnapshot(
        slug=recipe.slug,
        course_order=course_order,
        title=escape_html(recipe.title),
        subtitle=escape_html(recipe.subtitle) if recipe.subtitle else None,
        metadata=RecipeMetadata(
            serves=recipe.serves,
            active_time=recipe.active_time,
            total_time=recipe.total_time,
            category=recipe.category.value,
            difficulty=recipe.difficulty.value,
        ),
        ingredients=extract_ingredients(recipe.markdown, recipe_format),
        timeline=extract_timeline(recipe.markdown, recipe_format),
    )


def aggregate_ingredients(
    ingredients: Iterable[Tuple[str, str, str]]
) -> List[AggregatedIngredient]:
    """
    Group ``(ingredient, component, recipe title)`` triples by ingredient
    text, ignoring case. The first-seen spelling is used for display and
    groups are given in order of first appearance.

    No quantity arithmetic is attempted: only ingredients with identical text
    (ignoring case) are grouped.
    """
    displays: Dict[str, str] = {}
    breakdowns: Dict[str, List[IngredientSource]] = {}
    for ingredient, component, recipe_title in ingredients:
        key = ingredient.lower()
        if key not in displays:
            displays[key] = ingredient
            breakdowns[key] = []
        breakdowns[key].append(IngredientSource(component, recipe_title, ingredient))

    return [
        AggregatedIngredient(display=displays[key], breakdown=breakdowns[key])
        for key in displays
    ]


def _flatten(
    ingredients: ComponentMap, recipe_title: str
) -> Iterable[Tuple[str, str, str]]:
    for component, items in ingredients.items():
        for item in items:
            yield (item, component, recipe_title)


def generate_meal_snapshot(
    store: RecipeStore,
    recipe_slugs: Iterable[str],
    now: Optional[datetime] = None,
) -> MealSnapshot:
    """
    Generate a snapshot of the meal consisting of the named recipes (in
    course order).

    Raises :py:exc:`~mise.exceptions.RecipeNotFoundError` naming the first
    slug which does not exist (or has been deleted); no partial snapshot is
    produced. Errors raised by the store are propagated unchanged. The store
    is only read from.

    Parameters
    ==========
    store : RecipeStore
        The store to load recipes from.
    recipe_slugs : [str, ...]
        The recipes making up the meal, in course order.
    now : datetime or None
        The time to record as the snapshot time. Defaults to the current UTC
        time.
    """
    recipes: List[RecipeSnapshot] = []
    flat_ingredients: List[Tuple[str, str, str]] = []
    markers: List[str] = []

    for course_order, slug in enumerate(recipe_slugs, start=1):
        recipe = store.get_recipe(slug)
        if recipe is None:
            raise RecipeNotFoundError(slug)

        recipe_snapshot = snapshot_recipe(recipe, course_order)
        recipes.append(recipe_snapshot)

        flat_ingredients.extend(_flatten(recipe_snapshot.ingredients, recipe.title))
        for marker in recipe_snapshot.timeline:
            if marker not in markers:
                markers.append(marker)

    logger.info(
        "Generated meal snapshot of %d recipe(s) spanning %d timeline marker(s)",
        len(recipes),
        len(markers),
    )

    return MealSnapshot(
        recipes=recipes,
        aggregated_ingredients=aggregate_ingredients(flat_ingredients),
        timeline_markers=sort_timeline_markers(markers),
        last_snapshot_at=_timestamp(now),
    )


def refresh_meal_snapshot(
    store: RecipeStore, snapshot: MealSnapshot, now: Optional[datetime] = None
) -> MealSnapshot:
    """
    Regenerate a snapshot from the current versions of its recipes. Recipes
    which no longer exist are dropped from the meal.
    """
    slugs = [slug for slug in snapshot.recipe_slugs if store.recipe_exists(slug)]
    dropped = len(snapshot.recipes) - len(slugs)
    if dropped:
        logger.info("Dropping %d deleted recipe(s) from refreshed meal", dropped)
    return generate_meal_snapshot(store, slugs, now)


def refresh_meal(
    recipe_store: RecipeStore,
    meal_store: MealStore,
    meal_slug: str,
    now: Optional[datetime] = None,
) -> Meal:
    """
    Refresh the snapshot of a stored meal (see
    :py:func:`refresh_meal_snapshot`), saving and returning the updated,
    no-longer-stale meal.

    Raises :py:exc:`~mise.exceptions.MealNotFoundError` if the meal does not
    exist. If snapshot generation fails the stored meal is left unchanged.
    """
    meal = meal_store.get_meal(meal_slug)
    if meal is None:
        raise MealNotFoundError(meal_slug)

    refreshed = meal.with_snapshot(
        refresh_meal_snapshot(recipe_store, meal.snapshot, now), is_stale=False
    )
    meal_store.save_meal(refreshed)
    return refreshed


def create_meal(
    recipe_store: RecipeStore,
    meal_store: MealStore,
    title: str,
    recipe_slugs: Iterable[str],
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Meal:
    """
    Create and save a new meal with a freshly generated snapshot and a unique
    slug derived from its title.
    """
    snapshot = generate_meal_snapshot(recipe_store, recipe_slugs, now)
    meal = Meal(
        slug=ensure_unique_meal_slug(title, meal_store.meal_exists),
        title=title,
        description=description,
        snapshot=snapshot,
    )
    meal_store.save_meal(meal)
    return meal


def update_meal(
    recipe_store: RecipeStore,
    meal_store: MealStore,
    meal_slug: str,
    recipe_slugs: Optional[Iterable[str]] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Meal:
    """
    Update a stored meal, saving and returning the result. Arguments left as
    None are unchanged.

    Giving ``recipe_slugs`` replaces the meal's recipes with a freshly
    generated snapshot, clearing any stale flag. An empty ``description``
    removes the description.

    Raises :py:exc:`~mise.exceptions.MealNotFoundError` if the meal does not
    exist. If snapshot generation fails the stored meal is left unchanged.
    """
    meal = meal_store.get_meal(meal_slug)
    if meal is None:
        raise MealNotFoundError(meal_slug)

    if recipe_slugs is not None:
        meal = meal.with_snapshot(
            generate_meal_snapshot(recipe_store, recipe_slugs, now), is_stale=False
        )
    if title is not None:
        meal = replace(meal, title=title.strip())
    if description is not None:
        meal = replace(meal, description=description.strip() or None)

    meal_store.save_meal(meal)
    return meal


def mark_recipe_deleted(snapshot: MealSnapshot, recipe_slug: str) -> MealSnapshot:
    """
    Return a copy of the snapshot in which the named recipe is flagged as
    deleted. The recipe's data is retained.
    """
    return replace(
        snapshot,
        recipes=[
            replace(recipe, is_deleted=True) if recipe.slug == recipe_slug else recipe
            for recipe in snapshot.recipes
        ],
    )


def mark_meals_stale(
    meal_store: MealStore, recipe_slug: str, deleted: bool = False
) -> List[Meal]:
    """
    Flag every meal containing the named recipe as stale, for example after
    the recipe has been edited. When ``deleted`` is True, the recipe is also
    flagged as deleted within each snapshot (see :py:func:`mark_recipe_deleted`).

    Returns the updated meals.
    """
    updated = []
    for meal in list(meal_store.iter_meals()):
        if recipe_slug not in meal.snapshot.recipe_slugs:
            continue

        snapshot = meal.snapshot
        if deleted:
            snapshot = mark_recipe_deleted(snapshot, recipe_slug)

        stale_meal = meal.with_snapshot(snapshot, is_stale=True)
        meal_store.save_meal(stale_meal)
        updated.append(stale_meal)

    logger.info(
        "Marked %d meal(s) containing %s as stale", len(updated), recipe_slug
    )
    return updated


def timeline_span(snapshot: MealSnapshot) -> str:
    """
    A short human-readable description of how far ahead a meal must be
    started, e.g. "Starts T-48h" or "Same-day meal".
    """
    if not snapshot.timeline_markers:
        return SAME_DAY_MEAL
    return f"Starts {snapshot.timeline_markers[0]}"
