"""
Data model for recipes and meal snapshots.

Recipes are described by :py:class:`RecipeDocument` objects: validated
frontmatter plus the markdown body. Extraction produces plain mappings:

.. autodata:: ComponentMap

.. autodata:: TimelineMap

A meal aggregates several recipes into a :py:class:`MealSnapshot`, a
denormalised, point-in-time copy of the extracted data for each member recipe
(:py:class:`RecipeSnapshot`) along with a combined ingredient list
(:py:class:`AggregatedIngredient`) and the sorted set of timeline markers.

All snapshot types can be converted to and from their JSON representation
using ``to_json()`` and ``from_json()``.

.. autoclass:: RecipeDocument
    :members:

.. autoclass:: RecipeSnapshot
    :members:

.. autoclass:: MealSnapshot
    :members:

.. autoclass:: Meal
    :members:
"""

from typing import Any, Dict, List, Mapping, Optional

from dataclasses import dataclass, field, replace

from enum import Enum


ComponentMap = Dict[str, List[str]]
"""
An ordered mapping from component name (e.g. "Main" or "Miso Cure") to an
ordered list of HTML-escaped strings. Insertion order mirrors document order.
"""

TimelineMap = Dict[str, ComponentMap]
"""
An ordered mapping from canonical timeline marker (e.g. "T-24h", "Day-of" or
"Service") to a :py:data:`ComponentMap` of HTML-escaped step descriptions.
"""


class Category(Enum):
    main = "main"
    starter = "starter"
    dessert = "dessert"
    side = "side"
    drink = "drink"
    sauce = "sauce"


class Difficulty(Enum):
    easy = "easy"
    intermediate = "intermediate"
    advanced = "advanced"


@dataclass(frozen=True)
class RecipeDocument:
    """A recipe as stored: validated frontmatter plus its markdown body."""

    slug: str
    title: str
    category: Category
    difficulty: Difficulty
    serves: int
    active_time: str
    total_time: str
    tags: List[str] = field(default_factory=list)
    subtitle: Optional[str] = None

    markdown: str = ""
    """The markdown body, excluding the frontmatter block."""


@dataclass(frozen=True)
class RecipeMetadata:
    serves: int
    active_time: str
    total_time: str
    category: str
    difficulty: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "serves": self.serves,
            "active_time": self.active_time,
            "total_time": self.total_time,
            "category": self.category,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RecipeMetadata":
        return cls(
            serves=int(data["serves"]),
            active_time=data["active_time"],
            total_time=data["total_time"],
            category=data["category"],
            difficulty=data["difficulty"],
        )


@dataclass(frozen=True)
class RecipeSnapshot:
    """The extracted data for a single recipe embedded in a meal."""

    slug: str

    course_order: int
    """The 1-based position of this recipe within the meal."""

    title: str
    """The HTML-escaped recipe title."""

    subtitle: Optional[str]
    """The HTML-escaped recipe subtitle (if any)."""

    metadata: RecipeMetadata

    ingredients: ComponentMap

    timeline: TimelineMap

    is_deleted: bool = False
    """
    Set when the source recipe is deleted after the snapshot was taken. The
    snapshot keeps its copy of the data regardless.
    """

    @property
    def components(self) -> List[str]:
        """The ingredient component names, in document order."""
        return list(self.ingredients)

    def to_json(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "course_order": self.course_order,
            "title": self.title,
            "subtitle": self.subtitle,
            "metadata": self.metadata.to_json(),
            "components": self.components,
            "ingredients": {
                component: list(items) for component, items in self.ingredients.items()
            },
            "timeline": {
                marker: {
                    component: list(steps) for component, steps in components.items()
                }
                for marker, components in self.timeline.items()
            },
            "is_deleted": self.is_deleted,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RecipeSnapshot":
        return cls(
            slug=data["slug"],
            course_order=int(data["course_order"]),
            title=data["title"],
            subtitle=data.get("subtitle"),
            metadata=RecipeMetadata.from_json(data["metadata"]),
            ingredients={
                component: list(items)
                for component, items in data.get("ingredients", {}).items()
            },
            timeline={
                marker: {
                    component: list(steps) for component, steps in components.items()
                }
                for marker, components in data.get("timeline", {}).items()
            },
            is_deleted=bool(data.get("is_deleted", False)),
        )


@dataclass(frozen=True)
class IngredientSource:
    """Where one occurrence of an aggregated ingredient came from."""

    component: str
    recipe: str
    """The title of the recipe listing the ingredient."""

    original_text: str
    """
    The ingredient text exactly as listed in that recipe. Serialised under
    the ``qty`` key.
    """

    def to_json(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "recipe": self.recipe,
            "qty": self.original_text,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "IngredientSource":
        return cls(
            component=data["component"],
            recipe=data["recipe"],
            original_text=data["qty"],
        )


@dataclass(frozen=True)
class AggregatedIngredient:
    """
    An ingredient string appearing (ignoring case) in one or more recipes of a
    meal. No quantity arithmetic is performed: "200g butter" and "100g butter"
    are distinct entries.
    """

    display: str
    """The first-seen spelling of the ingredient."""

    breakdown: List[IngredientSource]

    def to_json(self) -> Dict[str, Any]:
        return {
            "display": self.display,
            "breakdown": [source.to_json() for source in self.breakdown],
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "AggregatedIngredient":
        return cls(
            display=data["display"],
            breakdown=[IngredientSource.from_json(s) for s in data["breakdown"]],
        )


@dataclass(frozen=True)
class MealSnapshot:
    """The denormalised, read-optimised representation of a meal."""

    recipes: List[RecipeSnapshot]
    """The member recipes, in course order."""

    aggregated_ingredients: List[AggregatedIngredient]

    timeline_markers: List[str]
    """
    Every canonical timeline marker used by any member recipe, deduplicated
    and sorted chronologically (furthest from service first).
    """

    last_snapshot_at: str
    """ISO 8601 timestamp of when this snapshot was generated."""

    @property
    def recipe_slugs(self) -> List[str]:
        return [recipe.slug for recipe in self.recipes]

    def to_json(self) -> Dict[str, Any]:
        return {
            "recipes": [recipe.to_json() for recipe in self.recipes],
            "aggregated_ingredients": [
                ingredient.to_json() for ingredient in self.aggregated_ingredients
            ],
            "timeline_markers": list(self.timeline_markers),
            "last_snapshot_at": self.last_snapshot_at,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MealSnapshot":
        return cls(
            recipes=[RecipeSnapshot.from_json(r) for r in data["recipes"]],
            aggregated_ingredients=[
                AggregatedIngredient.from_json(i)
                for i in data.get("aggregated_ingredients", [])
            ],
            timeline_markers=list(data.get("timeline_markers", [])),
            last_snapshot_at=data["last_snapshot_at"],
        )


@dataclass(frozen=True)
class Meal:
    """A stored meal: user-facing details plus its latest snapshot."""

    slug: str
    title: str
    snapshot: MealSnapshot
    description: Optional[str] = None

    is_stale: bool = False
    """
    Set when a member recipe changes after the snapshot was generated. Stale
    snapshots are never silently regenerated; they must be refreshed.
    """

    def with_snapshot(self, snapshot: MealSnapshot, is_stale: bool = False) -> "Meal":
        return replace(self, snapshot=snapshot, is_stale=is_stale)
