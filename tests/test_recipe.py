import pytest

import json

from mise.recipe import (
    AggregatedIngredient,
    IngredientSource,
    Meal,
    MealSnapshot,
    RecipeMetadata,
    RecipeSnapshot,
)


@pytest.fixture
def snapshot() -> MealSnapshot:
    return MealSnapshot(
        recipes=[
            RecipeSnapshot(
                slug="miso-cod",
                course_order=1,
                title="Miso Cod",
                subtitle=None,
                metadata=RecipeMetadata(
                    serves=2,
                    active_time="45 min",
                    total_time="2 days",
                    category="main",
                    difficulty="intermediate",
                ),
                ingredients={"Miso Cure": ["60g miso"], "Broth": ["10g kombu"]},
                timeline={"T-48h": {"Miso Cure": ["Make the cure"]}},
            ),
        ],
        aggregated_ingredients=[
            AggregatedIngredient(
                display="60g miso",
                breakdown=[IngredientSource("Miso Cure", "Miso Cod", "60g miso")],
            ),
        ],
        timeline_markers=["T-48h"],
        last_snapshot_at="2024-01-02T03:04:05+00:00",
    )


def test_components_in_order(snapshot: MealSnapshot) -> None:
    assert snapshot.recipes[0].components == ["Miso Cure", "Broth"]
    assert snapshot.recipe_slugs == ["miso-cod"]


def test_to_json(snapshot: MealSnapshot) -> None:
    assert snapshot.to_json() == {
        "recipes": [
            {
                "slug": "miso-cod",
                "course_order": 1,
                "title": "Miso Cod",
                "subtitle": None,
                "metadata": {
                    "serves": 2,
                    "active_time": "45 min",
                    "total_time": "2 days",
                    "category": "main",
                    "difficulty": "intermediate",
                },
                "components": ["Miso Cure", "Broth"],
                "ingredients": {"Miso Cure": ["60g miso"], "Broth": ["10g kombu"]},
                "timeline": {"T-48h": {"Miso Cure": ["Make the cure"]}},
                "is_deleted": False,
            }
        ],
        "aggregated_ingredients": [
            {
                "display": "60g miso",
                "breakdown": [
                    {"component": "Miso Cure", "recipe": "Miso Cod", "qty": "60g miso"}
                ],
            }
        ],
        "timeline_markers": ["T-48h"],
        "last_snapshot_at": "2024-01-02T03:04:05+00:00",
    }


def test_json_round_trip_through_text(snapshot: MealSnapshot) -> None:
    text = json.dumps(snapshot.to_json())
    assert MealSnapshot.from_json(json.loads(text)) == snapshot


def test_component_order_survives_json(snapshot: MealSnapshot) -> None:
    text = json.dumps(snapshot.to_json())
    loaded = MealSnapshot.from_json(json.loads(text))
    assert loaded.recipes[0].components == ["Miso Cure", "Broth"]


def test_meal_with_snapshot(snapshot: MealSnapshot) -> None:
    meal = Meal(slug="dinner", title="Dinner", snapshot=snapshot, is_stale=True)
    refreshed = meal.with_snapshot(snapshot)
    assert refreshed.is_stale is False
    assert refreshed.slug == "dinner"
    assert meal.is_stale is True
