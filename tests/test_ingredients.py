import pytest

from textwrap import dedent

from mise.formats import RecipeFormat

from mise.ingredients import (
    extract_ingredients,
    parse_ingredient_table,
    parse_kombu_cod_ingredients,
    parse_section_based_ingredients,
    parse_simple_ingredients,
    INGREDIENT_PARSERS,
)


def test_every_format_has_a_parser() -> None:
    assert set(INGREDIENT_PARSERS) == set(RecipeFormat)


@pytest.mark.parametrize(
    "markdown",
    [
        "## INGREDIENTS\n- 200g butter\n\n## METHOD BY TIMELINE\n",
        "## Component 1 — Main\n\n### Ingredients\n\n- 200g butter\n",
        "## Ingredients\n- 200g butter\n",
    ],
)
def test_butter_in_every_format(markdown: str) -> None:
    assert extract_ingredients(markdown) == {"Main": ["200g butter"]}


class TestKombuCod:
    def test_example(self, kombu_cod_recipe: str) -> None:
        assert extract_ingredients(kombu_cod_recipe) == {
            "Miso Cure": ["White miso: 60g", "Mirin: 15ml"],
            "Broth": ["Kombu: 10g", "Salt &amp; pepper"],
        }

    def test_no_section(self) -> None:
        assert parse_kombu_cod_ingredients("## Ingredients\n- a\n") == {}

    def test_default_component_and_asterisks(self) -> None:
        assert parse_kombu_cod_ingredients(
            "## INGREDIENTS\n* salt\n\n### Sauce\n* soy\n"
        ) == {"Main": ["salt"], "Sauce": ["soy"]}

    def test_section_ends_at_next_heading(self) -> None:
        assert parse_kombu_cod_ingredients(
            "## INGREDIENTS\n- salt\n## METHOD BY TIMELINE\n- not an ingredient\n"
        ) == {"Main": ["salt"]}

    def test_empty_components_dropped(self) -> None:
        markdown = "## INGREDIENTS\n### Empty\n### Full\n- a\n"
        assert parse_kombu_cod_ingredients(markdown) == {"Full": ["a"]}


class TestIngredientTable:
    def test_table(self) -> None:
        table = dedent(
            """
            | Ingredient   | Amount | Notes   |
            |--------------|--------|---------|
            | silken tofu  | 150g   | Drained |
            | soy sauce    | 1 tbsp |         |
            """
        )
        assert parse_ingredient_table(table) == [
            "150g silken tofu, drained",
            "1 tbsp soy sauce",
        ]

    def test_alignment_separator(self) -> None:
        table = "| Item | Qty |\n|:---|---:|\n| salt | pinch |\n"
        assert parse_ingredient_table(table) == ["pinch salt"]

    def test_header_without_separator(self) -> None:
        table = "| Ingredients | Amount |\n| salt | pinch |\n"
        assert parse_ingredient_table(table) == ["pinch salt"]

    def test_escaped(self) -> None:
        assert parse_ingredient_table("| <b>salt</b> | 1g |\n") == [
            "1g &lt;b&gt;salt&lt;/b&gt;"
        ]

    def test_empty(self) -> None:
        assert parse_ingredient_table("") == []
        assert parse_ingredient_table("- not a table\n") == []


class TestSectionBased:
    def test_example(self, section_based_recipe: str) -> None:
        assert extract_ingredients(section_based_recipe) == {
            "Dressing": ["2 tbsp soy sauce, light", "1 tsp sesame oil"],
            "Tofu": ["150g silken tofu, drained"],
        }

    def test_component_without_ingredients(self) -> None:
        assert (
            parse_section_based_ingredients(
                "## Component 1 — Garnish\n\n### Method (Service)\n1. Garnish\n"
            )
            == {}
        )


class TestSimple:
    def test_example(self, simple_recipe: str) -> None:
        assert extract_ingredients(simple_recipe) == {
            "For the batter": ["200g flour", "2 eggs"],
            "Topping": ["Maple syrup"],
        }

    def test_case_insensitive_heading(self) -> None:
        assert parse_simple_ingredients("## INGREDIENTS\n- salt\n") == {
            "Main": ["salt"]
        }

    def test_main_then_components(self) -> None:
        assert parse_simple_ingredients(
            "## Ingredients\n- salt\n\n**Sauce**\n- soy\n\n## Method\n- not me\n"
        ) == {"Main": ["salt"], "Sauce": ["soy"]}

    def test_no_section(self) -> None:
        assert parse_simple_ingredients("# Title\n\nSome text.\n") == {}


def test_explicit_format_overrides_detection(simple_recipe: str) -> None:
    assert extract_ingredients(simple_recipe, RecipeFormat.kombu_cod) == {}
