import pytest

from textwrap import dedent


@pytest.fixture
def kombu_cod_recipe() -> str:
    return dedent(
        """
        # Miso Cod with Kombu Broth

        ## INGREDIENTS

        ### Miso Cure
        - White miso: 60g
        - Mirin: 15ml

        ### Broth
        - Kombu: 10g
        - Salt & pepper

        ## METHOD BY TIMELINE

        ### T – 48 HOURS

        #### Miso Cure

        **1. Make the cure**
        Whisk the miso and mirin together.

        **2. Coat the cod**
        Coat the fillets and refrigerate.

        ### T – 1 HOUR

        **1. Start kombu water**
        Soak the kombu in cold water.

        ### SERVICE

        1. Plate the fish
        2. Pour the broth around it

        ### Timeline summary

        - T-48h: cure the cod
        """
    ).strip()


@pytest.fixture
def section_based_recipe() -> str:
    return dedent(
        """
        # Silken Tofu

        ## Component 1 — Dressing

        ### Ingredients

        | Ingredient | Amount | Notes |
        |------------|--------|-------|
        | soy sauce  | 2 tbsp | Light |
        | sesame oil | 1 tsp  |       |

        ### Method (T – 24 h)

        1. Whisk the dressing.
        2. Chill overnight.

        ## Component 2 — Tofu

        ### Ingredients

        | Ingredient  | Amount | Notes   |
        |-------------|--------|---------|
        | silken tofu | 150g   | Drained |

        ### Method (Day-of)

        1. Drain the tofu.

        ## Plating

        ### Prep
        - Slice spring onions

        ### Assembly
        1. Place the tofu in a bowl.
        2. Spoon the dressing over.
        """
    ).strip()


@pytest.fixture
def simple_recipe() -> str:
    return dedent(
        """
        # Pancakes

        ## Ingredients

        **For the batter:**
        - 200g flour
        - 2 eggs

        ### Topping
        - Maple syrup

        ## Method

        1. Mix the batter.
        2. Fry the pancakes.
        """
    ).strip()
