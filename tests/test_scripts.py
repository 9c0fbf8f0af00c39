import pytest

import sys
import json
import logging

from pathlib import Path

from textwrap import dedent

from typing import Callable, Iterator, List

from mise.scripts import mise_lint, mise_render, mise_snapshot


RECIPE = dedent(
    """
    ---
    title: Miso Soup
    category: starter
    difficulty: easy
    serves: 2
    active_time: 10 min
    total_time: 15 min
    tags: [soup]
    ---

    ## Ingredients
    - 1 tbsp miso
    - 500ml dashi

    ## Method
    1. Warm the dashi.
    2. Whisk in the miso.
    """
).lstrip()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger("mise")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def run(
    monkeypatch: pytest.MonkeyPatch, main: Callable[[], None], args: List[str]
) -> int:
    monkeypatch.setattr(sys, "argv", ["prog"] + args)
    try:
        main()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    return 0


class TestRender:
    def test_default_output(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text(RECIPE)
        assert run(monkeypatch, mise_render.main, [str(recipe)]) == 0

        html = (tmp_path / "soup.html").read_text()
        assert html.startswith('<h2 id="ingredients">Ingredients</h2>')
        assert "<li>1 tbsp miso</li>" in html
        assert "title:" not in html

    def test_explicit_output(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text("Hello <script>x</script>")
        output = tmp_path / "out.html"
        assert run(monkeypatch, mise_render.main, [str(recipe), str(output)]) == 0
        assert output.read_text() == "<p>Hello &lt;script&gt;x&lt;/script&gt;</p>"


class TestLint:
    def test_clean(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text(RECIPE.replace("## Method", "## Method\n\n### Day of"))
        assert run(monkeypatch, mise_lint.main, [str(recipe)]) == 0
        assert capsys.readouterr().out == ""

    def test_warnings(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text(RECIPE)
        assert run(monkeypatch, mise_lint.main, [str(recipe)]) == 1
        out = capsys.readouterr().out
        assert out.startswith(f"{recipe}: Warning: ")
        assert out.rstrip().endswith("[default_timeline]")

    def test_ignore(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text(RECIPE)
        args = [str(recipe), "--ignore", "default_timeline"]
        assert run(monkeypatch, mise_lint.main, args) == 0
        assert capsys.readouterr().out == ""

    def test_line_numbers_include_frontmatter(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        recipe = tmp_path / "soup.md"
        recipe.write_text(RECIPE.replace("## Method", "## Method\n\n### T-2 weeks"))
        args = [str(recipe), "-i", "default_timeline"]
        assert run(monkeypatch, mise_lint.main, args) == 1
        assert capsys.readouterr().out.startswith(f"{recipe}:17: Warning: ")

    def test_invalid_frontmatter(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        recipe = tmp_path / "bad.md"
        recipe.write_text(RECIPE.replace("serves: 2", "serves: lots"))
        args = [str(recipe), "-i", "default_timeline"]
        assert run(monkeypatch, mise_lint.main, args) == 1
        out = capsys.readouterr().out
        assert out.startswith(f"{recipe}: Error: ")
        assert "serves" in out


class TestSnapshot:
    @pytest.fixture
    def recipes(self, tmp_path: Path) -> Path:
        (tmp_path / "soup.md").write_text(RECIPE)
        (tmp_path / "rice.md").write_text(
            RECIPE.replace("Miso Soup", "Rice").replace("1 tbsp miso", "300g rice")
        )
        return tmp_path

    def test_stdout(
        self,
        monkeypatch: pytest.MonkeyPatch,
        recipes: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        args = ["--recipes", str(recipes), "rice", "soup"]
        assert run(monkeypatch, mise_snapshot.main, args) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert [r["slug"] for r in snapshot["recipes"]] == ["rice", "soup"]
        assert [r["course_order"] for r in snapshot["recipes"]] == [1, 2]
        assert snapshot["timeline_markers"] == ["T-1h"]

        dashi = snapshot["aggregated_ingredients"][1]
        assert dashi["display"] == "500ml dashi"
        assert [s["recipe"] for s in dashi["breakdown"]] == ["Rice", "Miso Soup"]

    def test_environment_variable(
        self,
        monkeypatch: pytest.MonkeyPatch,
        recipes: Path,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setenv("MISE_RECIPES_DIR", str(recipes))
        output = tmp_path / "meal.json"
        assert run(monkeypatch, mise_snapshot.main, ["soup", "-o", str(output)]) == 0
        snapshot = json.loads(output.read_text())
        assert snapshot["recipes"][0]["title"] == "Miso Soup"

    def test_missing_recipe(
        self,
        monkeypatch: pytest.MonkeyPatch,
        recipes: Path,
        capsys: pytest.CaptureFixture,
    ) -> None:
        args = ["-r", str(recipes), "soup", "stew"]
        assert run(monkeypatch, mise_snapshot.main, args) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "stew" in captured.err
