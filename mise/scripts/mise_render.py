"""
The ``mise-render`` command renders the markdown body of a recipe into a
sanitized HTML fragment.

.. highlight:: bash

Usage::

    $ mise-render RECIPE [OUTPUT_FILENAME]

If no output filename is given, the input filename with the suffix replaced
with '.html' is used. Any frontmatter block at the start of the recipe is not
rendered.
"""

from argparse import ArgumentParser

from pathlib import Path

from mise.app_logging import configure_logging, verbosity_to_level

from mise.markdown import render_markdown, split_frontmatter


def main() -> None:
    parser = ArgumentParser(
        description="""
            Render the body of a recipe markdown file into sanitized HTML.
        """,
    )

    parser.add_argument(
        "recipe",
        type=Path,
        help="""
            The filename of the recipe markdown file to render.
        """,
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="""
            The output filename for the generated HTML. Defaults to the input
            filename with the extension replaced with .html if no name is
            given.
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="""
            Produce more log output. May be given twice for debugging output.
        """,
    )

    args = parser.parse_args()
    configure_logging(verbosity_to_level(args.verbose))

    _frontmatter, body = split_frontmatter(args.recipe.read_text(encoding="utf-8"))
    html = render_markdown(body)

    output = args.output
    if output is None:
        output = args.recipe.with_suffix(".html")

    with output.open("w", encoding="utf-8") as f:
        f.write(html)


if __name__ == "__main__":
    main()
