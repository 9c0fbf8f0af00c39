"""
The ``mise-lint`` command checks recipe markdown files for structural problems
which would cause ingredients or method steps to be lost or misfiled, such as
unrecognised timeline markers.

Usage::

    $ mise-lint FILENAME [...]

If any potential issues are found, explanations will be printed to stdout and
a non-zero exit status will be returned. Otherwise, no messages will be
produced and the exit status will be 0.

Invalid frontmatter is reported as an error.

In unusual cases, warnings may be produced for recipes which are actually
correct. If desired, you can suppress warnings of a specific kind using the
``--ignore`` or ``-i`` argument. Warning types are indicated in square
brackets in warning messages. This argument may be used multiple times to
ignore multiple kinds of warning.
"""

import sys

from argparse import ArgumentParser

from pathlib import Path

from mise.exceptions import MiseError

from mise.lint import check, LintKind

from mise.validation import load_recipe_document


def main() -> None:
    parser = ArgumentParser(
        description="""
            Check a recipe markdown file for possible mistakes.
        """,
    )

    parser.add_argument(
        "recipe",
        type=Path,
        nargs="*",
        help="""
            The filename of the recipe markdown file to check. Pass multiple
            filenames to check multiple files.
        """,
    )

    parser.add_argument(
        "--ignore",
        "-i",
        action="extend",
        default=[],
        nargs="+",
        choices=[k.name for k in LintKind],
        help="""
            Ignore warnings of a certain types.
        """,
    )

    args = parser.parse_args()

    failed = False
    for page in args.recipe:
        document = page.read_text(encoding="utf-8")
        try:
            load_recipe_document(page.stem, document)
        except MiseError as e:
            failed = True
            print(f"{page}: Error: {e}")

        # NB: The whole document is checked (rather than just the body) so
        # that reported line numbers match the file.
        for lint in check(document):
            if lint.kind.name not in args.ignore:
                failed = True
                location = f"{page}:{lint.line}" if lint.line is not None else f"{page}"
                print(f"{location}: Warning: {lint.description} [{lint.kind.name}]")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
