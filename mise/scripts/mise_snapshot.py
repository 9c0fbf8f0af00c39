"""
The ``mise-snapshot`` command generates a meal snapshot from a directory of
recipe markdown files and prints it as JSON.

.. highlight:: bash

Usage::

    $ mise-snapshot [--recipes DIRECTORY] SLUG [...]

Each slug names a recipe file ``<slug>.md`` within the recipe directory. The
recipes are given in course order. The recipe directory may also be given by
setting the ``MISE_RECIPES_DIR`` environment variable and otherwise defaults
to the current directory.

If any recipe cannot be found (or is invalid) an error is printed, no
snapshot is produced and the exit status is 1.
"""

import os

import sys

import json

from argparse import ArgumentParser

from pathlib import Path

from mise.app_logging import configure_logging, verbosity_to_level

from mise.exceptions import MiseError

from mise.snapshot import generate_meal_snapshot

from mise.storage import DirectoryRecipeStore


RECIPES_DIR_ENVIRONMENT_VARIABLE = "MISE_RECIPES_DIR"


def main() -> None:
    parser = ArgumentParser(
        description="""
            Generate a meal snapshot from recipes in a directory.
        """,
    )

    parser.add_argument(
        "slug",
        nargs="+",
        help="""
            The slugs of the recipes making up the meal, in course order.
        """,
    )
    parser.add_argument(
        "--recipes",
        "-r",
        type=Path,
        default=Path(os.environ.get(RECIPES_DIR_ENVIRONMENT_VARIABLE, ".")),
        help=f"""
            The directory containing recipe markdown files. Defaults to the
            value of the {RECIPES_DIR_ENVIRONMENT_VARIABLE} environment variable
            or the current directory.
        """,
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="""
            Write the snapshot JSON to this file rather than stdout.
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

    store = DirectoryRecipeStore(args.recipes)
    try:
        snapshot = generate_meal_snapshot(store, args.slug)
    except MiseError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)

    output = json.dumps(snapshot.to_json(), indent=2, ensure_ascii=False)
    if args.output is None:
        print(output)
    else:
        with args.output.open("w", encoding="utf-8") as f:
            f.write(output + "\n")


if __name__ == "__main__":
    main()
