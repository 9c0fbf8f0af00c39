"""
Splitting and parsing of the YAML frontmatter block at the start of a recipe
document.
"""

from typing import Any, Dict, Optional, Tuple

import re

import yaml

from mise.exceptions import FrontmatterError
from mise.formats import normalize_newlines


FRONTMATTER_RE = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)


def split_frontmatter(document: str) -> Tuple[Optional[str], str]:
    """
    Split a document into its frontmatter block (without the ``---``
    delimiters) and its body. Returns None in place of the frontmatter when
    the document does not start with a complete frontmatter block.

    Leading and trailing whitespace is removed from the body.
    """
    document = normalize_newlines(document).strip()
    match = FRONTMATTER_RE.match(document)
    if match is None:
        return (None, document)
    return (match.group(1), document[match.end() :].strip())


def parse_frontmatter(document: str) -> Tuple[Dict[str, Any], str]:
    """
    Parse the YAML frontmatter of a document, returning the frontmatter
    values and the markdown body.

    Raises :py:exc:`~mise.exceptions.FrontmatterError` if the frontmatter
    block is missing, is not valid YAML or is not a mapping.
    """
    frontmatter, body = split_frontmatter(document)
    if frontmatter is None:
        raise FrontmatterError("Document does not start with a frontmatter block")

    try:
        data = yaml.safe_load(frontmatter)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML in frontmatter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a mapping of fields to values")

    return (data, body)
