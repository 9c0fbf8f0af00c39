"""
Whitelist-based HTML sanitization.

Every HTML fragment produced by Mise passes through :py:func:`sanitize_html`
before it is stored or sent to a browser. Plain strings which are to be
embedded in HTML should instead be escaped with :py:func:`escape_html`.

.. autofunction:: sanitize_html

.. autofunction:: escape_html

.. autofunction:: is_safe_href
"""

from typing import FrozenSet, Mapping

import re

import html

from urllib.parse import urlsplit

import lxml.etree
import lxml.html


ALLOWED_TAGS: FrozenSet[str] = frozenset(
    [
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "p",
        "br",
        "hr",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "ul",
        "ol",
        "li",
        "a",
        "code",
        "pre",
        "blockquote",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
    ]
)
"""The only tags which may appear in sanitized output."""

ALLOWED_ATTRIBUTES: Mapping[str, FrozenSet[str]] = {
    "a": frozenset(["href"]),
    "h1": frozenset(["id"]),
    "h2": frozenset(["id"]),
    "h3": frozenset(["id"]),
    "h4": frozenset(["id"]),
    "h5": frozenset(["id"]),
    "h6": frozenset(["id"]),
}
"""The attributes permitted on each allowed tag. All others are removed."""

REMOVED_WITH_CONTENT_TAGS: FrozenSet[str] = frozenset(
    [
        "script",
        "style",
        "iframe",
        "frame",
        "frameset",
        "object",
        "embed",
        "applet",
        "noscript",
        "noembed",
        "noframes",
        "template",
        "textarea",
        "select",
        "title",
        "head",
        "meta",
        "link",
        "base",
        "svg",
        "math",
        "xmp",
        "plaintext",
    ]
)
"""
Disallowed tags whose content is removed along with them. Any other
disallowed tag is unwrapped, keeping its text.
"""

SAFE_URL_SCHEMES: FrozenSet[str] = frozenset(["http", "https"])

# Characters which cannot be represented in an lxml tree
_XML_INCOMPATIBLE_CHARS = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def escape_html(text: str) -> str:
    """
    Escape a plain text string (ampersands, angle brackets and quotes) for
    safe embedding in HTML.
    """
    return html.escape(text, quote=True)


def is_safe_href(url: str) -> bool:
    """
    Is the supplied link target safe to include in an ``href``? Fragments
    (``#...``), root-relative paths (``/...``) and absolute http(s) URLs are
    allowed. Everything else (including ``javascript:`` and ``data:`` URLs and
    protocol-relative ``//host`` URLs) is not.
    """
    url = url.strip()

    if url.startswith("#"):
        return True

    if url.startswith("/"):
        return not url.startswith("//") and not url.startswith("/\\")

    try:
        parts = urlsplit(url)
    except ValueError:
        return False

    return parts.scheme.lower() in SAFE_URL_SCHEMES and parts.netloc != ""


def _clean_tree(root: lxml.html.HtmlElement) -> None:
    # Remove comments, processing instructions and dangerous containers first
    # so that their contents are never unwrapped into the output.
    for element in list(root.iterdescendants()):
        if not isinstance(element.tag, str):
            element.drop_tree()
        elif element.tag.lower() in REMOVED_WITH_CONTENT_TAGS:
            element.drop_tree()

    for element in list(root.iterdescendants()):
        tag = element.tag.lower()
        if tag not in ALLOWED_TAGS:
            element.drop_tag()
            continue

        allowed_attributes = ALLOWED_ATTRIBUTES.get(tag, frozenset())
        for name in list(element.attrib):
            if name not in allowed_attributes:
                del element.attrib[name]

        href = element.get("href")
        if href is not None and not is_safe_href(href):
            del element.attrib["href"]


def sanitize_html(fragment: str) -> str:
    """
    Sanitize an HTML fragment, keeping only whitelisted tags and attributes
    (see :py:data:`ALLOWED_TAGS` and :py:data:`ALLOWED_ATTRIBUTES`).

    Malformed markup is tolerated: lxml recovers from most errors and any
    fragment it cannot parse at all is returned as escaped plain text. This
    function never raises.
    """
    fragment = _XML_INCOMPATIBLE_CHARS.sub("", fragment)
    if fragment.strip() == "":
        return ""

    try:
        # NB: Parse into a <div> because lxml cannot handle things like bare
        # text or sequences of tags as a fragment.
        tree = lxml.html.fragment_fromstring(fragment, create_parent="div")
    except (lxml.etree.ParserError, ValueError, AssertionError):
        # NB: lxml asserts that a <body> was produced for inputs which look
        # like whole documents (e.g. "<html></html>")
        return escape_html(fragment).strip()

    _clean_tree(tree)

    output = lxml.html.tostring(tree, encoding="unicode")

    # Remove the <div> wrapper
    empty, open_div, output = output.partition("<div>")
    assert open_div == "<div>"
    assert empty == ""
    output, close_div, empty = output.rpartition("</div>")
    assert close_div == "</div>"
    assert empty == ""

    return output.strip()
