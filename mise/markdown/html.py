"""
A :py:mod:`marko` extension for rendering recipe markdown bodies into HTML.
"""

from typing import Any, cast

import html
import re

from marko import Markdown
from marko.ext.gfm import GFM
from marko.helpers import MarkoExtension

from mise.formats import normalize_newlines
from mise.sanitize import sanitize_html


TAG = re.compile(r"<[^>]*>")
NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def heading_id(text: str) -> str:
    """
    Generate the anchor ID for a heading with the given text: lowercase with
    every run of non-alphanumeric characters replaced by a single hyphen.

        >>> heading_id("Component 1 — Miso Cure")
        'component-1-miso-cure'
    """
    return NON_ALPHANUMERIC.sub("-", text.lower()).strip("-")


class MiseHTMLRendererMixin:
    def render_heading(self, element: Any) -> str:
        children = self.render_children(element)  # type: ignore
        text = html.unescape(TAG.sub("", children))
        anchor = heading_id(text)
        if anchor:
            return f'<h{element.level} id="{anchor}">{children}</h{element.level}>\n'
        else:
            return f"<h{element.level}>{children}</h{element.level}>\n"

    def render_setext_heading(self, element: Any) -> str:
        return self.render_heading(element)

    def render_html_block(self, element: Any) -> str:
        return f"<p>{html.escape(element.body.strip())}</p>\n"

    def render_inline_html(self, element: Any) -> str:
        return html.escape(cast(str, element.children))

    def render_line_break(self, element: Any) -> str:
        # Single newlines within a paragraph are significant in recipes
        return "<br />\n"


# NB: Mixins listed first take priority so the GFM mixin's raw HTML handling
# is overridden.
MiseExtension = MarkoExtension(
    elements=list(GFM.elements),
    renderer_mixins=[MiseHTMLRendererMixin] + list(GFM.renderer_mixins),
)
"""
A :py:mod:`marko` extension adding GitHub flavoured markdown tables and
adapting the standard HTML output for recipe bodies.
"""


def markdown_to_html(markdown_source: str) -> str:
    """
    Convert markdown into HTML *without* sanitizing the result. Raw HTML in
    the source is escaped but links are emitted as written.

    Most callers want :py:func:`render_markdown` instead.
    """
    return cast(
        str, Markdown(extensions=[MiseExtension])(normalize_newlines(markdown_source))
    )


def render_markdown(markdown_source: str) -> str:
    """
    Render a recipe's markdown body into sanitized HTML suitable for
    embedding into a page.
    """
    return sanitize_html(markdown_to_html(markdown_source))
