"""
Handling of recipe markdown documents.

A recipe document consists of a YAML frontmatter block followed by a markdown
body::

    ---
    title: Miso Cod
    category: main
    difficulty: intermediate
    serves: 2
    active_time: 45 min
    total_time: 2 days
    tags: [fish, japanese]
    ---

    ## Ingredients

    - 2 cod fillets

API
===

.. autofunction:: split_frontmatter

.. autofunction:: parse_frontmatter

.. autofunction:: render_markdown

.. autofunction:: markdown_to_html


Internals
=========

Internally the :py:mod:`marko` markdown parser is used providing support for
`CommonMark <https://commonmark.org/>`_ markdown syntax along with GitHub
flavoured markdown tables. An extension defined in
:py:mod:`mise.markdown.html` adjusts the output to the recipe site's needs
(heading anchors, hard line breaks, escaped raw HTML) and the result is always
passed through :py:func:`mise.sanitize.sanitize_html`.
"""

from mise.markdown.html import render_markdown, markdown_to_html
from mise.markdown.frontmatter import split_frontmatter, parse_frontmatter
