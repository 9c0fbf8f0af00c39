import pytest

import lxml.etree
import lxml.html

from mise.sanitize import sanitize_html, escape_html, is_safe_href


class TestSanitizeHTML:
    @pytest.mark.parametrize(
        "source, exp",
        [
            # Empty
            ("", ""),
            ("   ", ""),
            # Just text
            ("foo bar", "foo bar"),
            # Allowed tags pass through
            ("<p>hi</p>", "<p>hi</p>"),
            (
                "<p>a <strong>b</strong> <em>c</em></p>",
                "<p>a <strong>b</strong> <em>c</em></p>",
            ),
            ("<ul><li>one</li><li>two</li></ul>", "<ul><li>one</li><li>two</li></ul>"),
            ("<pre><code>x &lt; y</code></pre>", "<pre><code>x &lt; y</code></pre>"),
            ('<h2 id="method">Method</h2>', '<h2 id="method">Method</h2>'),
            # Void elements
            ("<p>a<br>b</p>", "<p>a<br>b</p>"),
            ("<p>a<br />b</p>", "<p>a<br>b</p>"),
        ],
    )
    def test_allowed(self, source: str, exp: str) -> None:
        assert sanitize_html(source) == exp

    @pytest.mark.parametrize(
        "source, exp",
        [
            # Scripts removed along with their content
            ("<script>alert(1)</script><p>hi</p>", "<p>hi</p>"),
            ("<p>hi</p><style>p { color: red }</style>", "<p>hi</p>"),
            ('<iframe src="https://evil.example"></iframe><p>hi</p>', "<p>hi</p>"),
            # Other disallowed tags are unwrapped
            ("<div><p>hi</p></div>", "<p>hi</p>"),
            ("<p><span>hi</span> there</p>", "<p>hi there</p>"),
            ('<p>a <img src="x.png"> b</p>', "<p>a  b</p>"),
            # Comments removed
            ("<p>hi<!-- secret --></p>", "<p>hi</p>"),
        ],
    )
    def test_disallowed_tags(self, source: str, exp: str) -> None:
        assert sanitize_html(source) == exp

    @pytest.mark.parametrize(
        "source, exp",
        [
            # Event handlers and styles
            ('<p onclick="alert(1)">hi</p>', "<p>hi</p>"),
            ('<p style="color: red" class="x">hi</p>', "<p>hi</p>"),
            # IDs only on headings
            ('<p id="foo">hi</p>', "<p>hi</p>"),
            # Links
            ('<a href="javascript:alert(1)">x</a>', "<a>x</a>"),
            ('<a href="JavaScript:alert(1)">x</a>', "<a>x</a>"),
            ('<a href="data:text/html,hi">x</a>', "<a>x</a>"),
            ('<a href="//evil.example/">x</a>', "<a>x</a>"),
            (
                '<a href="https://example.com/" title="t">x</a>',
                '<a href="https://example.com/">x</a>',
            ),
            ('<a href="/recipes/miso-cod">x</a>', '<a href="/recipes/miso-cod">x</a>'),
            ('<a href="#method">x</a>', '<a href="#method">x</a>'),
        ],
    )
    def test_attributes(self, source: str, exp: str) -> None:
        assert sanitize_html(source) == exp

    def test_table(self) -> None:
        source = (
            '<table><thead><tr><th align="left">a</th></tr></thead>'
            "<tbody><tr><td>1</td></tr></tbody></table>"
        )
        assert sanitize_html(source) == (
            "<table><thead><tr><th>a</th></tr></thead>"
            "<tbody><tr><td>1</td></tr></tbody></table>"
        )

    @pytest.mark.parametrize(
        "source",
        [
            "<p>unclosed <b>tags",
            "</p></p></div>",
            "<<<>>>",
            "a < b & c > d",
            "\x00\x01 control characters",
            "<p>fine</p>",
            '<a href="javascript:x">y</a><script>z</script>',
        ],
    )
    def test_never_raises_and_idempotent(self, source: str) -> None:
        once = sanitize_html(source)
        assert "<script" not in once
        assert sanitize_html(once) == once

    def test_unparseable_fragment_fully_escaped(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(*args: object, **kwargs: object) -> None:
            raise lxml.etree.ParserError("Document is empty")

        monkeypatch.setattr(lxml.html, "fragment_fromstring", fail)
        assert sanitize_html(" <a title=\"x\">Tom's & Jerry</a> ") == (
            "&lt;a title=&quot;x&quot;&gt;Tom&#x27;s &amp; Jerry&lt;/a&gt;"
        )


class TestEscapeHTML:
    def test_escapes(self) -> None:
        assert escape_html("<b>\"Tom\" & 'Jerry'</b>") == (
            "&lt;b&gt;&quot;Tom&quot; &amp; &#x27;Jerry&#x27;&lt;/b&gt;"
        )

    def test_plain(self) -> None:
        assert escape_html("200g butter") == "200g butter"


@pytest.mark.parametrize(
    "url, exp",
    [
        ("#method", True),
        ("/recipes/miso-cod", True),
        ("http://example.com", True),
        ("https://example.com/a?b=c", True),
        ("HTTPS://EXAMPLE.COM", True),
        ("  https://example.com  ", True),
        ("//evil.example", False),
        ("/\\evil.example", False),
        ("javascript:alert(1)", False),
        ("data:text/html,hi", False),
        ("vbscript:msgbox", False),
        ("mailto:someone@example.com", False),
        ("relative/path", False),
        ("https://", False),
    ],
)
def test_is_safe_href(url: str, exp: bool) -> None:
    assert is_safe_href(url) is exp
