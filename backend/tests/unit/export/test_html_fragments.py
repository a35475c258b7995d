"""
Unit Tests for the editor HTML helpers
"""
import pytest

from report_portal.modules.export.html_fragments import (
    RunStyle,
    alignment,
    color_to_hex,
    element_text,
    heading_level,
    inherited_style,
    parse_fragment,
    table_rows,
    top_level_nodes,
)


class TestColorToHex:
    """Test CSS color conversion"""

    @pytest.mark.parametrize("css,expected", [
        ("#4f46e5", "4F46E5"),
        ("#abc", "AABBCC"),
        ("rgb(239, 68, 68)", "EF4444"),
        ("rgba(0, 0, 0, 0.5)", "000000"),
        ("#ef4444 !important", "EF4444"),
        ("  #FFFFFF  ", "FFFFFF"),
    ])
    def test_supported(self, css, expected):
        assert color_to_hex(css) == expected

    @pytest.mark.parametrize("css", [None, "", "red", "rgb(300, 0, 0)", "#12345", "hsl(0, 100%, 50%)"])
    def test_unsupported(self, css):
        assert color_to_hex(css) is None


class TestBlockAttributes:
    """Test heading and alignment detection"""

    def test_heading_tags_and_classes(self):
        soup = parse_fragment('<h1>A</h1><p class="ql-as-heading-2">B</p><h3>C</h3><h4>D</h4><p>E</p>')
        assert [heading_level(n) for n in top_level_nodes(soup)] == [1, 2, 3, None, None]

    def test_alignment_classes(self):
        soup = parse_fragment('<p class="ql-align-center">a</p><p class="x ql-align-right">b</p><p>c</p>')
        assert [alignment(n) for n in top_level_nodes(soup)] == ["center", "right", "left"]

    def test_top_level_skips_comments(self):
        soup = parse_fragment("<!-- note --><p>a</p>tail")
        nodes = top_level_nodes(soup)

        assert len(nodes) == 2
        assert nodes[0].name == "p"


class TestInheritedStyle:
    """Test run formatting from ancestors"""

    def test_nested_formatting(self):
        soup = parse_fragment('<p><strong><em><u>x</u></em></strong></p>')
        text = soup.find("u").string

        assert inherited_style(text) == RunStyle(bold=True, italic=True, underline=True)

    def test_nearest_color_wins(self):
        soup = parse_fragment(
            '<p style="color: #000000"><span style="color: rgb(239, 68, 68)"><s>x</s></span></p>'
        )
        style = inherited_style(soup.find("s").string)

        assert style.color == "EF4444"
        assert style.strike is True

    def test_plain_text(self):
        soup = parse_fragment("<p>plain</p>")
        assert inherited_style(soup.p.string) == RunStyle()


class TestTextExtraction:
    """Test visible text and table cells"""

    def test_breaks_become_newlines(self):
        soup = parse_fragment("<p>one<br>two&nbsp;words</p>")
        assert element_text(soup.p) == "one\ntwo words"

    def test_list_items_on_separate_lines(self):
        soup = parse_fragment("<ul><li>a</li><li>  b  </li><li></li></ul>")
        assert element_text(soup.ul) == "a\nb"

    def test_table_rows_skip_nested_tables(self):
        soup = parse_fragment(
            "<table><thead><tr><th>H1</th><th>H2</th></tr></thead>"
            "<tbody><tr><td>a</td><td><table><tr><td>inner</td></tr></table></td></tr></tbody></table>"
        )
        rows = table_rows(soup.table)

        assert len(rows) == 2
        assert [c.name for c in rows[0]] == ["th", "th"]
        assert element_text(rows[1][0]) == "a"
