import pytest

from bs4 import BeautifulSoup

from blockdocs.blocks import (BadgeData, Block, ButtonData, CalloutData, CodeData, DividerData, HeadingData, QuoteData,
                              TableData, TextData, create_block, serialize_sequence)
from blockdocs.navbar_layout import NavbarItemRecord
from blockdocs.outline import HeaderRecord
from blockdocs.render import (DARK, css, export_filename, generate_html, markdown_to_html, render_block,
                              render_block_data, render_blocks, render_content, render_navbar)
from blockdocs.render.markdown import _render
from blockdocs.render.styles import LIGHT


def soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


class TestCss:

    def test_skips_empty_values(self):
        assert css({"color": "", "margin": 0, "padding": None, "font-weight": 700}) == "margin:0;font-weight:700"


class TestRenderBlocks:

    def test_text(self):
        div = soup(render_block_data(TextData(html="<b>Hi</b>", align="center", font_size=18, font_weight="bold", color="#123"))).div
        assert div.b.get_text() == "Hi"
        style = div["style"]
        assert "text-align:center" in style
        assert "font-size:18px" in style
        assert "font-weight:700" in style
        assert "color:#123" in style
        assert "background-color" not in style

    def test_empty_text_placeholder(self):
        assert "Empty text block" in soup(render_block_data(TextData())).get_text()

    @pytest.mark.parametrize("level,size", [(1, "2rem"), (2, "1.5rem"), (3, "1.25rem")])
    def test_heading_levels(self, level, size):
        heading = soup(render_block_data(HeadingData(html="Title", level=level))).find(f"h{level}")
        assert heading.get_text() == "Title"
        assert f"font-size:{size}" in heading["style"]

    def test_code_is_escaped_and_tagged(self):
        markup = soup(render_block_data(CodeData(code="<script>alert(1)</script>\nx", language="html", line_numbers=True)))
        assert markup.find("script") is None
        code = markup.find("code", class_="language-html")
        assert code.get_text() == "<script>alert(1)</script>\nx"
        gutter = markup.find("pre", attrs={"aria-hidden": "true"})
        assert gutter.get_text() == "1\n2"

    def test_callout_colors(self):
        div = soup(render_block_data(CalloutData(variant="danger", html="Stop"))).div
        assert "border-left:4px solid #ef4444" in div["style"]
        assert "background-color:#fef2f2" in div["style"]

    def test_table_header_row(self):
        table = soup(render_block_data(TableData(rows=[["A", "B"], ["1", "2"]]))).table
        rows = table.find_all("tr")
        assert [cell.get_text() for cell in rows[0].find_all("td")] == ["A", "B"]
        assert "font-weight:600" in rows[0].td["style"]
        assert "font-weight:400" in rows[1].td["style"]

    def test_divider(self):
        hr = soup(render_block_data(DividerData(border_style="dotted", thickness=2, border_color="#000"))).hr
        assert "border-top:2px dotted #000" in hr["style"]

    @pytest.mark.parametrize("variant,expected", [
        ("filled", "background-color:#C9B59C"),
        ("outlined", "border:2px solid #C9B59C"),
        ("ghost", "background-color:transparent"),
    ])
    def test_button_variants(self, variant, expected):
        link = soup(render_block_data(ButtonData(variant=variant, href="https://example.com"))).a
        assert expected in link["style"]
        assert link["href"] == "https://example.com"
        assert link["target"] == "_blank"

    def test_badge_and_quote(self):
        assert soup(render_block_data(BadgeData(label="Beta"))).span.get_text() == "Beta"
        quote = soup(render_block_data(QuoteData(html="Less is more", author="Mies"))).blockquote
        assert "Less is more" in quote.get_text()
        assert "Mies" in quote.get_text()

    def test_block_width(self):
        block = create_block("text").with_width("1/3")
        wrapper = soup(render_block(block)).div
        assert wrapper["data-block-id"] == block.id
        assert "width:calc(33.333% - 6px)" in wrapper["style"]

    def test_render_blocks_keeps_order(self):
        blocks = [Block(id=id, data=TextData(html=id)) for id in "xyz"]
        wrappers = soup(render_blocks(blocks)).find_all("div", class_="block")
        assert [wrapper["data-block-id"] for wrapper in wrappers] == ["x", "y", "z"]


class TestMarkdown:

    def test_renders_markdown(self):
        html = markdown_to_html("# Title\n\nSome *text*")
        assert soup(html).h1.get_text() == "Title"
        assert soup(html).em.get_text() == "text"

    def test_empty(self):
        assert markdown_to_html("") == ""
        assert markdown_to_html(None) == ""

    def test_repeated_text_is_rendered_once(self):
        _render.cache_clear()
        first = markdown_to_html("- one\n- two")
        assert markdown_to_html("- one\n- two") == first
        assert _render.cache_info().hits == 1
        assert _render.cache_info().misses == 1


class TestRenderContent:

    def test_block_array(self):
        content = serialize_sequence([Block(id="one", data=TextData(html="Hello"))])
        assert soup(render_content(content)).find("div", attrs={"data-block-id": "one"}) is not None

    def test_markdown_fallback(self):
        assert soup(render_content("## Legacy")).h2.get_text() == "Legacy"

    def test_malformed_array_renders_as_text(self):
        assert "[not json" in soup(render_content("[not json")).get_text()


class TestRenderNavbar:

    def test_items_positioned_and_typed(self):
        items = [
            NavbarItemRecord(id=1, type="title", label=None, width=120),
            NavbarItemRecord(id=2, type="divider-v", width=300),
            NavbarItemRecord(id=3, type="link", label="Docs", href="/docs", width=80, styles='{"textColor": "#f00", "fontSize": 18}'),
            NavbarItemRecord(id=4, type="github", href="https://github.com/example", styles='{"x": 500}'),
        ]
        markup = soup(render_navbar(items, "My Project", LIGHT))
        slots = markup.find_all("div", class_="nav-item")
        assert ["left:8px" in slots[0]["style"], "left:136px" in slots[1]["style"], "left:164px" in slots[2]["style"]] == [True] * 3
        assert "left:500px" in slots[3]["style"]

        assert markup.find("span", class_="nav-title").get_text() == "My Project"
        assert markup.find("div", class_="nav-divider") is not None
        link = markup.find("a", class_="nav-link")
        assert link.get_text() == "Docs"
        assert "color:#f00" in link["style"]
        assert "font-size:18px" in link["style"]
        github = markup.find("a", class_="nav-github")
        assert github["target"] == "_blank"

    def test_theme_toggle_and_search(self):
        items = [NavbarItemRecord(id=1, type="search", label="Find..."), NavbarItemRecord(id=2, type="theme-toggle")]
        markup = soup(render_navbar(items, "P", DARK))
        assert markup.find("input")["placeholder"] == "Find..."
        assert markup.find("button", class_="nav-theme-toggle") is not None


class TestGenerateHtml:

    @pytest.fixture
    def headers(self):
        return [
            HeaderRecord(id=1, title="Intro", content="# Welcome"),
            HeaderRecord(id=2, title="Usage", content=serialize_sequence([Block(id="b1", data=CodeData(code="pip install x", language="bash"))])),
            HeaderRecord(id=3, title="Install", content="Run <the> installer", parent_id=1),
        ]

    @pytest.fixture
    def navbar_items(self):
        return [NavbarItemRecord(id=1, type="title"), NavbarItemRecord(id=2, type="theme-toggle")]

    def test_sections_in_display_order(self, headers, navbar_items):
        document = soup(generate_html("My Docs", headers, navbar_items))
        sections = document.find_all("section")
        assert [section["id"] for section in sections] == ["header-1", "header-3", "header-2"]
        assert [section.h2.get_text() for section in sections] == ["Intro", "Install", "Usage"]

    def test_sidebar_numbering(self, headers, navbar_items):
        document = soup(generate_html("My Docs", headers, navbar_items))
        links = document.aside.find_all("a")
        assert [link["href"] for link in links] == ["#header-1", "#header-3", "#header-2"]
        assert [link.find("span", class_="num").get_text() for link in links] == ["1", "1.1", "2"]
        assert document.aside.find_all("li")[1]["class"] == ["child"]

    def test_content_dispatch(self, headers, navbar_items):
        document = soup(generate_html("My Docs", headers, navbar_items))
        intro, install, usage = document.find_all("section")
        assert intro.find("h1").get_text() == "Welcome"
        assert usage.find("code", class_="language-bash").get_text() == "pip install x"
        assert install.find("div", class_="prose").get_text().strip()

    def test_document_shell(self, headers, navbar_items):
        document = soup(generate_html("My <Docs>", headers, navbar_items, theme="dark"))
        assert document.title.get_text() == "My <Docs>"
        assert document.body["class"] == ["dark"]
        assert document.nav.find("span", class_="nav-title").get_text() == "My <Docs>"
        assert "highlight.js" in document.find("script", src=True)["src"]

    def test_palette_variables(self, headers, navbar_items):
        html = generate_html("Docs", headers, navbar_items, palette=LIGHT.model_copy(update={"bg": "#ABCDEF"}))
        assert "--bg: #ABCDEF" in html
        assert f"--bg: {DARK.bg}" in html

    def test_deterministic(self, headers, navbar_items):
        assert generate_html("Docs", headers, navbar_items) == generate_html("Docs", headers, navbar_items)

    def test_does_not_mutate_inputs(self, headers, navbar_items):
        before = [header.model_copy() for header in headers]
        generate_html("Docs", headers, navbar_items)
        assert headers == before


class TestExportFilename:

    @pytest.mark.parametrize("name,expected", [
        ("My Docs", "my-docs.html"),
        ("API   Reference\tGuide", "api-reference-guide.html"),
        ("single", "single.html"),
    ])
    def test_filename(self, name, expected):
        assert export_filename(name) == expected
