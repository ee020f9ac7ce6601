"""Single-file static HTML export of a project.

`generate_html` is a pure function of its inputs. Nothing in the output depends on
the clock, randomness or the live editing state, so identical inputs give
byte-identical documents.
"""
from __future__ import annotations

import re

from html import escape
from typing import Literal, Protocol, Sequence

from blockdocs.blocks.sequence import decode_block_array
from blockdocs.navbar_layout import NavbarItemLike
from blockdocs.outline import HeaderLike, build_display_order, compute_numbering
from blockdocs.render.blocks import render_blocks
from blockdocs.render.markdown import markdown_to_html
from blockdocs.render.navbar import render_navbar
from blockdocs.render.styles import DARK, LIGHT, Palette


HIGHLIGHT_CSS_CDN = "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/styles/github.min.css"
HIGHLIGHT_JS_CDN  = "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/highlight.min.js"

# navbar markup refers to the palette through CSS variables so the theme toggle can swap it
VAR_PALETTE = Palette(bg="var(--bg)", bg_alt="var(--bg-alt)", border="var(--border)", accent="var(--accent)", text="var(--text)")


class ExportHeader(HeaderLike, Protocol):
    @property
    def content(self) -> str | None: ...


def export_filename(project_name: str) -> str:
    """`My Docs` -> `my-docs.html`."""
    return re.sub(r"\s+", "-", project_name).lower() + ".html"


def render_content(content: str | None) -> str:
    """Block arrays render as styled blocks, anything else as markdown."""
    if (sequence := decode_block_array(content)) is not None:
        return render_blocks(sequence)
    return markdown_to_html(content or "")


def _palette_vars(palette: Palette) -> str:
    return (
        f"--bg: {palette.bg}; --bg-alt: {palette.bg_alt}; --border: {palette.border}; "
        f"--accent: {palette.accent}; --text: {palette.text};"
    )


def _stylesheet(light: Palette, dark: Palette) -> str:
    return f"""
    :root {{ {_palette_vars(light)} }}
    body.dark {{ {_palette_vars(dark)} }}
    * {{ box-sizing: border-box; margin: 0; padding: 0; }}
    body {{ font-family: Arial, Helvetica, sans-serif; background: var(--bg); color: var(--text); min-height: 100vh; display: flex; flex-direction: column; }}
    nav {{ position: sticky; top: 0; z-index: 10; height: 60px; background: var(--bg-alt); border-bottom: 1px solid var(--border); }}
    .layout {{ display: flex; flex: 1; }}
    aside {{ width: 240px; min-width: 240px; background: var(--bg-alt); border-right: 1px solid var(--border); padding: 16px 8px; position: sticky; top: 60px; height: calc(100vh - 60px); overflow-y: auto; }}
    aside h3 {{ font-size: 0.75rem; font-weight: 700; text-transform: uppercase; letter-spacing: 0.08em; color: #888; padding: 0 12px; margin-bottom: 8px; }}
    aside ul {{ list-style: none; }}
    aside a {{ display: block; padding: 8px 12px; text-decoration: none; color: var(--text); border-radius: 6px; font-size: 0.875rem; }}
    aside a:hover {{ background: var(--border); }}
    aside li.child a {{ padding-left: 28px; font-size: 0.8rem; }}
    aside .num {{ color: #888; margin-right: 6px; font-variant-numeric: tabular-nums; }}
    main {{ flex: 1; padding: 40px 48px; max-width: 900px; }}
    section {{ margin-bottom: 3rem; }}
    section > h2 {{ font-size: 1.5rem; font-weight: 700; margin-bottom: 1rem; padding-bottom: 0.5rem; border-bottom: 2px solid var(--border); }}
    .prose h1, .prose h2, .prose h3, .prose h4 {{ font-weight: 700; margin: 1.5rem 0 0.75rem; }}
    .prose h1 {{ font-size: 2rem; }}
    .prose h2 {{ font-size: 1.5rem; }}
    .prose h3 {{ font-size: 1.25rem; }}
    .prose p {{ line-height: 1.75; margin-bottom: 1rem; }}
    .prose ul, .prose ol {{ padding-left: 1.5rem; margin-bottom: 1rem; }}
    .prose li {{ margin-bottom: 0.25rem; line-height: 1.6; }}
    .prose pre {{ background: #f4f4f4; border-radius: 6px; padding: 1rem; overflow-x: auto; margin-bottom: 1rem; }}
    .prose code:not(pre code) {{ background: var(--bg-alt); border: 1px solid var(--border); border-radius: 4px; padding: 2px 6px; font-size: 0.85em; font-family: monospace; }}
    .prose blockquote {{ border-left: 4px solid var(--accent); padding-left: 1rem; color: #666; margin-bottom: 1rem; }}
    .prose table {{ width: 100%; border-collapse: collapse; margin-bottom: 1rem; }}
    .prose th, .prose td {{ padding: 8px 12px; border: 1px solid var(--border); text-align: left; }}
    .prose th {{ background: var(--bg-alt); font-weight: 600; }}
    .prose a {{ color: var(--accent); }}
    .prose .blocks pre, .prose .blocks blockquote, .prose .blocks table {{ margin-bottom: 0; }}
    """


def generate_html(
    project_name: str,
    headers: Sequence[ExportHeader],
    navbar_items: Sequence[NavbarItemLike],
    palette: Palette = LIGHT,
    theme: Literal["light", "dark"] = "light",
) -> str:
    """The whole project as one standalone HTML document.

    `headers` are expected in persisted order; they are flattened parents-first.
    `palette` is the light palette (user color scheme); the dark one is fixed.
    """
    display = build_display_order(headers)
    numbering = compute_numbering(headers)

    sidebar_links = "\n        ".join(
        f'<li class="{"child" if header.parent_id is not None else "top"}">'
        f'<a href="#header-{escape(str(header.id))}"><span class="num">{numbering.get(header.id, "")}</span>{escape(header.title)}</a></li>'
        for header in display
    )

    sections = "\n".join(
        f"""
    <section id="header-{escape(str(header.id))}">
      <h2>{escape(header.title)}</h2>
      <div class="prose">{render_content(header.content)}</div>
    </section>"""
        for header in display
    )

    body_class = ' class="dark"' if theme == "dark" else ""
    title = escape(project_name)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <link rel="stylesheet" href="{HIGHLIGHT_CSS_CDN}" />
  <script src="{HIGHLIGHT_JS_CDN}"></script>
  <style>{_stylesheet(palette, DARK)}</style>
</head>
<body{body_class}>
  <nav>
    {render_navbar(navbar_items, project_name, VAR_PALETTE)}
  </nav>
  <div class="layout">
    <aside>
      <h3>Contents</h3>
      <ul>
        {sidebar_links}
      </ul>
    </aside>
    <main>
      {sections}
    </main>
  </div>
  <script>if (window.hljs) {{ hljs.highlightAll(); }}</script>
</body>
</html>"""
