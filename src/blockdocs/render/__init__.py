# render/__init__.py

# isort: off
from .styles import DARK, LIGHT, Palette, css
from .markdown import markdown_to_html
from .blocks import render_block, render_block_data, render_blocks
from .navbar import render_navbar, render_navbar_item
from .document import export_filename, generate_html, render_content
# isort: on


__all__ = [
    "DARK",
    "LIGHT",
    "Palette",
    "css",
    "markdown_to_html",
    "render_block",
    "render_block_data",
    "render_blocks",
    "render_navbar",
    "render_navbar_item",
    "export_filename",
    "generate_html",
    "render_content",
]
