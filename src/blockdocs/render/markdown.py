"""Markdown to HTML for legacy header content and the markdown editor preview."""
import functools

import mistletoe


@functools.lru_cache(maxsize=256)
def _render(text: str) -> str:
    return mistletoe.markdown(text)


def markdown_to_html(text: str | None) -> str:
    return _render(text) if text else ""
