"""Markdown editing mode for headers whose content is not a block array."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Self, get_args

from blockdocs.editor.base import AUTOSAVE_DELAY, EditingSurface, HeaderStore
from blockdocs.history import DEFAULT_DEBOUNCE
from blockdocs.render.markdown import markdown_to_html
from blockdocs.scheduling import Scheduler


FormatType = Literal[
    "bold", "italic", "code-inline", "link", "h1", "h2", "quote", "list", "ordered-list",
    "info-block", "warning-block", "table", "image", "divider",
]
FORMAT_TYPES: tuple[FormatType, ...] = get_args(FormatType)

# Languages offered for fenced code blocks
FENCE_LANGUAGES: tuple[str, ...] = (
    "javascript", "typescript", "python", "bash", "html", "css",
    "json", "sql", "go", "rust", "java", "cpp",
)

TABLE_TEMPLATE = (
    "| Column 1 | Column 2 | Column 3 |\n"
    "|----------|----------|----------|\n"
    "| Cell     | Cell     | Cell     |\n"
    "| Cell     | Cell     | Cell     |"
)


@dataclass(frozen=True)
class Selection:
    start : int
    end   : int

    @classmethod
    def caret(cls, at: int) -> Self:
        return cls(at, at)


def _prefix_lines(text: str, prefix: Callable[[int], str]) -> str:
    return "\n".join(f"{prefix(i)}{line}" for i, line in enumerate(text.split("\n")))


FORMATTERS: Dict[FormatType, Callable[[str], str]] = {
    "bold"          : lambda sel: f"**{sel or 'bold text'}**",
    "italic"        : lambda sel: f"*{sel or 'italic text'}*",
    "code-inline"   : lambda sel: f"`{sel or 'code'}`",
    "link"          : lambda sel: f"[{sel or 'link text'}](url)",
    "h1"            : lambda sel: f"# {sel or 'Heading 1'}",
    "h2"            : lambda sel: f"## {sel or 'Heading 2'}",
    "quote"         : lambda sel: f"> {sel or 'blockquote'}",
    "list"          : lambda sel: _prefix_lines(sel, lambda i: "- ") if sel else "- item",
    "ordered-list"  : lambda sel: _prefix_lines(sel, lambda i: f"{i + 1}. ") if sel else "1. item",
    "info-block"    : lambda sel: f"> ℹ️ **Note:** {sel or 'Add your info here'}",
    "warning-block" : lambda sel: f"> ⚠️ **Warning:** {sel or 'Add your warning here'}",
    "table"         : lambda sel: TABLE_TEMPLATE,
    "image"         : lambda sel: f"![{sel or 'alt text'}](https://example.com/image.png)",
    "divider"       : lambda sel: "\n\n---\n\n",
}


class MarkdownSurface(EditingSurface[str]):
    """Plain markdown text with a write/preview toggle.

    Typing is debounced into history, toolbar formatting is recorded immediately.
    """

    def __init__(self,
        header_id: int,
        content: str | None,
        store: HeaderStore,
        history_delay: float = DEFAULT_DEBOUNCE,
        autosave_delay: float = AUTOSAVE_DELAY,
        scheduler: Scheduler | None = None,
    ):
        super().__init__(header_id, content or "", store, history_delay, autosave_delay, scheduler)
        self.mode: Literal["write", "preview"] = "write"

    @classmethod
    def from_header(cls, header: Any, store: HeaderStore, **kwargs: Any) -> Self:
        return cls(header.id, header.content, store, **kwargs)

    @property
    def text(self) -> str: return self._value

    def serialize(self, value: str) -> str:
        return value

    # == Mode =================================================================

    def set_mode(self, mode: Literal["write", "preview"]) -> None:
        self.mode = mode

    def toggle_preview(self) -> None:
        self.mode = "write" if self.mode == "preview" else "preview"

    def preview_html(self) -> str:
        return markdown_to_html(self._value)

    # == Edits ================================================================

    def on_input(self, text: str) -> None:
        if text != self._value:
            self._commit(text, immediate=False)

    def apply_format(self, fmt: FormatType, selection: Selection) -> Selection:
        """Wrap or replace the selected text; the returned selection spans the insert."""
        if (formatter := FORMATTERS.get(fmt)) is None:
            raise ValueError(f"Unknown format {fmt!r}")
        return self._replace(selection, formatter(self._selected(selection)))

    def apply_code_block(self, language: str, selection: Selection) -> Selection:
        insert = f"```{language}\n{self._selected(selection) or '// code here'}\n```"
        return self._replace(selection, insert)

    def _selected(self, selection: Selection) -> str:
        start, end = sorted((selection.start, selection.end))
        return self._value[start:end]

    def _replace(self, selection: Selection, insert: str) -> Selection:
        start, end = sorted((selection.start, selection.end))
        self._commit(self._value[:start] + insert + self._value[end:], immediate=True)
        return Selection(start, start + len(insert))
