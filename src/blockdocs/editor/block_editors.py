"""One view-model per block kind.

An editor holds the current variant data of one block and turns user input into a
complete replacement variant. Every update goes through `BlockEditor.update`, which
copies the previous variant and overwrites exactly the given fields, so nothing is
ever dropped when the surface replaces the block data wholesale.
"""
from __future__ import annotations

import logging

from html import escape
from typing import Any, Callable, ClassVar, Generic, List, Literal, TypeVar

from bs4 import BeautifulSoup
from typing_extensions import assert_never

from blockdocs.blocks.models import (CODE_LANGUAGES, BadgeData, Block, BlockData, BlockDataBase, ButtonData,
                                     CalloutData, CodeData, DividerData, HeadingData, ImageData, QuoteData, TableData,
                                     TextData)
from blockdocs.editor.rich_text import EditableRegion
from blockdocs.render import blocks as render
from blockdocs.render import styles
from blockdocs.render.styles import css


logger = logging.getLogger(__name__)

D = TypeVar("D", bound=BlockDataBase)

OnChange = Callable[[BlockData], None]

FONT_SIZE_MIN = 10
FONT_SIZE_MAX = 48


class BlockEditor(Generic[D]):
    """Base editor: current data, the change callback and both renderings."""

    def __init__(self, block: Block, on_change: OnChange | None = None):
        self.block_id = block.id
        self.data: D = block.data  # type: ignore[assignment]
        self.on_change = on_change

    @property
    def type(self) -> str: return self.data.type  # type: ignore[attr-defined]

    def update(self, **changes: Any) -> D:
        """Copy the current variant with `changes` applied and report it."""
        updated = self.data.with_changes(**changes)
        if updated == self.data:
            return self.data
        self.data = updated  # type: ignore[assignment]
        if self.on_change is not None:
            self.on_change(updated)
        return self.data

    def sync(self, data: D) -> None:
        """Adopt data that changed elsewhere (undo, redo) without reporting it back."""
        self.data = data

    def render_read_only(self) -> str:
        return render.render_block_data(self.data)  # type: ignore[arg-type]

    def render_editable(self) -> str:
        return self._editable_shell(self._editable_body())

    def _editable_body(self) -> str:
        return self.render_read_only()

    def _editable_shell(self, body: str) -> str:
        return f'<div class="block-editor" data-block-id="{escape(self.block_id)}" data-editor="{self.type}">{body}</div>'


class RichTextEditor(BlockEditor[D]):
    """Editor whose variant carries an `html` body edited in place."""

    def __init__(self, block: Block, on_change: OnChange | None = None):
        super().__init__(block, on_change)
        self.region = EditableRegion(self.data.html, on_change=self._on_region_input)  # type: ignore[attr-defined]

    def _on_region_input(self, markup: str) -> None:
        self.update(html=markup)

    def input(self, markup: str) -> D:
        """An input event from the editable surface."""
        self.region.on_input(markup)
        return self.data

    def sync(self, data: D) -> None:
        super().sync(data)
        self.region.sync_external(data.html)  # type: ignore[attr-defined]

    def _editable_region(self, tag: str, style: str, placeholder: str) -> str:
        return (
            f'<{tag} contenteditable="true" data-field="html" data-placeholder="{escape(placeholder)}" '
            f'style="{style};outline:none">{self.region.mount()}</{tag}>'
        )


# ================================================================
# Prose kinds
# ================================================================

class TextEditor(RichTextEditor[TextData]):

    def set_font_size(self, size: int | float) -> TextData:
        return self.update(font_size=max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, int(size))))

    def toggle_bold(self) -> TextData:
        return self.update(font_weight="normal" if self.data.font_weight == "bold" else "bold")

    def set_align(self, align: Literal["left", "center", "right"]) -> TextData:
        return self.update(align=align)

    def set_color(self, color: str) -> TextData:
        return self.update(color=color)

    def set_bg_color(self, color: str) -> TextData:
        return self.update(bg_color=color)

    def _editable_body(self) -> str:
        return self._editable_region("div", css(render.text_style(self.data)), "Type something...")


class HeadingEditor(RichTextEditor[HeadingData]):

    def set_level(self, level: int) -> HeadingData:
        if level not in (1, 2, 3):
            raise ValueError(f"Heading level must be 1, 2 or 3, got {level!r}")
        return self.update(level=level)

    def set_align(self, align: Literal["left", "center", "right"]) -> HeadingData:
        return self.update(align=align)

    def set_color(self, color: str) -> HeadingData:
        return self.update(color=color)

    def _editable_body(self) -> str:
        return self._editable_region(f"h{self.data.level}", css(render.heading_style(self.data)), "Heading")


class CalloutEditor(RichTextEditor[CalloutData]):

    def set_variant(self, variant: Literal["info", "warning", "danger", "success"]) -> CalloutData:
        return self.update(variant=variant)

    def set_icon(self, icon: str) -> CalloutData:
        return self.update(icon=icon)

    def _editable_body(self) -> str:
        return (
            f'<div style="{css(render.callout_style(self.data))}">'
            f'<span contenteditable="true" data-field="icon" style="{css(render.CALLOUT_ICON_STYLE)}">{escape(self.data.icon)}</span>'
            f'{self._editable_region("div", css(render.CALLOUT_TEXT_STYLE), "Callout text...")}'
            f'</div>'
        )


class QuoteEditor(RichTextEditor[QuoteData]):

    def set_author(self, author: str) -> QuoteData:
        return self.update(author=author)

    def _editable_body(self) -> str:
        author_style = css({**styles.QUOTE_AUTHOR, "outline": "none"})
        return (
            f'<blockquote style="{css(styles.QUOTE_CONTAINER)}">'
            f'{self._editable_region("div", css(styles.QUOTE_TEXT), "Quote text...")}'
            f'<div contenteditable="true" data-field="author" data-placeholder="Author" style="{author_style}">{escape(self.data.author)}</div>'
            f'</blockquote>'
        )


# ================================================================
# Structured kinds
# ================================================================

class CodeEditor(BlockEditor[CodeData]):
    """Highlighted read view by default; a click switches to raw editing until blur."""

    languages: ClassVar[tuple[str, ...]] = CODE_LANGUAGES

    def __init__(self, block: Block, on_change: OnChange | None = None):
        super().__init__(block, on_change)
        self.mode: Literal["preview", "edit"] = "preview"

    @property
    def is_editing(self) -> bool: return self.mode == "edit"

    def click(self) -> None:
        self.mode = "edit"

    def blur(self) -> None:
        self.mode = "preview"

    def toggle_mode(self) -> None:
        self.mode = "preview" if self.is_editing else "edit"

    def set_code(self, code: str) -> CodeData:
        return self.update(code=code)

    def set_language(self, language: str) -> CodeData:
        if language not in self.languages:
            raise ValueError(f"Unsupported language {language!r}, expected one of {', '.join(self.languages)}")
        return self.update(language=language)

    def toggle_theme(self) -> CodeData:
        return self.update(theme="light" if self.data.theme == "dark" else "dark")

    def toggle_line_numbers(self) -> CodeData:
        return self.update(line_numbers=not self.data.line_numbers)

    def _editable_body(self) -> str:
        if not self.is_editing:
            return self.render_read_only()
        theme = styles.CODE_THEMES[self.data.theme]
        area_style = css({
            **styles.CODE_PRE,
            "width"            : "100%",
            "min-height"       : "80px",
            "border"           : "none",
            "outline"          : "none",
            "resize"           : "vertical",
            "background-color" : theme.bg,
            "color"            : theme.fg,
        })
        return (
            f'<div style="{css(render.code_container_style(self.data))}">'
            f'<div style="{css(render.code_header_style(self.data))}"><span>{escape(self.data.language)}</span></div>'
            f'<textarea data-field="code" spellcheck="false" style="{area_style}">{escape(self.data.code)}</textarea>'
            f'</div>'
        )


class ImageEditor(BlockEditor[ImageData]):
    """URL and caption are separate fields. A load failure only affects rendering."""

    def __init__(self, block: Block, on_change: OnChange | None = None):
        super().__init__(block, on_change)
        self.broken = False

    def set_url(self, url: str) -> ImageData:
        self.broken = False
        return self.update(url=url)

    def set_caption(self, caption: str) -> ImageData:
        return self.update(caption=caption)

    def set_size(self, size: Literal["sm", "md", "lg", "full"]) -> ImageData:
        return self.update(size=size)

    def set_align(self, align: Literal["left", "center", "right"]) -> ImageData:
        return self.update(align=align)

    def mark_load_failed(self) -> None:
        self.broken = True

    def render_read_only(self) -> str:
        return render.render_image(self.data, broken=self.broken)

    def _editable_body(self) -> str:
        field_style = css({"width": "100%", "font-size": "12px", "padding": "4px 8px",
                           "border": f"1px solid {styles.BORDER}", "border-radius": "4px"})
        return (
            f'<input type="text" data-field="url" placeholder="Image URL" value="{escape(self.data.url)}" style="{field_style}" />'
            f'{render.render_image(self.data.model_copy(update={"caption": ""}), broken=self.broken)}'
            f'<input type="text" data-field="caption" placeholder="Caption (optional)" value="{escape(self.data.caption)}" style="{field_style}" />'
        )


class TableEditor(BlockEditor[TableData]):
    """Grid editing that keeps every row the same length, with at least one row and column."""

    DEFAULT_COLUMNS = 3

    @property
    def rows(self) -> List[List[str]]: return [list(row) for row in self.data.rows]

    def add_row(self) -> TableData:
        columns = self.data.column_count or self.DEFAULT_COLUMNS
        return self.update(rows=[*self.rows, [""] * columns])

    def remove_row(self, row_index: int) -> TableData:
        if self.data.row_count <= 1 or not 0 <= row_index < self.data.row_count:
            return self.data
        return self.update(rows=[row for i, row in enumerate(self.rows) if i != row_index])

    def add_column(self) -> TableData:
        return self.update(rows=[[*row, ""] for row in self.rows])

    def remove_column(self) -> TableData:
        if self.data.column_count <= 1:
            return self.data
        return self.update(rows=[row[:-1] for row in self.rows])

    def set_cell(self, row_index: int, column_index: int, text: str) -> TableData:
        rows = self.rows
        rows[row_index][column_index] = text
        return self.update(rows=rows)

    def rebuild_from_markup(self, markup: str) -> TableData:
        """Read the whole grid back from the editable table after any cell input."""
        soup = BeautifulSoup(markup, "html.parser")
        rows: List[List[str]] = []
        for tr in soup.find_all("tr"):
            cells = tr.find_all("td", attrs={"data-col": True})
            if cells:
                rows.append([cell.get_text() for cell in cells])
        if not rows:
            logger.debug("table markup for block %s holds no cells, keeping the current grid", self.block_id)
            return self.data
        width = max(len(row) for row in rows)
        return self.update(rows=[row + [""] * (width - len(row)) for row in rows])

    def _editable_body(self) -> str:
        body = []
        remove_style = css({"border": "none", "padding": "0 4px", "vertical-align": "middle"})
        for ri, row in enumerate(self.data.rows):
            cells = "".join(
                f'<td contenteditable="true" data-row="{ri}" data-col="{ci}" style="{css({**render.table_cell_style(ri), "outline": "none"})}">{escape(cell)}</td>'
                for ci, cell in enumerate(row)
            )
            body.append(
                f'<tr style="{css(render.table_row_style(ri))}">{cells}'
                f'<td style="{remove_style}"><button type="button" data-action="remove-row" data-row="{ri}" title="Remove row">×</button></td></tr>'
            )
        controls = "".join(
            f'<button type="button" data-action="{action}">{label}</button>'
            for action, label in (("add-row", "+ Row"), ("add-column", "+ Col"), ("remove-column", "- Col"))
        )
        return (
            '<div style="overflow-x:auto">'
            f'<table style="border-collapse:collapse;width:100%"><tbody>{"".join(body)}</tbody></table>'
            f'<div style="display:flex;gap:6px;margin-top:6px">{controls}</div>'
            '</div>'
        )


class DividerEditor(BlockEditor[DividerData]):

    def set_border_style(self, border_style: Literal["solid", "dashed", "dotted"]) -> DividerData:
        return self.update(border_style=border_style)

    def set_border_color(self, color: str) -> DividerData:
        return self.update(border_color=color)

    def set_thickness(self, thickness: Literal[1, 2, 4]) -> DividerData:
        return self.update(thickness=thickness)


class ButtonEditor(BlockEditor[ButtonData]):

    def set_label(self, label: str) -> ButtonData:
        return self.update(label=label)

    def set_href(self, href: str) -> ButtonData:
        return self.update(href=href)

    def set_variant(self, variant: Literal["filled", "outlined", "ghost"]) -> ButtonData:
        return self.update(variant=variant)

    def set_size(self, size: Literal["sm", "md", "lg"]) -> ButtonData:
        return self.update(size=size)

    def set_color(self, color: str) -> ButtonData:
        return self.update(color=color)

    def _editable_body(self) -> str:
        href_style = css({"font-size": "11px", "padding": "2px 6px", "border": f"1px solid {styles.BORDER}", "border-radius": "4px"})
        return (
            '<div style="display:flex;align-items:center;gap:8px;flex-wrap:wrap">'
            f'<span contenteditable="true" data-field="label" style="{css({**render.button_style(self.data), "outline": "none"})}">{escape(self.data.label)}</span>'
            f'<input type="text" data-field="href" placeholder="https://..." value="{escape(self.data.href)}" style="{href_style}" />'
            '</div>'
        )


class BadgeEditor(BlockEditor[BadgeData]):

    def set_label(self, label: str) -> BadgeData:
        return self.update(label=label)

    def set_bg_color(self, color: str) -> BadgeData:
        return self.update(bg_color=color)

    def set_text_color(self, color: str) -> BadgeData:
        return self.update(text_color=color)

    def _editable_body(self) -> str:
        return f'<span contenteditable="true" data-field="label" style="{css({**render.badge_style(self.data), "outline": "none"})}">{escape(self.data.label)}</span>'


def editor_for(block: Block, on_change: OnChange | None = None) -> BlockEditor:
    """The view-model matching the block's variant."""
    data = block.data
    if isinstance(data, TextData):
        return TextEditor(block, on_change)
    elif isinstance(data, HeadingData):
        return HeadingEditor(block, on_change)
    elif isinstance(data, CodeData):
        return CodeEditor(block, on_change)
    elif isinstance(data, CalloutData):
        return CalloutEditor(block, on_change)
    elif isinstance(data, ImageData):
        return ImageEditor(block, on_change)
    elif isinstance(data, TableData):
        return TableEditor(block, on_change)
    elif isinstance(data, DividerData):
        return DividerEditor(block, on_change)
    elif isinstance(data, ButtonData):
        return ButtonEditor(block, on_change)
    elif isinstance(data, BadgeData):
        return BadgeEditor(block, on_change)
    elif isinstance(data, QuoteData):
        return QuoteEditor(block, on_change)
    else:
        assert_never(data)
