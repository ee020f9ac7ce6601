"""Static HTML for blocks.

Every function here is pure: the same block always yields the same markup. The
`*_style` builders are shared with the editable renderings in
`blockdocs.editor.block_editors` so both views use identical visual constants.
"""
from html import escape
from typing import Dict, Iterable

from typing_extensions import assert_never

from blockdocs.blocks.models import (BadgeData, Block, BlockData, ButtonData, CalloutData, CodeData, DividerData,
                                     HeadingData, ImageData, QuoteData, TableData, TextData)
from blockdocs.render import styles
from blockdocs.render.styles import css


# ================================================================
# Style builders
# ================================================================

def text_style(data: TextData) -> Dict[str, object]:
    return {
        "text-align"  : data.align,
        "font-size"   : f"{data.font_size}px" if data.font_size else None,
        "font-weight" : 700 if data.font_weight == "bold" else 400,
        "color"       : data.color,
        "background-color": data.bg_color,
        "min-height"  : "1.5em",
        "line-height" : styles.TEXT_LINE_HEIGHT,
        "padding"     : "2px 0",
        "white-space" : "pre-wrap",
        "word-break"  : "break-word",
    }


def heading_style(data: HeadingData) -> Dict[str, object]:
    return {
        "text-align"  : data.align,
        "font-size"   : styles.HEADING_SIZES[data.level],
        "font-weight" : styles.HEADING_WEIGHTS[data.level],
        "color"       : data.color,
        "min-height"  : "1.2em",
        "line-height" : styles.HEADING_LINE_HEIGHT,
        "padding"     : "2px 0",
        "word-break"  : "break-word",
    }


def callout_style(data: CalloutData) -> Dict[str, object]:
    colors = styles.CALLOUT_COLORS[data.variant]
    return {
        "display"          : "flex",
        "gap"              : "10px",
        "padding"          : "12px 16px",
        "border-radius"    : "8px",
        "border-left"      : f"4px solid {colors.border}",
        "background-color" : colors.bg,
    }


CALLOUT_ICON_STYLE = {"font-size": "18px", "flex-shrink": 0}
CALLOUT_TEXT_STYLE = {"flex": 1, "font-size": "14px", "line-height": 1.6, "min-height": "1.5em", "word-break": "break-word"}


def image_wrap_style(data: ImageData) -> Dict[str, object]:
    return {
        "display"        : "flex",
        "flex-direction" : "column",
        "align-items"    : styles.ALIGN_TO_FLEX[data.align],
        "gap"            : "8px",
    }


def image_placeholder_style(data: ImageData) -> Dict[str, object]:
    return {
        "width"            : styles.IMAGE_WIDTHS[data.size],
        "height"           : styles.IMAGE_PLACEHOLDER_HEIGHT,
        "background-color" : styles.BG_ALT,
        "border"           : f"1px dashed {styles.BORDER}",
        "border-radius"    : "6px",
        "display"          : "flex",
        "align-items"      : "center",
        "justify-content"  : "center",
        "color"            : styles.PLACEHOLDER,
        "font-size"        : "13px",
    }


def table_cell_style(row_index: int) -> Dict[str, object]:
    return {**styles.TABLE_CELL, "font-weight": 600 if row_index == 0 else 400, "vertical-align": "top"}


def table_row_style(row_index: int) -> Dict[str, object]:
    return {"background-color": styles.BG_ALT if row_index == 0 else "transparent"}


def code_container_style(data: CodeData) -> Dict[str, object]:
    theme = styles.CODE_THEMES[data.theme]
    return {
        "background-color" : theme.bg,
        "color"            : theme.fg,
        "border"           : f"1px solid {theme.border}",
        "border-radius"    : "8px",
        "overflow"         : "hidden",
    }


def code_header_style(data: CodeData) -> Dict[str, object]:
    theme = styles.CODE_THEMES[data.theme]
    return {
        "display"         : "flex",
        "align-items"     : "center",
        "justify-content" : "space-between",
        "padding"         : "6px 12px",
        "border-bottom"   : f"1px solid {theme.border}",
        "font-size"       : "11px",
        "color"           : theme.label,
    }


def divider_style(data: DividerData) -> Dict[str, object]:
    return {
        "border"     : "none",
        "border-top" : f"{data.thickness}px {data.border_style} {data.border_color or styles.BORDER}",
        "margin"     : styles.DIVIDER_MARGIN,
    }


def button_style(data: ButtonData) -> Dict[str, object]:
    color = data.color or styles.ACCENT
    base: Dict[str, object] = {
        "display"         : "inline-flex",
        "align-items"     : "center",
        "justify-content" : "center",
        "padding"         : styles.BUTTON_PADDING[data.size],
        "font-size"       : styles.BUTTON_FONT_SIZES[data.size],
        "border-radius"   : f"{data.border_radius}px",
        "font-weight"     : 600,
        "text-decoration" : "none",
        "border"          : "none",
    }
    if data.variant == "filled":
        variant = {"background-color": color, "color": "#fff"}
    elif data.variant == "outlined":
        variant = {"border": f"2px solid {color}", "color": color, "background-color": "transparent"}
    elif data.variant == "ghost":
        variant = {"color": color, "background-color": "transparent"}
    else:
        assert_never(data.variant)
    return {**base, **variant}


def badge_style(data: BadgeData) -> Dict[str, object]:
    return {
        "display"          : "inline-flex",
        "align-items"      : "center",
        "padding"          : styles.BADGE_PADDING,
        "border-radius"    : f"{data.border_radius}px",
        "background-color" : data.bg_color or styles.BG_ALT,
        "color"            : data.text_color or styles.TEXT,
        "font-size"        : styles.BADGE_FONT_SIZE,
        "font-weight"      : 500,
    }


# ================================================================
# Read-only markup per variant
# ================================================================

def render_text(data: TextData) -> str:
    return f'<div style="{css(text_style(data))}">{data.html or styles.EMPTY_TEXT_HTML}</div>'


def render_heading(data: HeadingData) -> str:
    tag = f"h{data.level}"
    return f'<{tag} style="{css(heading_style(data))}">{data.html or styles.EMPTY_HEADING_HTML}</{tag}>'


def render_code(data: CodeData) -> str:
    language = escape(data.language)
    lines = data.code.split("\n")
    code_html = f'<pre style="{css(styles.CODE_PRE)}"><code class="language-{language}">{escape(data.code)}</code></pre>'
    if data.line_numbers:
        gutter_style = css({**styles.CODE_PRE, "padding": "12px 8px 12px 16px", "text-align": "right",
                            "color": styles.CODE_THEMES[data.theme].label, "user-select": "none"})
        gutter = "\n".join(str(n) for n in range(1, len(lines) + 1))
        code_html = f'<div style="display:flex"><pre aria-hidden="true" style="{gutter_style}">{gutter}</pre>{code_html}</div>'
    return (
        f'<div style="{css(code_container_style(data))}">'
        f'<div style="{css(code_header_style(data))}"><span>{language}</span></div>'
        f'{code_html}'
        f'</div>'
    )


def render_callout(data: CalloutData) -> str:
    return (
        f'<div style="{css(callout_style(data))}">'
        f'<span style="{css(CALLOUT_ICON_STYLE)}">{escape(data.icon)}</span>'
        f'<div style="{css(CALLOUT_TEXT_STYLE)}">{data.html or "&nbsp;"}</div>'
        f'</div>'
    )


def render_image(data: ImageData, broken: bool = False) -> str:
    """`broken` reflects a load failure observed by the viewer; it never alters `data.url`."""
    parts = [f'<div style="{css(image_wrap_style(data))}">']
    if data.url and not broken:
        img_style = css({"max-width": styles.IMAGE_WIDTHS[data.size], "width": "100%", "border-radius": "6px", "display": "block"})
        parts.append(f'<img src="{escape(data.url)}" alt="{escape(data.caption or "image")}" style="{img_style}" />')
    else:
        message = styles.IMAGE_BROKEN_TEXT if data.url else styles.IMAGE_MISSING_TEXT
        parts.append(f'<div style="{css(image_placeholder_style(data))}">{message}</div>')
    if data.caption:
        caption_style = css({"font-size": "12px", "color": styles.MUTED, "text-align": "center"})
        parts.append(f'<span style="{caption_style}">{escape(data.caption)}</span>')
    parts.append("</div>")
    return "".join(parts)


def render_table(data: TableData) -> str:
    rows = []
    for ri, row in enumerate(data.rows):
        cells = "".join(f'<td style="{css(table_cell_style(ri))}">{escape(cell)}</td>' for cell in row)
        rows.append(f'<tr style="{css(table_row_style(ri))}">{cells}</tr>')
    return (
        '<div style="overflow-x:auto">'
        '<table style="border-collapse:collapse;width:100%">'
        f'<tbody>{"".join(rows)}</tbody>'
        '</table></div>'
    )


def render_divider(data: DividerData) -> str:
    return f'<hr style="{css(divider_style(data))}" />'


def render_button(data: ButtonData) -> str:
    target = ' target="_blank"' if data.href else ""
    return (
        f'<a href="{escape(data.href or "#")}"{target} rel="noopener noreferrer" '
        f'style="{css({**button_style(data), "cursor": "pointer"})}">{escape(data.label or "Button")}</a>'
    )


def render_badge(data: BadgeData) -> str:
    return f'<span style="{css(badge_style(data))}">{escape(data.label or "Badge")}</span>'


def render_quote(data: QuoteData) -> str:
    author = f'<div style="{css(styles.QUOTE_AUTHOR)}">— {escape(data.author)}</div>' if data.author else ""
    return (
        f'<blockquote style="{css(styles.QUOTE_CONTAINER)}">'
        f'<div style="{css(styles.QUOTE_TEXT)}">{data.html or "&nbsp;"}</div>'
        f'{author}'
        f'</blockquote>'
    )


def render_block_data(data: BlockData, image_broken: bool = False) -> str:
    if isinstance(data, TextData):
        return render_text(data)
    elif isinstance(data, HeadingData):
        return render_heading(data)
    elif isinstance(data, CodeData):
        return render_code(data)
    elif isinstance(data, CalloutData):
        return render_callout(data)
    elif isinstance(data, ImageData):
        return render_image(data, broken=image_broken)
    elif isinstance(data, TableData):
        return render_table(data)
    elif isinstance(data, DividerData):
        return render_divider(data)
    elif isinstance(data, ButtonData):
        return render_button(data)
    elif isinstance(data, BadgeData):
        return render_badge(data)
    elif isinstance(data, QuoteData):
        return render_quote(data)
    else:
        assert_never(data)


# ================================================================
# Blocks and sequences
# ================================================================

def block_wrapper_style(block: Block) -> Dict[str, object]:
    return {"width": styles.BLOCK_WIDTHS[block.effective_width], "padding": "4px 0"}


def render_block(block: Block) -> str:
    return (
        f'<div class="block block-{block.type}" data-block-id="{escape(block.id)}" '
        f'style="{css(block_wrapper_style(block))}">{render_block_data(block.data)}</div>'
    )


def render_blocks(blocks: Iterable[Block]) -> str:
    inner = "".join(render_block(block) for block in blocks)
    return f'<div class="blocks" style="display:flex;flex-wrap:wrap;gap:8px;align-items:flex-start">{inner}</div>'
