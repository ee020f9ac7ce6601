"""Visual constants shared by the live block editors and the static export."""
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field


def css(declarations: Mapping[str, object]) -> str:
    """Inline style text. None and empty-string values are left out."""
    return ";".join(f"{prop}:{value}" for prop, value in declarations.items() if value is not None and value != "")


# == Palette ==================================================================

BORDER      = "#D9CFC7"
BG_ALT      = "#EFE9E3"
ACCENT      = "#C9B59C"
TEXT        = "#1a1a1a"
MUTED       = "#888"
PLACEHOLDER = "#aaa"


class Palette(BaseModel):
    """Page colors of an exported document."""
    model_config = ConfigDict(frozen=True)

    bg     : str = Field(default="#F9F8F6")
    bg_alt : str = Field(default=BG_ALT)
    border : str = Field(default=BORDER)
    accent : str = Field(default=ACCENT)
    text   : str = Field(default=TEXT)


LIGHT = Palette()
DARK  = Palette(bg="#18171a", bg_alt="#242228", border="#3a3440", accent=ACCENT, text="#e8e0f0")


# == Layout ===================================================================

BLOCK_WIDTHS: Dict[str, str] = {
    "full" : "100%",
    "1/2"  : "calc(50% - 4px)",
    "1/3"  : "calc(33.333% - 6px)",
    "2/3"  : "calc(66.666% - 3px)",
}

ALIGN_TO_FLEX: Dict[str, str] = {
    "left"   : "flex-start",
    "center" : "center",
    "right"  : "flex-end",
}


# == Text / Heading ===========================================================

TEXT_LINE_HEIGHT     = 1.7
EMPTY_TEXT_HTML      = "<span style='color:#aaa'>Empty text block</span>"
EMPTY_HEADING_HTML   = "&nbsp;"

HEADING_SIZES   : Dict[int, str] = {1: "2rem", 2: "1.5rem", 3: "1.25rem"}
HEADING_WEIGHTS : Dict[int, int] = {1: 800, 2: 700, 3: 600}
HEADING_LINE_HEIGHT = 1.3


# == Callout ==================================================================

class CalloutColors(BaseModel):
    model_config = ConfigDict(frozen=True)
    border : str
    bg     : str


CALLOUT_COLORS: Dict[str, CalloutColors] = {
    "info"    : CalloutColors(border="#3b82f6", bg="#eff6ff"),
    "warning" : CalloutColors(border="#f59e0b", bg="#fffbeb"),
    "danger"  : CalloutColors(border="#ef4444", bg="#fef2f2"),
    "success" : CalloutColors(border="#22c55e", bg="#f0fdf4"),
}


# == Image ====================================================================

IMAGE_WIDTHS: Dict[str, str] = {"sm": "320px", "md": "480px", "lg": "720px", "full": "100%"}
IMAGE_PLACEHOLDER_HEIGHT = "160px"
IMAGE_BROKEN_TEXT  = "Image failed to load"
IMAGE_MISSING_TEXT = "No image URL"


# == Table ====================================================================

TABLE_CELL = {
    "border"    : f"1px solid {BORDER}",
    "padding"   : "6px 10px",
    "font-size" : "13px",
    "min-width" : "80px",
}


# == Code =====================================================================

class CodeTheme(BaseModel):
    model_config = ConfigDict(frozen=True)
    bg     : str
    fg     : str
    border : str
    label  : str


CODE_THEMES: Dict[str, CodeTheme] = {
    "dark"  : CodeTheme(bg="#1e1e1e", fg="#d4d4d4", border="#3a3a3a", label=MUTED),
    "light" : CodeTheme(bg="#f6f8fa", fg=TEXT,      border=BORDER,    label="#666"),
}

CODE_PRE = {
    "margin"      : 0,
    "padding"     : "12px 16px",
    "overflow-x"  : "auto",
    "font-size"   : "13px",
    "font-family" : "monospace",
    "line-height" : 1.6,
}


# == Divider ==================================================================

DIVIDER_MARGIN = "8px 0"


# == Button / Badge ===========================================================

BUTTON_PADDING    : Dict[str, str] = {"sm": "4px 12px", "md": "8px 20px", "lg": "12px 28px"}
BUTTON_FONT_SIZES : Dict[str, str] = {"sm": "12px", "md": "14px", "lg": "16px"}

BADGE_PADDING   = "3px 10px"
BADGE_FONT_SIZE = "12px"


# == Quote ====================================================================

QUOTE_CONTAINER = {
    "border-left"    : f"4px solid {ACCENT}",
    "padding-left"   : "16px",
    "padding-top"    : "8px",
    "padding-bottom" : "8px",
}
QUOTE_TEXT = {
    "font-size"   : "15px",
    "font-style"  : "italic",
    "line-height" : 1.7,
    "color"       : "#555",
}
QUOTE_AUTHOR = {"font-size": "12px", "color": MUTED, "margin-top": "6px"}
