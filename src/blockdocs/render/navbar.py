from html import escape
from typing import Dict, Sequence

from blockdocs.navbar_layout import ItemStyles, NavbarItemLike, layout_width, parse_styles, resolve_positions
from blockdocs.render.styles import Palette, css


GITHUB_ICON_PATH = (
    "M12 2C6.477 2 2 6.484 2 12.017c0 4.425 2.865 8.18 6.839 9.504.5.092.682-.217.682-.483 0-.237-.008-.868-.013-1.703"
    "-2.782.605-3.369-1.343-3.369-1.343-.454-1.158-1.11-1.466-1.11-1.466-.908-.62.069-.608.069-.608 1.003.07 1.531 1.032"
    " 1.531 1.032.892 1.53 2.341 1.088 2.91.832.092-.647.35-1.088.636-1.338-2.22-.253-4.555-1.113-4.555-4.951 0-1.093.39"
    "-1.988 1.029-2.688-.103-.253-.446-1.272.098-2.65 0 0 .84-.27 2.75 1.026A9.564 9.564 0 0112 6.844c.85.004 1.705.115"
    " 2.504.337 1.909-1.296 2.747-1.027 2.747-1.027.546 1.379.202 2.398.1 2.651.64.7 1.028 1.595 1.028 2.688 0 3.848-2.339"
    " 4.695-4.566 4.943.359.309.678.92.678 1.855 0 1.338-.012 2.419-.012 2.747 0 .268.18.58.688.482A10.019 10.019 0 0022"
    " 12.017C22 6.484 17.522 2 12 2z"
)

SEARCH_ICON = (
    '<svg width="11" height="11" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2.5">'
    '<circle cx="11" cy="11" r="8" /><path d="m21 21-4.35-4.35" /></svg>'
)


def override_style(styles: ItemStyles) -> Dict[str, object]:
    return {
        "background-color" : styles.bg_color,
        "color"            : styles.text_color,
        "font-size"        : f"{styles.font_size}px" if styles.font_size else None,
        "padding"          : styles.padding,
        "border-radius"    : f"{styles.border_radius}px" if styles.border_radius is not None else None,
    }


def layered(base: Dict[str, object], styles: ItemStyles) -> str:
    """Base type styling with the item's overrides on top."""
    overrides = {k: v for k, v in override_style(styles).items() if v is not None}
    return css({**base, **overrides})


def _link_attrs(href: str | None, always_new_tab: bool = False) -> str:
    target = ' target="_blank"' if href or always_new_tab else ""
    return f'href="{escape(href or "#")}"{target} rel="noopener noreferrer"'


def render_navbar_item(item: NavbarItemLike, project_name: str, palette: Palette) -> str:
    styles = parse_styles(item.styles)
    label = getattr(item, "label", None)
    href = getattr(item, "href", None)

    if item.type == "title":
        base = {"font-weight": 700, "font-size": "1.1rem", "white-space": "nowrap", "overflow": "hidden", "text-overflow": "ellipsis"}
        return f'<span class="nav-title" style="{layered(base, styles)}">{escape(label or project_name)}</span>'
    if item.type == "search":
        base = {"display": "flex", "align-items": "center", "gap": "4px", "padding": "4px 10px", "border-radius": "6px",
                "border": f"1px solid {palette.border}", "background-color": palette.bg, "color": palette.text}
        field = css({"border": "none", "outline": "none", "background": "transparent", "font-size": "0.85rem", "width": "100%", "color": "inherit"})
        return f'<div class="nav-search" style="{layered(base, styles)}">{SEARCH_ICON}<input type="text" placeholder="{escape(label or "Search...")}" style="{field}" /></div>'
    if item.type == "link":
        base = {"text-decoration": "none", "color": palette.accent, "font-size": "0.9rem"}
        return f'<a class="nav-link" {_link_attrs(href)} style="{layered(base, styles)}">{escape(label or "Link")}</a>'
    if item.type == "button":
        base = {"display": "inline-flex", "align-items": "center", "justify-content": "center", "padding": "4px 12px",
                "border-radius": "6px", "font-size": "0.8rem", "font-weight": 500, "color": "#fff",
                "background-color": palette.accent, "text-decoration": "none"}
        return f'<a class="nav-button" {_link_attrs(href)} style="{layered(base, styles)}">{escape(label or "Button")}</a>'
    if item.type == "badge":
        base = {"display": "inline-flex", "align-items": "center", "padding": "2px 8px", "border-radius": "9999px",
                "font-size": "0.75rem", "border": f"1px solid {palette.border}", "background-color": palette.bg_alt}
        return f'<span class="nav-badge" style="{layered(base, styles)}">{escape(label or "Badge")}</span>'
    if item.type == "divider-v":
        return f'<div class="nav-divider" style="{css({"width": "1px", "height": "20px", "margin": "0 4px", "background-color": palette.border})}"></div>'
    if item.type == "github":
        base = {"display": "flex", "align-items": "center", "gap": "4px", "font-size": "0.8rem", "color": palette.text}
        icon = f'<svg width="14" height="14" viewBox="0 0 24 24" fill="currentColor"><path d="{GITHUB_ICON_PATH}" /></svg>'
        return f'<a class="nav-github" {_link_attrs(href, always_new_tab=True)} title="GitHub" style="{layered(base, styles)}">{icon}</a>'
    if item.type == "theme-toggle":
        base = {"font-size": "1rem", "line-height": 1, "background": "none", "border": "none", "cursor": "pointer", "color": palette.text}
        return (
            f'<button type="button" class="nav-theme-toggle" title="Toggle theme" '
            f'onclick="document.body.classList.toggle(\'dark\')" style="{layered(base, styles)}">&#9728;&#65039; / &#127769;</button>'
        )
    return ""


def render_navbar(items: Sequence[NavbarItemLike], project_name: str, palette: Palette) -> str:
    """Items placed at their resolved x, each in a fixed-width slot (dividers size to content)."""
    slots = []
    for item, x in zip(items, resolve_positions(items)):
        slot = {
            "position"  : "absolute",
            "left"      : f"{x}px",
            "top"       : "50%",
            "transform" : "translateY(-50%)",
            "width"     : None if item.type == "divider-v" else f"{layout_width(item)}px",
            "display"   : "flex",
            "align-items": "center",
        }
        slots.append(f'<div class="nav-item" style="{css(slot)}">{render_navbar_item(item, project_name, palette)}</div>')
    return "".join(slots)
