"""Externally edited text regions.

The core only owns a markup string. The concrete editable surface belongs to the UI
layer; this class records what that surface was seeded with and decides when a new
value coming from the core may be written back into it.
"""
from typing import Callable

from bs4 import BeautifulSoup


def plain_text(markup: str) -> str:
    """Visible text of a markup fragment."""
    if not markup:
        return ""
    return BeautifulSoup(markup, "html.parser").get_text()


class EditableRegion:
    """One rich-markup field (text, heading, callout or quote body).

    The initial value is written into the surface exactly once, on first mount. From
    then on each input event is authoritative. External updates (undo, redo) are only
    written while the surface is not focused, so in-progress typing is never clobbered.
    """

    def __init__(self, value: str = "", on_change: Callable[[str], None] | None = None):
        self.value = value
        self.surface_markup: str | None = None
        self.mounted = False
        self.focused = False
        self.on_change = on_change

    @property
    def is_empty(self) -> bool: return not plain_text(self.value).strip()

    def mount(self) -> str:
        """Seed the surface. Returns the markup to write, only ever once."""
        if not self.mounted:
            self.mounted = True
            self.surface_markup = self.value
        return self.surface_markup or ""

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def on_input(self, markup: str) -> None:
        """The user typed; the surface's markup becomes the value."""
        self.surface_markup = markup
        if markup == self.value:
            return
        self.value = markup
        if self.on_change is not None:
            self.on_change(markup)

    def sync_external(self, markup: str) -> bool:
        """Accept a value that did not come from this surface.

        Returns True when the surface has to be rewritten with `markup`.
        """
        self.value = markup
        if not self.mounted or self.focused or self.surface_markup == markup:
            return False
        self.surface_markup = markup
        return True
