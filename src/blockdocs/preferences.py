"""Per-user display preferences: the editor color scheme and the docs theme.

Preferences are written through a small key-value port. Storage is best effort:
`SafeStore` turns every access failure into a logged no-op so a broken store can
never interrupt editing.
"""
from __future__ import annotations

import json, logging

from pathlib import Path
from typing import Dict, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from blockdocs.render.styles import DARK, LIGHT, Palette
from blockdocs.scheduling import Debouncer, Scheduler


logger = logging.getLogger(__name__)

COLOR_SCHEME_KEY = "docColorScheme"
THEME_KEY        = "docs-theme"

PREFERENCES_DEBOUNCE = 0.3

Theme = Literal["light", "dark"]


class ColorScheme(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    bg     : str = Field(default="#F9F8F6")
    bg_alt : str = Field(default="#EFE9E3")
    border : str = Field(default="#D9CFC7")
    accent : str = Field(default="#C9B59C")

    def palette(self, theme: Theme = "light") -> Palette:
        """Export palette: the scheme's colors in light mode, the fixed dark palette otherwise."""
        if theme == "dark":
            return DARK
        return LIGHT.model_copy(update={"bg": self.bg, "bg_alt": self.bg_alt, "border": self.border, "accent": self.accent})


DEFAULT_COLORS = ColorScheme()


class UserPreferences(BaseModel):
    colors : ColorScheme = Field(default_factory=ColorScheme)
    theme  : Theme       = Field(default="light")


# ================================================================
# Storage port
# ================================================================

class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Dict[str, str] | None = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None: return self.data.get(key)
    def set(self, key: str, value: str) -> None: self.data[key] = value
    def delete(self, key: str) -> None: self.data.pop(key, None)


class JsonFileStore:
    """All keys in one JSON object on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class SafeStore:
    """Wraps a store; failures are logged and otherwise ignored."""

    def __init__(self, inner: KeyValueStore):
        self.inner = inner

    def get(self, key: str) -> str | None:
        try:
            return self.inner.get(key)
        except Exception as e:
            logger.warning("preference store read failed for %r: %s", key, e)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self.inner.set(key, value)
        except Exception as e:
            logger.warning("preference store write failed for %r: %s", key, e)

    def delete(self, key: str) -> None:
        try:
            self.inner.delete(key)
        except Exception as e:
            logger.warning("preference store delete failed for %r: %s", key, e)


# ================================================================
# Manager
# ================================================================

class PreferencesManager:
    """Loads preferences at session start and writes edits back.

    Color edits apply at once and are written after a short debounce. Reset and
    theme changes are written immediately.
    """

    def __init__(self, store: KeyValueStore, delay: float = PREFERENCES_DEBOUNCE, scheduler: Scheduler | None = None):
        self.store = store if isinstance(store, SafeStore) else SafeStore(store)
        self.preferences = UserPreferences()
        self._writer = Debouncer(delay, scheduler)

    @property
    def colors(self) -> ColorScheme: return self.preferences.colors

    @property
    def theme(self) -> Theme: return self.preferences.theme

    def load(self) -> UserPreferences:
        colors = DEFAULT_COLORS
        if raw := self.store.get(COLOR_SCHEME_KEY):
            try:
                colors = ColorScheme.model_validate_json(raw)
            except PydanticValidationError:
                logger.warning("ignoring unreadable %s preference", COLOR_SCHEME_KEY)
        theme: Theme = "dark" if self.store.get(THEME_KEY) == "dark" else "light"
        self.preferences = UserPreferences(colors=colors, theme=theme)
        return self.preferences

    def set_color(self, key: Literal["bg", "bg_alt", "border", "accent"], value: str) -> ColorScheme:
        colors = self.colors.model_copy(update={key: value})
        self.preferences = self.preferences.model_copy(update={"colors": colors})
        self._writer.call(lambda: self.store.set(COLOR_SCHEME_KEY, colors.model_dump_json(by_alias=True)))
        return colors

    def reset_colors(self) -> ColorScheme:
        self._writer.cancel()
        self.preferences = self.preferences.model_copy(update={"colors": DEFAULT_COLORS})
        self.store.delete(COLOR_SCHEME_KEY)
        return DEFAULT_COLORS

    def set_theme(self, theme: Theme) -> Theme:
        self.preferences = self.preferences.model_copy(update={"theme": theme})
        self.store.set(THEME_KEY, theme)
        return theme

    def toggle_theme(self) -> Theme:
        return self.set_theme("light" if self.theme == "dark" else "dark")

    def palette(self) -> Palette:
        return self.colors.palette(self.theme)

    def flush(self) -> bool:
        return self._writer.flush()

    def close(self) -> None:
        self._writer.cancel()
