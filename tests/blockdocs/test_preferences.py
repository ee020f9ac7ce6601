import json, logging

import pytest

from blockdocs.preferences import (COLOR_SCHEME_KEY, DEFAULT_COLORS, THEME_KEY, ColorScheme, JsonFileStore,
                                   MemoryStore, PreferencesManager, SafeStore)
from blockdocs.render.styles import DARK


class BrokenStore:
    def get(self, key): raise OSError("storage disabled")
    def set(self, key, value): raise OSError("storage disabled")
    def delete(self, key): raise OSError("storage disabled")


class TestColorScheme:

    def test_defaults(self):
        assert DEFAULT_COLORS.model_dump(by_alias=True) == {"bg": "#F9F8F6", "bgAlt": "#EFE9E3", "border": "#D9CFC7", "accent": "#C9B59C"}

    def test_palette(self):
        scheme = ColorScheme(bg="#000000")
        assert scheme.palette("light").bg == "#000000"
        assert scheme.palette("light").text == "#1a1a1a"
        assert scheme.palette("dark") == DARK


class TestPreferencesManager:

    @pytest.fixture
    def backing(self) -> MemoryStore:
        return MemoryStore()

    @pytest.fixture
    def subject(self, backing, clock) -> PreferencesManager:
        return PreferencesManager(backing, delay=0.3, scheduler=clock)

    def test_load_defaults(self, subject):
        preferences = subject.load()
        assert preferences.colors == DEFAULT_COLORS
        assert preferences.theme == "light"

    def test_load_stored_values(self, backing, subject):
        backing.set(COLOR_SCHEME_KEY, json.dumps({"bg": "#111111", "bgAlt": "#222222", "border": "#333333", "accent": "#444444"}))
        backing.set(THEME_KEY, "dark")
        preferences = subject.load()
        assert preferences.colors.bg_alt == "#222222"
        assert preferences.theme == "dark"

    def test_unreadable_scheme_falls_back(self, backing, subject, caplog):
        backing.set(COLOR_SCHEME_KEY, "{not json")
        with caplog.at_level(logging.WARNING):
            assert subject.load().colors == DEFAULT_COLORS
        assert COLOR_SCHEME_KEY in caplog.text

    def test_color_writes_are_debounced(self, backing, subject, clock):
        subject.set_color("accent", "#ff0000")
        subject.set_color("bg", "#ffffff")
        assert subject.colors.accent == "#ff0000"
        assert backing.get(COLOR_SCHEME_KEY) is None

        clock.advance(0.3)
        stored = json.loads(backing.get(COLOR_SCHEME_KEY))
        assert stored["accent"] == "#ff0000"
        assert stored["bg"] == "#ffffff"
        assert stored["bgAlt"] == "#EFE9E3"

    def test_reset_deletes_and_cancels(self, backing, subject, clock):
        backing.set(COLOR_SCHEME_KEY, DEFAULT_COLORS.model_dump_json(by_alias=True))
        subject.set_color("border", "#000000")
        assert subject.reset_colors() == DEFAULT_COLORS
        clock.advance(1)
        assert backing.get(COLOR_SCHEME_KEY) is None

    def test_theme_written_immediately(self, backing, subject):
        assert subject.toggle_theme() == "dark"
        assert backing.get(THEME_KEY) == "dark"
        assert subject.palette() == DARK
        assert subject.toggle_theme() == "light"

    def test_flush(self, backing, subject):
        subject.set_color("bg", "#123456")
        assert subject.flush() is True
        assert json.loads(backing.get(COLOR_SCHEME_KEY))["bg"] == "#123456"

    def test_broken_store_is_a_no_op(self, clock, caplog):
        subject = PreferencesManager(BrokenStore(), scheduler=clock)
        with caplog.at_level(logging.WARNING):
            assert subject.load().theme == "light"
            subject.set_theme("dark")
            subject.set_color("bg", "#000000")
            clock.advance(1)
            subject.reset_colors()
        assert subject.theme == "dark"
        assert "storage disabled" in caplog.text
        assert isinstance(subject.store, SafeStore)


class TestJsonFileStore:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.json"
        JsonFileStore(path).set(THEME_KEY, "dark")
        store = JsonFileStore(path)
        assert store.get(THEME_KEY) == "dark"
        store.delete(THEME_KEY)
        assert JsonFileStore(path).get(THEME_KEY) is None

    def test_missing_file(self, tmp_path):
        assert JsonFileStore(tmp_path / "nothing.json").get(THEME_KEY) is None
