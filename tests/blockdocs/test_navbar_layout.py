import json

import pytest

from blockdocs.navbar_layout import (ItemStyles, NavbarItemRecord, NavbarLayout, clamp_width, dropped_styles, next_x,
                                     parse_styles, resolve_positions)


def item(id: int, type: str = "link", width: int | None = 120, x: float | None = None, **styles) -> NavbarItemRecord:
    blob = {**styles, **({"x": x} if x is not None else {})}
    return NavbarItemRecord(id=id, type=type, label=f"item {id}", width=width, styles=json.dumps(blob))


class TestLayout:

    def test_default_positions(self):
        """Should pack items from the left margin with 8px gaps, dividers counting as 20 wide."""
        items = [item(1, width=120), item(2, type="divider-v", width=999), item(3, width=80)]
        assert resolve_positions(items) == [8, 136, 164]

    def test_explicit_x_wins_and_anchors_followers(self):
        items = [item(1, width=100), item(2, width=50, x=300), item(3, width=40)]
        assert resolve_positions(items) == [8, 300, 358]

    def test_missing_width_uses_default(self):
        items = [item(1, width=None), item(2)]
        assert resolve_positions(items) == [8, 136]

    def test_next_x_clears_every_item(self):
        assert next_x([]) == 8
        items = [item(1, width=100, x=400), item(2, width=50)]
        assert next_x(items) == 400 + 100 + 8 + 50 + 8

    def test_dropped_styles(self):
        items = [item(1, width=120), item(2, width=60, bgColor="#eee")]
        styles = json.loads(dropped_styles(items, 1, 25))
        assert styles == {"bgColor": "#eee", "x": 161}

    def test_drop_clamps_to_zero(self):
        items = [item(1, width=120)]
        assert json.loads(dropped_styles(items, 0, -500))["x"] == 0

    @pytest.mark.parametrize("width,expected", [(10, 60), (60, 60), (200.6, 201)])
    def test_clamp_width(self, width, expected):
        assert clamp_width(width) == expected

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", '{"x": "left"}'])
    def test_lenient_styles(self, raw):
        assert parse_styles(raw) == ItemStyles()


class TestNavbarLayout:

    @pytest.fixture
    def subject(self, store, clock) -> NavbarLayout:
        layout = NavbarLayout(1, "Handbook", [item(10, width=120), item(11, type="divider-v")], store, width_delay=0.22, scheduler=clock)
        yield layout
        layout.close()

    @pytest.mark.asyncio
    async def test_add_title_uses_project_name(self, subject, store):
        record = await subject.add_item("title")
        assert record.label == "Handbook"
        [(args, kwargs)] = store.calls_to("create_navbar_item")
        assert args == (1, "title")
        assert json.loads(kwargs["styles"]) == {"x": 136 + 20 + 8}
        assert subject.items[-1] == record

    @pytest.mark.asyncio
    async def test_add_default_label(self, subject):
        assert (await subject.add_item("search")).label == "Search..."
        with pytest.raises(ValueError):
            await subject.add_item("carousel")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_move_switches_to_explicit_x(self, subject, store):
        assert await subject.move(11, 40) == 176
        assert subject.get(11).parsed_styles.x == 176
        [(args, kwargs)] = store.calls_to("update_navbar_item")
        assert args == (11,)
        assert json.loads(kwargs["styles"]) == {"x": 176}

    @pytest.mark.asyncio
    async def test_resize_is_debounced(self, subject, store, clock):
        assert subject.resize(10, 30) == 60
        assert subject.resize(10, 150.4) == 150
        assert subject.get(10).width == 150
        assert subject.positions[11] == 8 + 150 + 8

        clock.advance(0.1)
        assert store.calls_to("update_navbar_item") == []
        clock.advance(0.2)
        await subject.drain()
        assert store.calls_to("update_navbar_item") == [((10,), {"width": 150})]

    @pytest.mark.asyncio
    async def test_remove_cancels_pending_width(self, subject, store, clock):
        subject.select(10)
        subject.resize(10, 200)
        assert await subject.remove_item(10) is True
        clock.advance(1)
        await subject.drain()
        assert store.calls_to("update_navbar_item") == []
        assert subject.selected_id is None
        assert [record.id for record in subject.items] == [11]

    @pytest.mark.asyncio
    async def test_set_style_keeps_position(self, subject, store):
        await subject.move(10, 0)
        styles = await subject.set_style(10, bg_color="#111", border_radius=4)
        assert styles.x == 8
        assert json.loads(subject.get(10).styles) == {"bgColor": "#111", "borderRadius": 4, "x": 8}

    @pytest.mark.asyncio
    async def test_label_and_href(self, subject, store):
        await subject.set_label(10, "Guides")
        await subject.set_href(10, "/guides")
        assert subject.get(10).label == "Guides"
        assert subject.get(10).href == "/guides"
        assert [kwargs for _, kwargs in store.calls_to("update_navbar_item")] == [{"label": "Guides"}, {"href": "/guides"}]

    @pytest.mark.asyncio
    async def test_failures_become_notices(self, failing_store, clock):
        layout = NavbarLayout(1, "Handbook", [item(10)], failing_store, scheduler=clock)
        assert await layout.add_item("badge") is None
        assert await layout.remove_item(10) is False
        await layout.set_label(10, "Kept locally")
        assert layout.notices == ["Failed to add item", "Failed to remove item", "Failed to save"]
        assert layout.get(10).label == "Kept locally"
