import pytest

from bs4 import BeautifulSoup

from blockdocs.blocks import TextData
from blockdocs.editor import DocumentSurface, EditorSession, MarkdownSurface
from blockdocs.editor.session import default_mode
from blockdocs.errors import NotFoundError
from blockdocs.navbar_layout import NavbarItemRecord
from blockdocs.outline import HeaderRecord
from blockdocs.preferences import COLOR_SCHEME_KEY, MemoryStore, PreferencesManager
from blockdocs.repository import ProjectRecord, ProjectSnapshot
from blockdocs.session import signed_in_as
from blockdocs.settings import EditorSettings


@pytest.fixture
def snapshot() -> ProjectSnapshot:
    return ProjectSnapshot(
        project=ProjectRecord(id=1, user_id=1, name="Field Guide"),
        headers=[
            HeaderRecord(id=1, title="Overview", content="", order=0),
            HeaderRecord(id=2, title="Legacy", content="# Old notes", order=1),
            HeaderRecord(id=3, title="Setup", content='[{"id": "s", "data": {"type": "text", "html": "Install"}}]', order=2, parent_id=1),
        ],
        navbar_items=[NavbarItemRecord(id=1, type="title", label="Field Guide")],
    )


@pytest.fixture
def subject(snapshot, store, clock):
    session = EditorSession(snapshot, store, settings=EditorSettings(), scheduler=clock)
    yield session
    session.close()


class TestDefaultMode:

    @pytest.mark.parametrize("content,mode", [
        (None, "blocks"),
        ("", "blocks"),
        ("  ", "blocks"),
        ('[{"id": "a", "data": {"type": "divider"}}]', "blocks"),
        ("# Markdown", "markdown"),
        ("[broken", "markdown"),
    ])
    def test_mode(self, content, mode):
        assert default_mode(content) == mode


class TestEditorSession:

    def test_outline(self, subject):
        assert subject.numbering == {1: "1", 2: "2", 3: "1.1"}
        assert [header.id for header in subject.visible_headers] == [1, 3, 2]
        assert [header.id for header in subject.search("set")] == [1, 3]
        assert [header.id for header in subject.search("")] == [1, 3, 2]

    def test_open_header_picks_surface(self, subject):
        assert isinstance(subject.open_header(1), DocumentSurface)
        assert isinstance(subject.open_header(2), MarkdownSurface)
        assert isinstance(subject.open_header(2, mode="blocks"), DocumentSurface)
        assert subject.active_header.id == 2

        with pytest.raises(NotFoundError):
            subject.open_header(42)

    def test_switching_drops_pending_edits(self, subject, store, clock):
        surface = subject.open_header(3)
        surface.change("s", TextData(html="unsaved typing"))
        subject.open_header(1)
        assert surface.mounted is False
        clock.advance(5)
        assert store.calls_to("update_header") == []

    def test_content_changes_update_local_headers(self, subject):
        surface = subject.open_header(1)
        surface.insert("heading")
        assert subject.get_header(1).content == surface.content

        stale = DocumentSurface(2, "", subject.store, scheduler=subject.scheduler)
        stale.insert("text")
        assert subject.get_header(2).content == "# Old notes"

    @pytest.mark.asyncio
    async def test_add_header_opens_it(self, subject, store):
        header = await subject.add_header("  Appendix ")
        assert header.title == "Appendix"
        assert subject.active_header_id == header.id
        assert store.calls_to("create_header") == [((1, "Appendix", None), {})]

    @pytest.mark.asyncio
    async def test_delete_header_removes_children(self, subject, store):
        subject.open_header(3)
        assert await subject.delete_header(1) is True
        assert [header.id for header in subject.headers] == [2]
        assert subject.surface is None
        assert subject.active_header_id is None

    @pytest.mark.asyncio
    async def test_rename_and_icon(self, subject, store):
        assert await subject.rename_header(2, "History") is True
        assert await subject.set_header_icon(2, "📜") is True
        assert subject.get_header(2).title == "History"
        assert subject.get_header(2).icon == "📜"
        assert [kwargs for _, kwargs in store.calls_to("update_header")] == [{"title": "History"}, {"icon": "📜"}]

    @pytest.mark.asyncio
    async def test_reorder_headers(self, subject, store):
        assert await subject.reorder_headers(3, 2) is False
        assert await subject.reorder_headers(2, 1) is True
        assert [header.id for header in subject.visible_headers] == [2, 1, 3]
        assert store.calls_to("reorder_headers") == [((1, [2, 1, 3]), {})]

    @pytest.mark.asyncio
    async def test_failures_keep_local_state(self, snapshot, failing_store, clock):
        session = EditorSession(snapshot, failing_store, scheduler=clock)
        try:
            assert await session.add_header("New") is None
            assert await session.rename_header(1, "Renamed") is False
            assert await session.delete_header(2) is False
            assert await session.reorder_headers(2, 1) is True
        finally:
            session.close()
        assert session.notices == ["Failed to add header", "Failed to rename", "Failed to delete header", "Failed to reorder"]
        assert session.get_header(1).title == "Renamed"
        assert session.get_header(2) is not None

    def test_export_uses_loaded_state_and_preferences(self, snapshot, store, clock):
        backing = MemoryStore({COLOR_SCHEME_KEY: '{"bg": "#010203"}'})
        preferences = PreferencesManager(backing, scheduler=clock)
        preferences.load()
        session = EditorSession(snapshot, store, preferences=preferences, scheduler=clock)
        try:
            session.open_header(1).insert("divider")
            filename, html = session.export()
        finally:
            session.close()

        assert filename == "field-guide.html"
        assert "--bg: #010203" in html
        overview = BeautifulSoup(html, "html.parser").find("section", id="header-1")
        assert overview.find("hr") is not None


class TestWithRepository:

    @pytest.mark.asyncio
    async def test_edit_and_export_round_trip(self, repository, owner, clock):
        with signed_in_as(owner.id):
            project = await repository.create_project("Team Docs")
            intro = await repository.create_header(project.id, "Intro")
            await repository.create_header(project.id, "Details", parent_id=intro.id)

            session = await EditorSession.open(repository, project.id, scheduler=clock)
            try:
                assert session.active_header_id == intro.id
                surface = session.surface
                surface.insert("callout")
                clock.advance(1.5)
                await surface.drain()
            finally:
                session.close()

            snapshot = await repository.get_project_snapshot(project.id)

        assert snapshot.headers[0].content == surface.content
        public = await repository.get_public_project(project.id)
        assert public.headers[0].content.startswith("[")
