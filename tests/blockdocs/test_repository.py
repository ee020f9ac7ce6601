import pytest

from blockdocs.errors import AuthorizationError, NestingDepthError, NotFoundError, ValidationError
from blockdocs.models import Header, NavbarItem, Project, context
from blockdocs.session import signed_in_as


class TestUsers:

    @pytest.mark.asyncio
    async def test_duplicate_email(self, repository, owner):
        assert owner.id is not None
        with pytest.raises(ValidationError):
            await repository.create_user("owner@example.com")


class TestProjects:

    @pytest.mark.asyncio
    async def test_requires_session(self, repository, owner):
        with pytest.raises(AuthorizationError):
            await repository.create_project("Docs")
        with pytest.raises(AuthorizationError):
            await repository.list_projects()

    @pytest.mark.asyncio
    async def test_crud(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Docs", "Team handbook")
            assert project.user_id == owner.id
            assert project.created_at is not None

            await repository.update_project(project.id, name="Handbook")
            assert (await repository.get_project(project.id)).name == "Handbook"

            second = await repository.create_project("Second")
            assert [p.id for p in await repository.list_projects()] == [project.id, second.id]

            await repository.delete_project(second.id)
            assert [p.id for p in await repository.list_projects()] == [project.id]

            with pytest.raises(NotFoundError):
                await repository.get_project(second.id)

    @pytest.mark.asyncio
    async def test_other_owner_is_refused(self, repository, owner, stranger):
        with signed_in_as(owner.id):
            project = await repository.create_project("Private")

        with signed_in_as(stranger.id):
            with pytest.raises(AuthorizationError):
                await repository.update_project(project.id, name="Mine now")
            with pytest.raises(AuthorizationError):
                await repository.delete_project(project.id)
            with pytest.raises(AuthorizationError):
                await repository.create_header(project.id, "Injected")
            assert await repository.list_projects() == []

        with signed_in_as(owner.id):
            assert (await repository.get_project(project.id)).name == "Private"

    @pytest.mark.asyncio
    async def test_delete_removes_children(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Docs")
            intro = await repository.create_header(project.id, "Intro")
            await repository.create_header(project.id, "Details", parent_id=intro.id)
            await repository.create_navbar_item(project.id, "title", label="Docs")
            await repository.delete_project(project.id)

        async with context():
            assert await Header.where(Header.project_id == project.id) == []
            assert await NavbarItem.where(NavbarItem.project_id == project.id) == []
            assert await Project.find(project.id) is None


class TestHeaders:

    @pytest.fixture
    def project_name(self) -> str:
        return "Guide"

    @pytest.mark.asyncio
    async def test_nesting_is_capped_at_two_levels(self, repository, owner, project_name):
        """Should accept a child of a top-level header and refuse a child of that child."""
        with signed_in_as(owner.id):
            project = await repository.create_project(project_name)
            intro = await repository.create_header(project.id, "Intro")
            details = await repository.create_header(project.id, "Details", parent_id=intro.id)
            assert details.parent_id == intro.id

            with pytest.raises(NestingDepthError):
                await repository.create_header(project.id, "Too deep", parent_id=details.id)
            with pytest.raises(NotFoundError):
                await repository.create_header(project.id, "Orphan", parent_id=12345)

            snapshot = await repository.get_project_snapshot(project.id)
            assert [header.title for header in snapshot.headers] == ["Intro", "Details"]

    @pytest.mark.asyncio
    async def test_order_appends(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            headers = [await repository.create_header(project.id, title) for title in ["A", "B", "C"]]
            assert [header.order for header in headers] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_update_and_reorder(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            a = await repository.create_header(project.id, "A")
            b = await repository.create_header(project.id, "B")
            c = await repository.create_header(project.id, "C")

            await repository.update_header(b.id, content='[{"id": "x", "data": {"type": "text"}}]', icon="📘")
            await repository.reorder_headers(project.id, [c.id, a.id, b.id])

            snapshot = await repository.get_project_snapshot(project.id)
            assert [header.title for header in snapshot.headers] == ["C", "A", "B"]
            assert snapshot.headers[2].icon == "📘"
            assert snapshot.headers[2].content.startswith("[")
            assert snapshot.headers[0].content == ""

    @pytest.mark.asyncio
    async def test_delete_removes_direct_children(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            parent = await repository.create_header(project.id, "Parent")
            await repository.create_header(project.id, "Child", parent_id=parent.id)
            keep = await repository.create_header(project.id, "Keep")

            await repository.delete_header(parent.id)
            snapshot = await repository.get_project_snapshot(project.id)
            assert [header.id for header in snapshot.headers] == [keep.id]

            with pytest.raises(NotFoundError):
                await repository.update_header(parent.id, title="Gone")

    @pytest.mark.asyncio
    async def test_stranger_cannot_touch_headers(self, repository, owner, stranger):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            header = await repository.create_header(project.id, "Mine")

        with signed_in_as(stranger.id):
            with pytest.raises(AuthorizationError):
                await repository.update_header(header.id, title="Theirs")
            with pytest.raises(AuthorizationError):
                await repository.delete_header(header.id)

        with signed_in_as(None):
            with pytest.raises(AuthorizationError):
                await repository.update_header(header.id, title="Anonymous")

        assert (await Header.find(header.id)).title == "Mine"


class TestNavbarItems:

    @pytest.mark.asyncio
    async def test_crud(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            title = await repository.create_navbar_item(project.id, "title", label="Guide")
            link = await repository.create_navbar_item(project.id, "link", label="Docs", href="/docs", styles='{"x": 200}')
            assert (title.order, link.order) == (0, 1)
            assert title.width == 120
            assert title.styles == "{}"

            updated = await repository.update_navbar_item(link.id, width=12, label="Reference")
            assert updated.width == 60
            assert updated.parsed_styles.x == 200

            await repository.reorder_navbar_items(project.id, [link.id, title.id])
            snapshot = await repository.get_project_snapshot(project.id)
            assert [item.label for item in snapshot.navbar_items] == ["Reference", "Guide"]

            await repository.delete_navbar_item(title.id)
            snapshot = await repository.get_project_snapshot(project.id)
            assert [item.id for item in snapshot.navbar_items] == [link.id]

    @pytest.mark.asyncio
    async def test_unknown_type(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Guide")
            with pytest.raises(ValidationError):
                await repository.create_navbar_item(project.id, "marquee")


class TestPublicProject:

    @pytest.mark.asyncio
    async def test_readable_without_session(self, repository, owner):
        with signed_in_as(owner.id):
            project = await repository.create_project("Open Docs")
            intro = await repository.create_header(project.id, "Intro")
            await repository.create_header(project.id, "Child", parent_id=intro.id)
            await repository.create_navbar_item(project.id, "badge", label="v1")

        snapshot = await repository.get_public_project(project.id)
        assert snapshot.project.name == "Open Docs"
        assert [header.title for header in snapshot.headers] == ["Intro", "Child"]
        assert snapshot.headers[1].parent_id == intro.id
        assert [item.type for item in snapshot.navbar_items] == ["badge"]

    @pytest.mark.asyncio
    async def test_missing(self, repository, database):
        with pytest.raises(NotFoundError):
            await repository.get_public_project(999)
