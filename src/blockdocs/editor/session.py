from __future__ import annotations

import logging

from typing import Any, Dict, List, Literal, Protocol, Tuple

from blockdocs.blocks.sequence import decode_block_array
from blockdocs.editor.base import EditingSurface, HeaderStore, content_changed
from blockdocs.editor.markdown_editor import MarkdownSurface
from blockdocs.editor.surface import DocumentSurface
from blockdocs.errors import NotFoundError
from blockdocs.navbar_layout import NavbarLayout, NavbarStore
from blockdocs.notices import NoticeMixin
from blockdocs.outline import HeaderRecord, build_display_order, compute_numbering, filter_headers, reorder_siblings
from blockdocs.preferences import MemoryStore, PreferencesManager
from blockdocs.render.document import export_filename, generate_html
from blockdocs.scheduling import Scheduler
from blockdocs.settings import EditorSettings


logger = logging.getLogger(__name__)

EditorMode = Literal["blocks", "markdown"]


class ProjectStore(HeaderStore, NavbarStore, Protocol):
    async def get_project_snapshot(self, project_id: int) -> Any: ...
    async def create_header(self, project_id: int, title: str, parent_id: int | None = None, content: str = "", icon: str = "") -> Any: ...
    async def delete_header(self, header_id: int) -> Any: ...
    async def reorder_headers(self, project_id: int, ordered_ids: List[int]) -> Any: ...


def default_mode(content: str | None) -> EditorMode:
    """Block arrays and empty sections open in the block editor, legacy text as markdown."""
    if not (content or "").strip() or decode_block_array(content) is not None:
        return "blocks"
    return "markdown"


class EditorSession(NoticeMixin):
    """Editing context for one project.

    Holds the local header list, the navbar, the user's preferences and at most one
    open editing surface. Switching headers tears the previous surface down without
    flushing its pending timers.
    """

    def __init__(self,
        snapshot: Any,
        store: ProjectStore,
        preferences: PreferencesManager | None = None,
        settings: EditorSettings | None = None,
        scheduler: Scheduler | None = None,
    ):
        self.settings = settings or EditorSettings()
        self.scheduler = scheduler
        self.store = store
        self.project = snapshot.project
        self.headers: List[HeaderRecord] = [HeaderRecord.model_validate(header) for header in snapshot.headers]
        self.navbar = NavbarLayout(
            self.project.id,
            self.project.name,
            snapshot.navbar_items,
            store,
            width_delay=self.settings.navbar_width_debounce,
            scheduler=scheduler,
        )
        self.preferences = preferences or PreferencesManager(MemoryStore(), self.settings.preferences_debounce, scheduler)
        self.notices: List[str] = []
        self.search_query = ""
        self.active_header_id: int | None = None
        self.surface: EditingSurface | None = None
        content_changed.connect(self._on_content_changed)

    @classmethod
    async def open(cls, store: ProjectStore, project_id: int, **kwargs: Any) -> EditorSession:
        snapshot = await store.get_project_snapshot(project_id)
        session = cls(snapshot, store, **kwargs)
        session.preferences.load()
        if session.headers:
            session.open_header(session.headers[0].id)
        return session

    # == Outline ==============================================================

    @property
    def active_header(self) -> HeaderRecord | None:
        return self.get_header(self.active_header_id) if self.active_header_id is not None else None

    @property
    def numbering(self) -> Dict[int, str]:
        return compute_numbering(self.headers)  # type: ignore[return-value]

    @property
    def visible_headers(self) -> List[HeaderRecord]:
        """Display order of the headers matching the search query."""
        return build_display_order(filter_headers(self.headers, self.search_query))

    def get_header(self, header_id: int) -> HeaderRecord | None:
        return next((header for header in self.headers if header.id == header_id), None)

    def search(self, query: str) -> List[HeaderRecord]:
        self.search_query = query
        return self.visible_headers

    async def add_header(self, title: str, parent_id: int | None = None) -> HeaderRecord | None:
        try:
            created = await self.store.create_header(self.project.id, title.strip(), parent_id)
        except Exception as e:
            self.post_notice("Failed to add header", e)
            return None
        header = HeaderRecord.model_validate(created)
        self.headers.append(header)
        self.open_header(header.id)
        return header

    async def delete_header(self, header_id: int) -> bool:
        try:
            await self.store.delete_header(header_id)
        except Exception as e:
            self.post_notice("Failed to delete header", e)
            return False
        removed = {header.id for header in self.headers if header.id == header_id or header.parent_id == header_id}
        self.headers = [header for header in self.headers if header.id not in removed]
        if self.active_header_id in removed:
            self.close_surface()
            self.active_header_id = None
        return True

    async def rename_header(self, header_id: int, title: str) -> bool:
        return await self._update_header(header_id, "Failed to rename", title=title)

    async def set_header_icon(self, header_id: int, icon: str) -> bool:
        return await self._update_header(header_id, "Failed to set emoji", icon=icon)

    async def reorder_headers(self, active_id: int, over_id: int) -> bool:
        """Drag reorder within one sibling group. The local order changes before the write."""
        if (reordered := reorder_siblings(build_display_order(self.headers), active_id, over_id)) is None:
            return False
        self.headers = reordered
        try:
            await self.store.reorder_headers(self.project.id, [header.id for header in reordered])
        except Exception as e:
            self.post_notice("Failed to reorder", e)
        return True

    # == Surfaces =============================================================

    def open_header(self, header_id: int, mode: EditorMode | None = None) -> EditingSurface:
        if (header := self.get_header(header_id)) is None:
            raise NotFoundError("Header", header_id)
        self.close_surface()
        kwargs = dict(
            history_delay=self.settings.history_debounce,
            autosave_delay=self.settings.autosave_delay,
            scheduler=self.scheduler,
        )
        if (mode or default_mode(header.content)) == "blocks":
            surface: EditingSurface = DocumentSurface.from_header(header, self.store, **kwargs)
        else:
            surface = MarkdownSurface.from_header(header, self.store, **kwargs)
        surface.mount()
        self.active_header_id = header_id
        self.surface = surface
        return surface

    def close_surface(self) -> None:
        if self.surface is not None:
            self.surface.unmount()
            self.surface = None

    def close(self) -> None:
        self.close_surface()
        self.navbar.close()
        self.preferences.close()
        content_changed.disconnect(self._on_content_changed)

    # == Export ===============================================================

    def export(self) -> Tuple[str, str]:
        """(filename, html) built from the data already loaded in this session."""
        html = generate_html(
            self.project.name,
            self.headers,
            self.navbar.items,
            palette=self.preferences.colors.palette("light"),
            theme=self.preferences.theme,
        )
        return export_filename(self.project.name), html

    # == Internals ============================================================

    async def _update_header(self, header_id: int, failure: str, **changes: Any) -> bool:
        if (header := self.get_header(header_id)) is None:
            return False
        self._replace_header(header.model_copy(update=changes))
        try:
            await self.store.update_header(header_id, **changes)
        except Exception as e:
            self.post_notice(failure, e)
            return False
        return True

    def _replace_header(self, replacement: HeaderRecord) -> None:
        self.headers = [replacement if header.id == replacement.id else header for header in self.headers]

    def _on_content_changed(self, sender: Any, header_id: int, content: str, **kwargs: Any) -> None:
        if sender is not self.surface or (header := self.get_header(header_id)) is None:
            return
        self._replace_header(header.model_copy(update={"content": content}))
