"""In-memory collaborators for the editing view-models."""
import itertools

from types import SimpleNamespace
from typing import Any, Dict, List, Tuple


class RecordingStore:
    """Header and navbar store that records every write. Set `fail` to make writes raise."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[Tuple[str, Tuple[Any, ...], Dict[str, Any]]] = []
        self._ids = itertools.count(100)

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        if self.fail:
            raise RuntimeError(f"{name} unavailable")

    def calls_to(self, name: str) -> List[Tuple[Tuple[Any, ...], Dict[str, Any]]]:
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    async def update_header(self, header_id: int, **changes: Any) -> None:
        self._record("update_header", header_id, **changes)

    async def create_header(self, project_id: int, title: str, parent_id: int | None = None, content: str = "", icon: str = "") -> Any:
        self._record("create_header", project_id, title, parent_id)
        return SimpleNamespace(id=next(self._ids), title=title, parent_id=parent_id, content=content, icon=icon, order=0)

    async def delete_header(self, header_id: int) -> None:
        self._record("delete_header", header_id)

    async def reorder_headers(self, project_id: int, ordered_ids: List[int]) -> None:
        self._record("reorder_headers", project_id, list(ordered_ids))

    async def create_navbar_item(self, project_id: int, type: str, label: str | None = None, href: str | None = None, styles: str | None = None) -> Any:
        self._record("create_navbar_item", project_id, type, label=label, styles=styles)
        return SimpleNamespace(id=next(self._ids), type=type, label=label, href=href or "", width=120, styles=styles or "{}", order=0)

    async def update_navbar_item(self, item_id: int, **changes: Any) -> None:
        self._record("update_navbar_item", item_id, **changes)

    async def delete_navbar_item(self, item_id: int) -> None:
        self._record("delete_navbar_item", item_id)
