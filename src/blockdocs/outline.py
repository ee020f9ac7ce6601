"""The two-level header tree of a project: numbering, display order, search and drag rules."""
from __future__ import annotations

from typing import Dict, Hashable, List, Protocol, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

from blockdocs.errors import NestingDepthError, NotFoundError


class HeaderLike(Protocol):
    @property
    def id(self) -> Hashable: ...
    @property
    def title(self) -> str: ...
    @property
    def parent_id(self) -> Hashable | None: ...


H = TypeVar("H", bound=HeaderLike)


class HeaderRecord(BaseModel):
    """Detached copy of a persisted header."""
    model_config = ConfigDict(from_attributes=True)

    id        : int
    title     : str
    content   : str | None = ""
    icon      : str | None = ""
    order     : int        = 0
    parent_id : int | None = None

    @property
    def is_top_level(self) -> bool: return self.parent_id is None


def children_of(headers: Sequence[H], parent_id: Hashable) -> List[H]:
    return [header for header in headers if header.parent_id == parent_id]


def compute_numbering(headers: Sequence[HeaderLike]) -> Dict[Hashable, str]:
    """Top-level headers are "1", "2", ...; their children "n.1", "n.2", ... in sibling order."""
    numbering: Dict[Hashable, str] = {}
    top_level = [header for header in headers if header.parent_id is None]
    for i, header in enumerate(top_level, start=1):
        numbering[header.id] = str(i)
        for j, child in enumerate(children_of(headers, header.id), start=1):
            numbering[child.id] = f"{i}.{j}"
    return numbering


def build_display_order(headers: Sequence[H]) -> List[H]:
    """Each top-level header followed directly by its children. Orphans are left out."""
    ordered: List[H] = []
    for header in headers:
        if header.parent_id is None:
            ordered.append(header)
            ordered.extend(children_of(headers, header.id))
    return ordered


def filter_headers(headers: Sequence[H], query: str) -> List[H]:
    """Case-insensitive title search. A matching child keeps its parent visible."""
    if not query:
        return list(headers)
    needle = query.lower()
    keep = set()
    for header in headers:
        if needle in header.title.lower():
            keep.add(header.id)
            if header.parent_id is not None:
                keep.add(header.parent_id)
    return [header for header in headers if header.id in keep]


def reorder_siblings(display: Sequence[H], active_id: Hashable, over_id: Hashable) -> List[H] | None:
    """Move `active_id` onto the slot of `over_id` in the display order.

    Only siblings (same parent) may be swapped; anything else returns None.
    """
    if active_id == over_id:
        return None
    ids = [header.id for header in display]
    if active_id not in ids or over_id not in ids:
        return None
    old_index, new_index = ids.index(active_id), ids.index(over_id)
    if display[old_index].parent_id != display[new_index].parent_id:
        return None
    reordered = list(display)
    reordered.insert(new_index, reordered.pop(old_index))
    return reordered


def validate_parent(headers: Sequence[HeaderLike], parent_id: Hashable | None) -> None:
    """A new header may hang under a top-level header only (tree depth is capped at 2)."""
    if parent_id is None:
        return
    parent = next((header for header in headers if header.id == parent_id), None)
    if parent is None:
        raise NotFoundError("Header", parent_id)
    if parent.parent_id is not None:
        raise NestingDepthError(f"Header {parent_id} is already nested and cannot have children")
