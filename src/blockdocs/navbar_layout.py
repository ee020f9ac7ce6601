"""Absolute-positioned navbar row.

Positions are always derived from the ordered items and their optional explicit
x, never stored as a compiled layout, so any item may gain or lose an explicit
x independently.
"""
from __future__ import annotations

import asyncio, json, logging

from typing import Any, Dict, Iterable, List, Literal, Protocol, Sequence, Set, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from blockdocs.notices import NoticeMixin
from blockdocs.scheduling import Debouncer, Scheduler


logger = logging.getLogger(__name__)

NavbarItemType = Literal["title", "search", "link", "button", "badge", "divider-v", "github", "theme-toggle"]
NAVBAR_ITEM_TYPES: tuple[NavbarItemType, ...] = get_args(NavbarItemType)

# Label given to a freshly added item, title items use the project name instead
DEFAULT_LABELS: Dict[str, str] = {
    "title"        : "Project Title",
    "search"       : "Search...",
    "link"         : "Link",
    "button"       : "Button",
    "badge"        : "Badge",
    "divider-v"    : "Divider",
    "github"       : "GitHub Link",
    "theme-toggle" : "Theme Toggle",
}

LEFT_MARGIN    = 8
GAP            = 8
DEFAULT_WIDTH  = 120
MIN_WIDTH      = 60
DIVIDER_WIDTH  = 20

WIDTH_DEBOUNCE = 0.22

Number = int | float


# ================================================================
# Records
# ================================================================

class ItemStyles(BaseModel):
    """Per-item overrides persisted as the `styles` JSON blob."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    bg_color      : str | None      = None
    text_color    : str | None      = None
    font_size     : Number | None   = None
    padding       : str | None      = None
    border_radius : Number | None   = None
    x             : Number | None   = None


def parse_styles(raw: str | None) -> ItemStyles:
    """Lenient: anything that is not a valid styles object yields empty styles."""
    if not raw:
        return ItemStyles()
    try:
        decoded = json.loads(raw)
        if not isinstance(decoded, dict):
            return ItemStyles()
        return ItemStyles.model_validate(decoded)
    except (json.JSONDecodeError, PydanticValidationError):
        logger.debug("ignoring unreadable navbar styles blob: %r", raw)
        return ItemStyles()


def dump_styles(styles: ItemStyles) -> str:
    return styles.model_dump_json(by_alias=True, exclude_none=True)


class NavbarItemLike(Protocol):
    @property
    def type(self) -> str: ...
    @property
    def width(self) -> int | None: ...
    @property
    def styles(self) -> str | None: ...


class NavbarItemRecord(BaseModel):
    """Detached copy of a persisted navbar item."""
    model_config = ConfigDict(from_attributes=True)

    id     : int
    type   : str
    label  : str | None  = None
    href   : str | None  = ""
    width  : int | None  = DEFAULT_WIDTH
    styles : str | None  = "{}"
    order  : int         = 0

    @property
    def parsed_styles(self) -> ItemStyles: return parse_styles(self.styles)


# ================================================================
# Pure layout
# ================================================================

def layout_width(item: NavbarItemLike) -> int:
    if item.type == "divider-v":
        return DIVIDER_WIDTH
    return DEFAULT_WIDTH if item.width is None else item.width


def explicit_x(item: NavbarItemLike) -> Number | None:
    return parse_styles(item.styles).x


def resolve_x(items: Sequence[NavbarItemLike], index: int) -> Number:
    """x of `items[index]`: its explicit x, or packed after the preceding items."""
    if (x := explicit_x(items[index])) is not None:
        return x
    x = LEFT_MARGIN
    for previous in items[:index]:
        width = layout_width(previous)
        previous_x = explicit_x(previous)
        x = (previous_x if previous_x is not None else x) + width + GAP
    return x


def resolve_positions(items: Sequence[NavbarItemLike]) -> List[Number]:
    return [resolve_x(items, index) for index in range(len(items))]


def next_x(items: Sequence[NavbarItemLike]) -> Number:
    """Left edge for an appended item: past the right-most edge of everything present."""
    if not items:
        return LEFT_MARGIN
    return max(x + layout_width(item) + GAP for x, item in zip(resolve_positions(items), items))


def clamp_width(width: Number) -> int:
    return max(MIN_WIDTH, round(width))


def dropped_styles(items: Sequence[NavbarItemLike], index: int, delta_x: Number) -> str:
    """Styles blob for the item at `index` after it was dragged by `delta_x`."""
    styles = parse_styles(items[index].styles)
    styles.x = max(0, resolve_x(items, index) + delta_x)
    return dump_styles(styles)


# ================================================================
# View-model
# ================================================================

class NavbarStore(Protocol):
    async def create_navbar_item(self, project_id: int, type: str, label: str | None = None, href: str | None = None, styles: str | None = None) -> Any: ...
    async def update_navbar_item(self, item_id: int, *, label: str | None = None, href: str | None = None, width: int | None = None, styles: str | None = None) -> Any: ...
    async def delete_navbar_item(self, item_id: int) -> Any: ...


class NavbarLayout(NoticeMixin):
    """Editable navbar of one project.

    Local state changes first. Persistence failures become notices and local state is
    kept. Width changes are written through a per-item debounce, everything else right away.
    """

    def __init__(self,
        project_id: int,
        project_name: str,
        items: Iterable[Any],
        store: NavbarStore,
        width_delay: float = WIDTH_DEBOUNCE,
        scheduler: Scheduler | None = None,
    ):
        self.project_id = project_id
        self.project_name = project_name
        self.items: List[NavbarItemRecord] = [NavbarItemRecord.model_validate(item) for item in items]
        self.store = store
        self.selected_id: int | None = None
        self.notices: List[str] = []
        self._width_delay = width_delay
        self._scheduler = scheduler
        self._width_writers: Dict[int, Debouncer] = {}
        self._tasks: Set[asyncio.Task] = set()

    # == Lookup ===============================================================

    @property
    def positions(self) -> Dict[int, Number]:
        return {item.id: x for item, x in zip(self.items, resolve_positions(self.items))}

    def index_of(self, item_id: int) -> int | None:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return None

    def get(self, item_id: int) -> NavbarItemRecord | None:
        if (index := self.index_of(item_id)) is None:
            return None
        return self.items[index]

    def select(self, item_id: int | None) -> None:
        self.selected_id = item_id

    # == Operations ===========================================================

    async def add_item(self, type: NavbarItemType, label: str | None = None) -> NavbarItemRecord | None:
        if type not in NAVBAR_ITEM_TYPES:
            raise ValueError(f"Unknown navbar item type: {type!r}")
        label = self.project_name if type == "title" else (label if label is not None else DEFAULT_LABELS[type])
        styles = dump_styles(ItemStyles(x=next_x(self.items)))
        try:
            created = await self.store.create_navbar_item(self.project_id, type, label=label, styles=styles)
        except Exception as e:
            self.post_notice("Failed to add item", e)
            return None
        record = NavbarItemRecord.model_validate(created)
        self.items.append(record)
        return record

    async def remove_item(self, item_id: int) -> bool:
        try:
            await self.store.delete_navbar_item(item_id)
        except Exception as e:
            self.post_notice("Failed to remove item", e)
            return False
        if writer := self._width_writers.pop(item_id, None):
            writer.cancel()
        self.items = [item for item in self.items if item.id != item_id]
        if self.selected_id == item_id:
            self.selected_id = None
        return True

    async def move(self, item_id: int, delta_x: Number) -> Number | None:
        """Drop after a drag: the item switches to (or keeps) explicit positioning."""
        if (index := self.index_of(item_id)) is None:
            return None
        styles = dropped_styles(self.items, index, delta_x)
        self.items[index] = self.items[index].model_copy(update={"styles": styles})
        try:
            await self.store.update_navbar_item(item_id, styles=styles)
        except Exception as e:
            self.post_notice("Failed to save position", e)
        return parse_styles(styles).x

    def resize(self, item_id: int, width: Number) -> int | None:
        """Live width change while dragging the trailing edge; persisted after the debounce."""
        if (index := self.index_of(item_id)) is None:
            return None
        safe_width = clamp_width(width)
        self.items[index] = self.items[index].model_copy(update={"width": safe_width})
        writer = self._width_writers.get(item_id)
        if writer is None:
            writer = self._width_writers[item_id] = Debouncer(self._width_delay, self._scheduler)
        writer.call(lambda: self._spawn(self._persist_width(item_id, safe_width)))
        return safe_width

    async def set_label(self, item_id: int, label: str) -> None:
        await self._update_field(item_id, label=label)

    async def set_href(self, item_id: int, href: str) -> None:
        await self._update_field(item_id, href=href)

    async def set_style(self, item_id: int, **changes: Any) -> ItemStyles | None:
        """Overwrite style keys (snake_case names), keeping every other key including x."""
        if (item := self.get(item_id)) is None:
            return None
        merged = ItemStyles.model_validate({**item.parsed_styles.model_dump(exclude_none=True), **changes})
        await self._update_field(item_id, styles=dump_styles(merged))
        return merged

    async def drain(self) -> None:
        """Wait for in-flight width writes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Tear down: pending width writes are dropped."""
        for writer in self._width_writers.values():
            writer.cancel()
        self._width_writers.clear()

    # == Internals ============================================================

    async def _update_field(self, item_id: int, **changes: Any) -> None:
        if (index := self.index_of(item_id)) is None:
            return
        self.items[index] = self.items[index].model_copy(update=changes)
        try:
            await self.store.update_navbar_item(item_id, **changes)
        except Exception as e:
            self.post_notice("Failed to save", e)

    async def _persist_width(self, item_id: int, width: int) -> None:
        try:
            await self.store.update_navbar_item(item_id, width=width)
        except Exception as e:
            self.post_notice("Failed to save width", e)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
