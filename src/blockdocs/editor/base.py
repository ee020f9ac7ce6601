"""Machinery shared by the block and markdown editing surfaces.

A surface owns the live value of one header's content, records snapshots in a
`HistoryBuffer`, and writes the latest value through the header store after the
autosave delay. Every change of the live value, whether from user input or from
undo/redo, is broadcast on `content_changed` so the owning session can react.
"""
from __future__ import annotations

import asyncio, logging

from typing import Any, Generic, List, Protocol, Set, TypeVar

from blinker import Namespace

from blockdocs.editor.keyboard import KeyEvent, keydown, resolve_action
from blockdocs.history import DEFAULT_DEBOUNCE, NO_OP, HistoryBuffer
from blockdocs.notices import NoticeMixin
from blockdocs.scheduling import Debouncer, Scheduler


logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTOSAVE_DELAY = 1.5

editor_signals = Namespace()

content_changed = editor_signals.signal("content_changed")


class HeaderStore(Protocol):
    async def update_header(self, header_id: int, *, title: str | None = None, content: str | None = None, icon: str | None = None) -> Any: ...


class EditingSurface(NoticeMixin, Generic[T]):
    """Live content of one header with undo/redo and autosave."""

    def __init__(self,
        header_id: int,
        initial: T,
        store: HeaderStore,
        history_delay: float = DEFAULT_DEBOUNCE,
        autosave_delay: float = AUTOSAVE_DELAY,
        scheduler: Scheduler | None = None,
    ):
        self.header_id = header_id
        self.store = store
        self.history: HistoryBuffer[T] = HistoryBuffer(initial, delay=history_delay, scheduler=scheduler)
        self.unsaved = False
        self.saving = False
        self.mounted = False
        self.notices: List[str] = []
        self._value: T = initial
        self._autosave = Debouncer(autosave_delay, scheduler)
        self._tasks: Set[asyncio.Task] = set()

    # == Subclass hooks =======================================================

    def serialize(self, value: T) -> str:
        raise NotImplementedError

    def _restored(self) -> None:
        """Called after undo/redo replaced the live value."""

    # == State ================================================================

    @property
    def content(self) -> str:
        """Serialized form of the live value, as it would be persisted now."""
        return self.serialize(self._value)

    @property
    def autosave_pending(self) -> bool: return self._autosave.pending

    # == Lifecycle ============================================================

    def mount(self) -> None:
        if not self.mounted:
            keydown.connect(self._on_keydown)
            self.mounted = True

    def unmount(self) -> None:
        """Tear down. Edits still inside a debounce window are dropped, not flushed."""
        if self.mounted:
            keydown.disconnect(self._on_keydown)
            self.mounted = False
        self.history.discard_pending()
        self._autosave.cancel()

    async def drain(self) -> None:
        """Wait for in-flight saves."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # == Undo / Redo ==========================================================

    def undo(self) -> bool:
        if (snapshot := self.history.undo()) is NO_OP:
            return False
        self._restore(snapshot)  # type: ignore[arg-type]
        return True

    def redo(self) -> bool:
        if (snapshot := self.history.redo()) is NO_OP:
            return False
        self._restore(snapshot)  # type: ignore[arg-type]
        return True

    def _on_keydown(self, event: KeyEvent) -> None:
        if (action := resolve_action(event)) is None:
            return
        event.prevent_default()
        if action == "undo":
            self.undo()
        else:
            self.redo()

    # == Persistence ==========================================================

    async def save(self) -> bool:
        """Persist the live value as it is right now.

        On failure a notice is posted and the surface stays unsaved; the next
        autosave cycle retries implicitly.
        """
        content = self.content
        self.saving = True
        try:
            await self.store.update_header(self.header_id, content=content)
        except Exception as e:
            self.post_notice("Failed to save", e)
            return False
        finally:
            self.saving = False
        # edits that landed while the write was in flight keep the surface dirty
        if self.content == content:
            self.unsaved = False
        logger.debug("saved header %s (%d chars)", self.header_id, len(content))
        return True

    # == Internals ============================================================

    def _commit(self, value: T, immediate: bool) -> None:
        self._value = value
        if immediate:
            self.history.push_immediate(value)
        else:
            self.history.push_debounced(value)
        self._changed()

    def _restore(self, snapshot: T) -> None:
        self._value = snapshot
        self._restored()
        self._changed()

    def _changed(self) -> None:
        self.unsaved = True
        content_changed.send(self, header_id=self.header_id, content=self.content)
        self._autosave.call(lambda: self._spawn(self.save()))

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
