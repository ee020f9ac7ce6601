from __future__ import annotations

import logging

from typing import Any, Dict, Self

from blockdocs.blocks.models import Block, BlockData, BlockType, BlockWidth
from blockdocs.blocks.sequence import BlockSequence, create_block, parse_sequence, serialize_sequence
from blockdocs.editor.base import AUTOSAVE_DELAY, EditingSurface, HeaderStore
from blockdocs.editor.block_editors import BlockEditor, editor_for
from blockdocs.history import DEFAULT_DEBOUNCE
from blockdocs.scheduling import Scheduler


logger = logging.getLogger(__name__)


class DocumentSurface(EditingSurface[BlockSequence]):
    """Block editing surface for the header that is currently open.

    Structural edits (insert, delete, duplicate, move, reorder) are recorded in
    history one by one. Edits inside a block and width changes are debounced so
    a burst of typing is undone in one step.
    """

    def __init__(self,
        header_id: int,
        content: str | None,
        store: HeaderStore,
        history_delay: float = DEFAULT_DEBOUNCE,
        autosave_delay: float = AUTOSAVE_DELAY,
        scheduler: Scheduler | None = None,
    ):
        super().__init__(header_id, parse_sequence(content), store, history_delay, autosave_delay, scheduler)
        self.selected_id: str | None = None
        self.insert_after_id: str | None = None
        self.picker_open = False
        self._editors: Dict[str, BlockEditor] = {}

    @classmethod
    def from_header(cls, header: Any, store: HeaderStore, **kwargs: Any) -> Self:
        return cls(header.id, header.content, store, **kwargs)

    # == State ================================================================

    @property
    def blocks(self) -> BlockSequence: return self._value

    def serialize(self, value: BlockSequence) -> str:
        return serialize_sequence(value)

    def select(self, block_id: str | None) -> None:
        self.selected_id = block_id if block_id is None or self._value.get(block_id) else None

    def editor(self, block_id: str) -> BlockEditor | None:
        """View-model for one block, kept across renders until the block goes away."""
        if (block := self._value.get(block_id)) is None:
            return None
        if (existing := self._editors.get(block_id)) is None:
            existing = self._editors[block_id] = editor_for(block, lambda data: self.change(block_id, data))
        return existing

    # == Picker ===============================================================

    def open_picker(self, after_id: str | None = None) -> None:
        """Open the block picker, inserting at the end or below `after_id`."""
        self.insert_after_id = after_id
        self.picker_open = True

    def close_picker(self) -> None:
        self.picker_open = False
        self.insert_after_id = None

    def pick(self, type: BlockType) -> Block:
        block = self.insert(type, after_id=self.insert_after_id)
        self.close_picker()
        return block

    # == Structural edits =====================================================

    def insert(self, type: BlockType, after_id: str | None = None) -> Block:
        block = create_block(type)
        self._commit(self._value.inserted(block, after_id), immediate=True)
        self.selected_id = block.id
        return block

    def delete(self, block_id: str) -> bool:
        if self._value.get(block_id) is None:
            return False
        self._commit(self._value.without(block_id), immediate=True)
        self._editors.pop(block_id, None)
        if self.selected_id == block_id:
            self.selected_id = None
        return True

    def duplicate(self, block_id: str) -> Block | None:
        if (block := self._value.get(block_id)) is None:
            return None
        clone = block.clone()
        self._commit(self._value.inserted(clone, block_id), immediate=True)
        self.selected_id = clone.id
        return clone

    def move_up(self, block_id: str) -> bool:
        if (index := self._value.index_of(block_id)) is None or index == 0:
            return False
        self._commit(self._value.moved(index, index - 1), immediate=True)
        return True

    def move_down(self, block_id: str) -> bool:
        if (index := self._value.index_of(block_id)) is None or index >= len(self._value) - 1:
            return False
        self._commit(self._value.moved(index, index + 1), immediate=True)
        return True

    def reorder(self, active_id: str, over_id: str | None) -> bool:
        """Drop `active_id` onto the slot of `over_id`."""
        if over_id is None or active_id == over_id:
            return False
        old_index, new_index = self._value.index_of(active_id), self._value.index_of(over_id)
        if old_index is None or new_index is None:
            return False
        self._commit(self._value.moved(old_index, new_index), immediate=True)
        return True

    # == Field edits ==========================================================

    def change(self, block_id: str, data: BlockData) -> bool:
        """Replace one block's variant data wholesale.

        A cached editor that did not produce `data` adopts it, so its next edit builds on it.
        """
        if self._value.get(block_id) is None:
            return False
        self._commit(self._value.replaced(block_id, lambda block: block.with_data(data)), immediate=False)
        if (editor := self._editors.get(block_id)) is not None and editor.data is not data:
            editor.sync(data)
        return True

    def set_width(self, block_id: str, width: BlockWidth) -> bool:
        if self._value.get(block_id) is None:
            return False
        self._commit(self._value.replaced(block_id, lambda block: block.with_width(width)), immediate=False)
        return True

    # == Internals ============================================================

    def _restored(self) -> None:
        if self.selected_id is not None and self._value.get(self.selected_id) is None:
            self.selected_id = None
        for block_id in list(self._editors):
            if (block := self._value.get(block_id)) is None:
                del self._editors[block_id]
            else:
                self._editors[block_id].sync(block.data)
