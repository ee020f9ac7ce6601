from __future__ import annotations

import json, logging

from typing import Any, Callable, Dict, Iterable, Iterator, List

from pydantic import Field, RootModel
from pydantic import ValidationError as PydanticValidationError

from blockdocs.blocks.models import (BLOCK_WIDTHS, DATA_CLASSES, Block, BlockData, BlockDataBase, BlockType, BlockWidth,
                                     TextData, new_block_id)


logger = logging.getLogger(__name__)


class BlockSequence(RootModel[List[Block]]):
    """Ordered blocks of one section. List order is display order and persisted order.

    Edits return a new sequence and leave the receiver untouched, so snapshots held
    by the history buffer are never mutated behind its back.
    """
    root: List[Block] = Field(default_factory=list)

    # ===================================================================
    # Mapped Methods
    # ===================================================================

    def __getitem__(self, index: int) -> Block: return self.root[index]
    def __iter__(self) -> Iterator[Block]: return iter(self.root)  # type: ignore[override]
    def __len__(self) -> int: return len(self.root)
    def __bool__(self) -> bool: return bool(self.root)

    # ===================================================================
    # Lookup
    # ===================================================================

    @property
    def ids(self) -> List[str]: return [block.id for block in self.root]

    def index_of(self, block_id: str) -> int | None:
        for index, block in enumerate(self.root):
            if block.id == block_id:
                return index
        return None

    def get(self, block_id: str) -> Block | None:
        if (index := self.index_of(block_id)) is None:
            return None
        return self.root[index]

    def has_unique_ids(self) -> bool:
        return len(set(self.ids)) == len(self.root)

    # ===================================================================
    # Edits
    # ===================================================================

    def inserted(self, block: Block, after_id: str | None = None) -> BlockSequence:
        """Insert after `after_id`, or at the end when it is None or unknown."""
        blocks = list(self.root)
        index = self.index_of(after_id) if after_id is not None else None
        if index is None:
            blocks.append(block)
        else:
            blocks.insert(index + 1, block)
        return BlockSequence(blocks)

    def without(self, block_id: str) -> BlockSequence:
        return BlockSequence([block for block in self.root if block.id != block_id])

    def replaced(self, block_id: str, fn: Callable[[Block], Block]) -> BlockSequence:
        return BlockSequence([fn(block) if block.id == block_id else block for block in self.root])

    def moved(self, from_index: int, to_index: int) -> BlockSequence:
        """Splice the block at `from_index` into `to_index`, preserving every other relative order."""
        blocks = list(self.root)
        block = blocks.pop(from_index)
        blocks.insert(to_index, block)
        return BlockSequence(blocks)


# ================================================================
# Construction and codec
# ================================================================

def create_block(type: BlockType, width: BlockWidth | None = None) -> Block:
    """A new block of `type` with a fresh id and the variant's default field values."""
    if (data_class := DATA_CLASSES.get(type)) is None:
        raise ValueError(f"Unknown block type: {type!r}")
    data: BlockData = data_class()  # type: ignore[assignment]
    return Block(id=new_block_id(), width=width, data=data)


def _field_names(data_class: type[BlockDataBase]) -> Dict[str, str]:
    """Persisted key or attribute name -> attribute name."""
    names: Dict[str, str] = {}
    for name, info in data_class.model_fields.items():
        names[name] = name
        names[info.alias or name] = name
    return names


def decode_block_data(data: Any) -> BlockData | None:
    """Variant data of one stored block, or None when it does not name a known kind.

    A stored value a field cannot accept does not reject the block: the field takes
    its default and the value is kept aside to be written back unchanged.
    """
    if not isinstance(data, dict) or not isinstance(kind := data.get("type"), str):
        return None
    if (data_class := DATA_CLASSES.get(kind)) is None:  # type: ignore[call-overload]
        return None

    names = _field_names(data_class)
    fields = dict(data)
    kept: Dict[str, Any] = {}
    while True:
        try:
            decoded = data_class.model_validate(fields)
            break
        except PydanticValidationError as e:
            rejected = {
                key
                for error in e.errors() if error["loc"] and (name := names.get(str(error["loc"][0]))) and name != "type"
                for key in {name, data_class.model_fields[name].alias or name} if key in fields
            }
            if not rejected:
                logger.warning("%s block data cannot be read (%d errors)", kind, e.error_count())
                return None
            for key in rejected:
                kept[names[key]] = fields.pop(key)

    if kept:
        logger.warning("%s block keeps stored values it cannot use: %s", kind, ", ".join(sorted(kept)))
        decoded.keep_values(kept)
    return decoded  # type: ignore[return-value]


def decode_block(item: Any) -> Block | None:
    """One stored block, or None when `item` is not shaped like a block at all."""
    if not isinstance(item, dict) or (data := decode_block_data(item.get("data"))) is None:
        return None

    extras = {key: value for key, value in item.items() if key not in ("id", "width", "data")}
    raw_id, raw_width = item.get("id"), item.get("width")
    block_id = str(raw_id) if isinstance(raw_id, (str, int)) and raw_id != "" else new_block_id()
    block = Block(id=block_id, width=raw_width if raw_width in BLOCK_WIDTHS else None, data=data, **extras)
    if raw_width is not None and raw_width not in BLOCK_WIDTHS:
        logger.warning("block %s keeps unknown width %r as stored", block_id, raw_width)
        block.keep_values({"width": raw_width})
    return block


def decode_block_array(raw: str | None) -> BlockSequence | None:
    """The block sequence stored in `raw`, or None when `raw` is not a block array.

    Only text whose trimmed form starts with `[` is considered. Arrays that decode as
    JSON but hold entries that are not blocks are treated as malformed and logged.
    """
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed.startswith("["):
        return None

    try:
        items: Any = json.loads(trimmed)
    except json.JSONDecodeError:
        logger.warning("content starts with '[' but is not valid JSON, treating it as plain text")
        return None

    if not isinstance(items, list):
        return None

    blocks = [decode_block(item) for item in items]
    if (missing := sum(block is None for block in blocks)):
        logger.warning("content is a JSON array but %d of %d entries are not blocks, treating it as plain text", missing, len(blocks))
        return None
    return BlockSequence(blocks)  # type: ignore[arg-type]


def promote_plain_text(text: str) -> Block:
    """Wrap legacy text as a single text block, newlines become line breaks."""
    return Block(id=new_block_id(), data=TextData(html=text.replace("\n", "<br>")))


def parse_sequence(raw: str | None) -> BlockSequence:
    """Recover a block sequence from persisted header content. Never raises."""
    if not raw:
        return BlockSequence()

    trimmed = raw.strip()
    if not trimmed:
        return BlockSequence()

    if (sequence := decode_block_array(trimmed)) is not None:
        return sequence

    return BlockSequence([promote_plain_text(trimmed)])


def serialize_sequence(sequence: BlockSequence | Iterable[Block]) -> str:
    """JSON text for the header `content` column."""
    if not isinstance(sequence, BlockSequence):
        sequence = BlockSequence(list(sequence))
    return sequence.model_dump_json(by_alias=True)
