# blocks/__init__.py

# isort: off
from .models import (BLOCK_CATALOG, BLOCK_TYPES, BLOCK_WIDTHS, CODE_LANGUAGES, BadgeData, Block, BlockData, BlockType,
                     BlockWidth, ButtonData, CalloutData, CodeData, DividerData, HeadingData, ImageData, QuoteData,
                     TableData, TextData)
from .sequence import BlockSequence, create_block, decode_block_array, parse_sequence, serialize_sequence
# isort: on


__all__ = [
    "BLOCK_CATALOG",
    "BLOCK_TYPES",
    "BLOCK_WIDTHS",
    "CODE_LANGUAGES",
    "Block",
    "BlockData",
    "BlockSequence",
    "BlockType",
    "BlockWidth",
    "TextData",
    "HeadingData",
    "CodeData",
    "CalloutData",
    "ImageData",
    "TableData",
    "DividerData",
    "ButtonData",
    "BadgeData",
    "QuoteData",
    "create_block",
    "decode_block_array",
    "parse_sequence",
    "serialize_sequence",
]
