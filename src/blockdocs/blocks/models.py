from __future__ import annotations

import uuid

from typing import Annotated, Any, Dict, List, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, SerializationInfo, model_serializer
from pydantic.alias_generators import to_camel


BlockType   = Literal["text", "heading", "code", "callout", "image", "table", "divider", "button", "badge", "quote"]
BlockWidth  = Literal["full", "1/2", "1/3", "2/3"]
Align       = Literal["left", "center", "right"]

BLOCK_TYPES  : tuple[BlockType, ...]  = get_args(BlockType)
BLOCK_WIDTHS : tuple[BlockWidth, ...] = get_args(BlockWidth)

# Languages offered by the code block editor
CODE_LANGUAGES: tuple[str, ...] = (
    "typescript", "javascript", "python", "bash", "html", "css",
    "json", "sql", "go", "rust", "java", "cpp",
)


def new_block_id() -> str:
    return str(uuid.uuid4())


def restore_kept_values(model: BaseModel, kept: Dict[str, Any], dumped: Dict[str, Any], info: SerializationInfo) -> Dict[str, Any]:
    """Put stored values a field could not accept back under their persisted keys.

    Only the persisted (by alias) form carries them; attribute-keyed dumps stay valid input.
    """
    if info.by_alias:
        for name, raw in kept.items():
            dumped[type(model).model_fields[name].alias or name] = raw
    return dumped


class BlockDataBase(BaseModel):
    """Shared configuration of every block variant.

    Keys are persisted in camelCase. Unknown keys survive a load/save cycle untouched,
    and so do stored values outside a field's range (see `kept_values`): the field
    reads as its default until it is edited, and the stored value is written back.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    _kept_values: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def kept_values(self) -> Dict[str, Any]: return dict(self._kept_values)

    def keep_values(self, kept: Dict[str, Any]) -> None:
        self._kept_values = dict(kept)

    @model_serializer(mode="wrap")
    def _write_back_kept_values(self, handler, info: SerializationInfo) -> Dict[str, Any]:
        return restore_kept_values(self, self._kept_values, handler(self), info)

    def with_changes(self, **changes: Any) -> BlockData:
        """A validated copy with exactly the given fields overwritten."""
        merged = {**self.model_dump(), **changes}
        updated = type(self).model_validate(merged)
        updated.keep_values({name: raw for name, raw in self._kept_values.items() if name not in changes})
        return updated  # type: ignore[return-value]


# ================================================================
# Variants
# ================================================================

class TextData(BlockDataBase):
    type        : Literal["text"]               = "text"
    html        : str                           = Field(default="",       description="Inline rich markup")
    align       : Align                         = Field(default="left")
    font_size   : int                           = Field(default=14,       description="Font size in px")
    font_weight : Literal["normal", "bold"]     = Field(default="normal")
    color       : str                           = Field(default="",       description="Empty means inherit")
    bg_color    : str                           = Field(default="",       description="Empty means transparent")


class HeadingData(BlockDataBase):
    type  : Literal["heading"]    = "heading"
    html  : str                   = ""
    level : Literal[1, 2, 3]      = 2
    align : Align                 = "left"
    color : str                   = ""


class CodeData(BlockDataBase):
    type         : Literal["code"]             = "code"
    code         : str                         = ""
    language     : str                         = "typescript"
    theme        : Literal["dark", "light"]    = "light"
    line_numbers : bool                        = False


class CalloutData(BlockDataBase):
    type    : Literal["callout"]                                 = "callout"
    variant : Literal["info", "warning", "danger", "success"]    = "info"
    icon    : str                                                = "ℹ️"
    html    : str                                                = ""


class ImageData(BlockDataBase):
    type    : Literal["image"]                     = "image"
    url     : str                                  = ""
    caption : str                                  = ""
    size    : Literal["sm", "md", "lg", "full"]    = "md"
    align   : Align                                = "center"


class TableData(BlockDataBase):
    type : Literal["table"]   = "table"
    rows : List[List[str]]    = Field(default_factory=lambda: [["", "", ""], ["", "", ""]], description="Row 0 is the header row")

    @property
    def row_count(self) -> int: return len(self.rows)

    @property
    def column_count(self) -> int: return len(self.rows[0]) if self.rows else 0


class DividerData(BlockDataBase):
    type         : Literal["divider"]                     = "divider"
    border_style : Literal["solid", "dashed", "dotted"]   = "solid"
    border_color : str                                    = "#D9CFC7"
    thickness    : Literal[1, 2, 4]                       = 1


class ButtonData(BlockDataBase):
    type          : Literal["button"]                          = "button"
    label         : str                                        = "Button"
    href          : str                                        = "#"
    variant       : Literal["filled", "outlined", "ghost"]     = "filled"
    size          : Literal["sm", "md", "lg"]                  = "md"
    color         : str                                        = "#C9B59C"
    border_radius : int                                        = 6


class BadgeData(BlockDataBase):
    type          : Literal["badge"]   = "badge"
    label         : str                = "Badge"
    bg_color      : str                = "#EFE9E3"
    text_color    : str                = "#1a1a1a"
    border_radius : int                = 9999


class QuoteData(BlockDataBase):
    type   : Literal["quote"]   = "quote"
    html   : str                = ""
    author : str                = ""


BlockData = Annotated[
    Union[TextData, HeadingData, CodeData, CalloutData, ImageData, TableData, DividerData, ButtonData, BadgeData, QuoteData],
    Field(discriminator="type"),
]

DATA_CLASSES: Dict[BlockType, type[BlockDataBase]] = {
    "text"    : TextData,
    "heading" : HeadingData,
    "code"    : CodeData,
    "callout" : CalloutData,
    "image"   : ImageData,
    "table"   : TableData,
    "divider" : DividerData,
    "button"  : ButtonData,
    "badge"   : BadgeData,
    "quote"   : QuoteData,
}


# ================================================================
# Block
# ================================================================

class Block(BaseModel):
    """One entry of a section: identity, layout width and variant data."""
    model_config = ConfigDict(extra="allow")

    id    : str                  = Field(default_factory=new_block_id, description="Unique within its sequence")
    width : BlockWidth | None    = Field(default=None, description="Layout width, None renders as full")
    data  : BlockData

    _kept_values: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def kept_values(self) -> Dict[str, Any]: return dict(self._kept_values)

    def keep_values(self, kept: Dict[str, Any]) -> None:
        self._kept_values = dict(kept)

    @model_serializer(mode="wrap")
    def _omit_unset_width(self, handler, info: SerializationInfo) -> Dict[str, Any]:
        dumped = handler(self)
        if dumped.get("width") is None:
            dumped.pop("width", None)
        return restore_kept_values(self, self._kept_values, dumped, info)

    @property
    def type(self) -> BlockType: return self.data.type

    @property
    def effective_width(self) -> BlockWidth: return self.width or "full"

    def with_data(self, data: BlockData) -> Block:
        return self.model_copy(update={"data": data})

    def with_width(self, width: BlockWidth) -> Block:
        updated = self.model_copy(update={"width": width})
        updated.keep_values({name: raw for name, raw in self._kept_values.items() if name != "width"})
        return updated

    def clone(self) -> Block:
        """Same variant data under a fresh id."""
        clone = Block(id=new_block_id(), width=self.width, data=self.data.model_copy(deep=True), **(self.model_extra or {}))
        clone.keep_values(self._kept_values)
        return clone


# ================================================================
# Picker catalog
# ================================================================

class BlockKind(BaseModel):
    type        : BlockType
    icon        : str
    label       : str
    description : str


BLOCK_CATALOG: List[BlockKind] = [
    BlockKind(type="text",    icon="T",   label="Text",    description="Plain paragraph"),
    BlockKind(type="heading", icon="H",   label="Heading", description="H1, H2, or H3 title"),
    BlockKind(type="code",    icon="</>", label="Code",    description="Syntax highlighted code"),
    BlockKind(type="callout", icon="ℹ",   label="Callout", description="Info, warning, success box"),
    BlockKind(type="image",   icon="⬜",  label="Image",   description="Image with caption"),
    BlockKind(type="table",   icon="⊞",   label="Table",   description="Editable grid"),
    BlockKind(type="divider", icon="—",   label="Divider", description="Horizontal separator"),
    BlockKind(type="button",  icon="⬡",   label="Button",  description="Linked button element"),
    BlockKind(type="badge",   icon="◉",   label="Badge",   description="Inline label badge"),
    BlockKind(type="quote",   icon="❝",   label="Quote",   description="Block quotation"),
]
