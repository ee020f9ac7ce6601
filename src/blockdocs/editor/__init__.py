# editor/__init__.py

# isort: off
from .keyboard import KeyEvent, dispatch_keydown, keydown, resolve_action
from .rich_text import EditableRegion, plain_text
from .base import EditingSurface, content_changed
from .block_editors import BlockEditor, editor_for
from .surface import DocumentSurface
from .markdown_editor import MarkdownSurface, Selection
from .session import EditorSession
# isort: on


__all__ = [
    "KeyEvent",
    "dispatch_keydown",
    "keydown",
    "resolve_action",
    "EditableRegion",
    "plain_text",
    "EditingSurface",
    "content_changed",
    "BlockEditor",
    "editor_for",
    "DocumentSurface",
    "MarkdownSurface",
    "Selection",
    "EditorSession",
]
