"""Process-wide keyboard events and the undo/redo shortcuts.

A host UI sends every keydown through `dispatch_keydown`. Mounted editing surfaces
subscribe to the `keydown` signal while mounted and disconnect when they unmount.
"""
from dataclasses import dataclass, field
from typing import Literal

from blinker import Namespace


keyboard_signals = Namespace()

keydown = keyboard_signals.signal("keydown")

KeyAction = Literal["undo", "redo"]


@dataclass
class KeyEvent:
    key               : str
    ctrl              : bool = False
    meta              : bool = False
    shift             : bool = False
    default_prevented : bool = field(default=False, init=False)

    @property
    def has_command_modifier(self) -> bool: return self.ctrl or self.meta

    def prevent_default(self) -> None:
        self.default_prevented = True


def resolve_action(event: KeyEvent) -> KeyAction | None:
    """ctrl/cmd+Z undoes, ctrl/cmd+Y and ctrl/cmd+shift+Z redo."""
    if not event.has_command_modifier:
        return None
    key = event.key.lower()
    if key == "z":
        return "redo" if event.shift else "undo"
    if key == "y":
        return "redo"
    return None


def dispatch_keydown(event: KeyEvent) -> KeyEvent:
    keydown.send(event)
    return event
