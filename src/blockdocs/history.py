from __future__ import annotations

import copy

from typing import Generic, List, Self, TypeVar

from blockdocs.scheduling import Debouncer, Scheduler


T = TypeVar("T")

DEFAULT_DEBOUNCE = 0.3


class NoOp:
    """Returned by undo/redo when there is nowhere to move."""
    _instance: NoOp | None = None

    def __new__(cls) -> Self:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance  # type: ignore[return-value]

    def __bool__(self) -> bool: return False
    def __repr__(self) -> str: return "NO_OP"


NO_OP = NoOp()


class HistoryBuffer(Generic[T]):
    """Linear undo/redo over full document snapshots.

    Starts with exactly one entry at position 0. Any push made while not at the tip
    discards the entries after the current position. Snapshots are compared with `==`,
    so composite values (pydantic models, lists, dicts) compare structurally.

    Debounced pushes park the value as pending and restart the timer; when it fires the
    pending value becomes one new entry, so a burst of keystrokes is undone in one step.
    Immediate pushes drop anything pending and append right away.
    """

    def __init__(self,
        initial: T,
        delay: float = DEFAULT_DEBOUNCE,
        scheduler: Scheduler | None = None,
        max_entries: int | None = None,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: List[T] = [copy.deepcopy(initial)]
        self._position: int = 0
        self._pending: List[T] = []  # zero or one parked value
        self._debouncer = Debouncer(delay, scheduler)
        self.max_entries = max_entries

    # == Properties ===========================================================

    @property
    def position(self) -> int: return self._position

    @property
    def entries(self) -> List[T]: return copy.deepcopy(self._entries)

    @property
    def current(self) -> T: return copy.deepcopy(self._entries[self._position])

    @property
    def has_pending(self) -> bool: return bool(self._pending)

    @property
    def can_undo(self) -> bool: return self._position > 0 or self.has_pending

    @property
    def can_redo(self) -> bool: return self._position < len(self._entries) - 1

    def __len__(self) -> int: return len(self._entries)

    # == Pushes ===============================================================

    def push_debounced(self, value: T) -> None:
        self._pending[:] = [copy.deepcopy(value)]
        self._debouncer.call(self._commit_pending)

    def push_immediate(self, value: T) -> bool:
        """Append `value` now. Returns False when it equals the current snapshot."""
        self._debouncer.cancel()
        self._pending.clear()
        return self._append(copy.deepcopy(value))

    def flush_pending(self) -> bool:
        """Commit a parked debounced value immediately."""
        return self._debouncer.flush()

    def discard_pending(self) -> bool:
        """Drop a parked debounced value without recording it."""
        self._pending.clear()
        return self._debouncer.cancel()

    # == Navigation ===========================================================

    def undo(self) -> T | NoOp:
        self.flush_pending()
        if self._position == 0:
            return NO_OP
        self._position -= 1
        return self.current

    def redo(self) -> T | NoOp:
        self.flush_pending()
        if self._position >= len(self._entries) - 1:
            return NO_OP
        self._position += 1
        return self.current

    # == Internals ============================================================

    def _commit_pending(self) -> None:
        if self._pending:
            self._append(self._pending.pop())

    def _append(self, value: T) -> bool:
        if value == self._entries[self._position]:
            return False
        del self._entries[self._position + 1:]
        self._entries.append(value)
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            del self._entries[:len(self._entries) - self.max_entries]
        self._position = len(self._entries) - 1
        return True
