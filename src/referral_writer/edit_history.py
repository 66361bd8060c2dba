"""Bounded undo/redo history for one text buffer."""

import time
from enum import Enum
from typing import Callable, List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


class HistoryMode(Enum):
    """What the history is doing with incoming buffer writes."""
    IDLE = "idle"  # No pending edit
    RECORDING = "recording"  # A typed edit is waiting for the debounce deadline
    APPLYING_HISTORY_ENTRY = "applying_history_entry"  # Next matching write is ours


class EditHistory:
    """Linear undo/redo over snapshots of a text buffer.

    Typed edits are debounced: ``record_edit`` only remembers the latest text
    and pushes it once ``debounce_seconds`` pass without another call
    (``poll`` checks the deadline, ``flush`` forces it). Style transforms go
    through ``record_atomic_edit`` and are pushed immediately.

    After ``undo``/``redo``/``record_atomic_edit`` the caller writes the
    returned text into its buffer; the ``record_edit`` triggered by that
    write is swallowed so the history does not record itself.
    """

    MAX_ENTRIES = 50
    DEBOUNCE_SECONDS = 0.5

    def __init__(
        self,
        initial: str = "",
        max_entries: int = MAX_ENTRIES,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the history.

        Args:
            initial: Starting buffer content
            max_entries: Maximum snapshots kept (oldest evicted first)
            debounce_seconds: Quiet period before a typed edit is committed
            clock: Monotonic time source, injectable for tests
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.debounce_seconds = debounce_seconds
        self._clock = clock
        self.reset(initial)

    def reset(self, initial: str) -> None:
        """Start over with a single snapshot (a new document was loaded)."""
        self._snapshots: List[str] = [initial]
        self._cursor = 0
        self._pending: Optional[str] = None
        self._deadline: Optional[float] = None
        self._applied: Optional[str] = None
        self._mode = HistoryMode.IDLE

    @property
    def snapshots(self) -> List[str]:
        return list(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> str:
        return self._snapshots[self._cursor]

    @property
    def mode(self) -> HistoryMode:
        return self._mode

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0 or self.has_pending

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def _push(self, text: str) -> None:
        # Drop the redo branch, append, then enforce the cap
        if self._cursor < len(self._snapshots) - 1:
            del self._snapshots[self._cursor + 1:]
        self._snapshots.append(text)
        if len(self._snapshots) > self.max_entries:
            self._snapshots.pop(0)
        else:
            self._cursor += 1

    def _clear_pending(self) -> None:
        self._pending = None
        self._deadline = None

    def record_edit(self, text: str) -> None:
        """Note a buffer change made by the user typing."""
        if self._mode is HistoryMode.APPLYING_HISTORY_ENTRY:
            applied = self._applied
            self._applied = None
            self._mode = HistoryMode.IDLE
            if text == applied:
                return

        if text == self.current:
            # Typed back to the committed text
            self._clear_pending()
            self._mode = HistoryMode.IDLE
            return

        self._pending = text
        self._deadline = self._clock() + self.debounce_seconds
        self._mode = HistoryMode.RECORDING

    def poll(self) -> bool:
        """Commit the pending edit if its debounce deadline has passed.

        Returns:
            True if a snapshot was pushed
        """
        if self._pending is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Commit the pending edit now, ignoring the deadline.

        Returns:
            True if a snapshot was pushed
        """
        if self._pending is None:
            return False
        text = self._pending
        self._clear_pending()
        self._mode = HistoryMode.IDLE
        if text == self.current:
            return False
        self._push(text)
        return True

    def _enter_applying(self, text: str) -> None:
        self._applied = text
        self._mode = HistoryMode.APPLYING_HISTORY_ENTRY

    def record_atomic_edit(self, text: str) -> None:
        """Push a style transform immediately, bypassing the debounce.

        Any pending typed edit is dropped; ``text`` already contains it.
        """
        self._clear_pending()
        self._push(text)
        self._enter_applying(text)

    def undo(self) -> Optional[str]:
        """Step back one snapshot.

        Returns:
            The snapshot to write into the buffer, or None at the oldest entry
        """
        self.flush()
        if self._cursor == 0:
            return None
        self._cursor -= 1
        text = self._snapshots[self._cursor]
        self._enter_applying(text)
        logger.debug("Undo to snapshot %d of %d", self._cursor, len(self._snapshots))
        return text

    def redo(self) -> Optional[str]:
        """Step forward one snapshot.

        Returns:
            The snapshot to write into the buffer, or None at the newest entry
        """
        self.flush()
        if self._cursor >= len(self._snapshots) - 1:
            return None
        self._cursor += 1
        text = self._snapshots[self._cursor]
        self._enter_applying(text)
        logger.debug("Redo to snapshot %d of %d", self._cursor, len(self._snapshots))
        return text
