"""Interactive editor for generated documents.

``EditorController`` holds the buffer logic (history, bold styling, caret and
scroll bookkeeping) and knows nothing about the terminal. ``run_editor`` hosts
it in a prompt_toolkit full-screen application.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from prompt_toolkit.application import Application
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import Frame, TextArea

from .bold import to_bold
from .edit_history import EditHistory
from .logging_config import get_logger

logger = get_logger(__name__)

# Shortcut actions
BOLD = "bold"
UNDO = "undo"
REDO = "redo"

# How often the event loop checks the history debounce deadline
POLL_INTERVAL_SECONDS = 0.1


@dataclass
class EditorState:
    """Buffer content plus where the caret and viewport should end up."""
    text: str
    cursor: int
    scroll_offset: int = 0


def resolve_shortcut(key: str, ctrl: bool = False, meta: bool = False, shift: bool = False) -> Optional[str]:
    """Map a key press to an editor action.

    Ctrl/Cmd+B bolds, Ctrl/Cmd+Z undoes, Ctrl/Cmd+Shift+Z and Ctrl/Cmd+Y redo.

    Returns:
        BOLD, UNDO, REDO or None
    """
    if not (ctrl or meta):
        return None
    key = key.lower()
    if key == "b":
        return BOLD
    if key == "z":
        return REDO if shift else UNDO
    if key == "y":
        return REDO
    return None


class EditorController:
    """Buffer, caret and scroll state for one open document."""

    def __init__(self, text: str = "", history: Optional[EditHistory] = None):
        self.history = history if history is not None else EditHistory()
        self.load(text)

    def load(self, text: str) -> None:
        """Show a freshly generated document and reset its history."""
        self.text = text
        self.cursor = 0
        self.scroll_offset = 0
        self.history.reset(text)

    @property
    def state(self) -> EditorState:
        return EditorState(self.text, self.cursor, self.scroll_offset)

    def on_user_edit(self, text: str, cursor: Optional[int] = None) -> None:
        """Feed a buffer change (typing or a programmatic write) into the history."""
        self.text = text
        if cursor is not None:
            self.cursor = cursor
        self.history.record_edit(text)

    def apply_bold(self, start: int, end: int, scroll_offset: Optional[int] = None) -> Optional[EditorState]:
        """Bold the selection ``[start, end)`` as one undoable step.

        The caret lands right after the styled run and the viewport goes back
        to ``scroll_offset`` (captured before the change).

        Returns:
            The new state, or None when the selection is empty
        """
        start, end = sorted((max(0, start), min(len(self.text), end)))
        if start == end:
            return None

        if scroll_offset is None:
            scroll_offset = self.scroll_offset

        styled = to_bold(self.text[start:end])
        new_text = self.text[:start] + styled + self.text[end:]
        self.history.record_atomic_edit(new_text)

        self.text = new_text
        self.cursor = start + len(styled)
        self.scroll_offset = scroll_offset
        return self.state

    def _apply_history_entry(self, text: Optional[str], cursor: Optional[int]) -> Optional[EditorState]:
        if text is None:
            return None
        position = self.cursor if cursor is None else cursor
        self.text = text
        self.cursor = min(position, len(text))
        return self.state

    def undo(self, cursor: Optional[int] = None) -> Optional[EditorState]:
        return self._apply_history_entry(self.history.undo(), cursor)

    def redo(self, cursor: Optional[int] = None) -> Optional[EditorState]:
        return self._apply_history_entry(self.history.redo(), cursor)

    def handle_action(
        self,
        action: str,
        selection_start: int = 0,
        selection_end: int = 0,
        scroll_offset: Optional[int] = None,
    ) -> Optional[EditorState]:
        """Run a resolved shortcut action against the current buffer."""
        if action == BOLD:
            return self.apply_bold(selection_start, selection_end, scroll_offset)
        if action == UNDO:
            return self.undo(selection_start)
        if action == REDO:
            return self.redo(selection_start)
        raise ValueError(f"Unknown editor action: {action}")

    def handle_key(
        self,
        key: str,
        ctrl: bool = False,
        meta: bool = False,
        shift: bool = False,
        selection_start: int = 0,
        selection_end: int = 0,
        scroll_offset: Optional[int] = None,
    ) -> Optional[EditorState]:
        """Resolve a key press and run it. Unbound keys return None."""
        action = resolve_shortcut(key, ctrl=ctrl, meta=meta, shift=shift)
        if action is None:
            return None
        return self.handle_action(action, selection_start, selection_end, scroll_offset)


def run_editor(text: str, title: str = "Body") -> Optional[str]:
    """Edit ``text`` in a full-screen terminal editor.

    Ctrl+B bolds the selection, Ctrl+Z undoes, Ctrl+Y redoes, Ctrl+S saves
    and Esc discards.

    Returns:
        The edited text, or None if the user discarded the changes
    """
    controller = EditorController(text)
    text_area = TextArea(text=text, multiline=True, scrollbar=True, wrap_lines=True)

    def on_text_changed(buffer) -> None:
        controller.on_user_edit(buffer.text, buffer.cursor_position)

    text_area.buffer.on_text_changed += on_text_changed

    def write_state(state: Optional[EditorState]) -> None:
        if state is None:
            return
        text_area.buffer.set_document(Document(state.text, state.cursor), bypass_readonly=True)
        # Setting the caret scrolls it into view; put the viewport back
        text_area.window.vertical_scroll = state.scroll_offset

    def current_selection():
        document = text_area.buffer.document
        if text_area.buffer.selection_state is None:
            return document.cursor_position, document.cursor_position
        return document.selection_range()

    kb = KeyBindings()

    @kb.add("c-b")
    def _bold(event):
        start, end = current_selection()
        state = controller.handle_action(BOLD, start, end, text_area.window.vertical_scroll)
        if state is not None:
            text_area.buffer.exit_selection()
        write_state(state)

    @kb.add("c-z")
    def _undo(event):
        write_state(controller.handle_action(UNDO, text_area.buffer.cursor_position))

    # Terminals cannot send Ctrl-Shift-Z, so redo is bound to Ctrl-Y only
    @kb.add("c-y")
    def _redo(event):
        write_state(controller.handle_action(REDO, text_area.buffer.cursor_position))

    @kb.add("c-s")
    def _save(event):
        event.app.exit(result=text_area.text)

    @kb.add("escape", eager=True)
    def _cancel(event):
        event.app.exit(result=None)

    help_bar = Window(
        FormattedTextControl(
            HTML("<b>Ctrl-B</b> bold  <b>Ctrl-Z</b> undo  <b>Ctrl-Y</b> redo  "
                 "<b>Ctrl-S</b> save  <b>Esc</b> discard")
        ),
        height=1,
    )
    app = Application(
        layout=Layout(HSplit([Frame(text_area, title=title), help_bar]), focused_element=text_area),
        key_bindings=kb,
        full_screen=True,
        mouse_support=False,
    )

    async def poll_history():
        while True:
            controller.history.poll()
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

    def start_polling():
        app.create_background_task(poll_history())

    result = app.run(pre_run=start_polling)
    logger.debug("Editor closed with %s", "changes saved" if result is not None else "changes discarded")
    return result
