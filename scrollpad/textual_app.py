"""Textual frontend drawing the same buffer as a widget.

The editor logic is shared with the terminal frontend. The only difference
is the surface: instead of writing escape sequences, ``WidgetSurface``
refreshes the widgets on flush, and ``ViewportView`` renders the visible
slice of the buffer straight from editor state.
"""

from typing import Callable, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widget import Widget
from textual.widgets import Static

from .buffer import render_viewport
from .constants import EditorConstants
from .editor import Editor
from .keyboard import KeyEvent, KeyType
from .settings import Settings

_TEXTUAL_KEY_NAMES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
}


def key_event_from_textual(key: str, character: Optional[str]) -> Optional[KeyEvent]:
    """Translate a Textual key into the editor's KeyEvent."""
    if character is not None and len(character) == 1 and not key.startswith('ctrl+'):
        if character.isprintable():
            return KeyEvent(key_type=KeyType.REGULAR, value=character, raw=character)
    if key.startswith('ctrl+'):
        base = _TEXTUAL_KEY_NAMES.get(key[5:], key[5:])
        if len(base) == 1:
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key, is_ctrl=True)
        return KeyEvent(key_type=KeyType.CTRL_SPECIAL, value=base, raw=key,
                        is_ctrl=True, is_sequence=True)
    if '+' in key:
        # Other modifier combinations have no binding
        return None
    return KeyEvent(key_type=KeyType.SPECIAL, value=_TEXTUAL_KEY_NAMES.get(key, key),
                    raw=key, is_sequence=True)


class WidgetSurface:
    """Surface for the editor whose output is a widget refresh."""

    def __init__(self, width: int = 80, height: int = 24):
        self._width = width
        self._height = height
        self.status = ""
        self.on_flush: Optional[Callable[[], None]] = None

    def set_size(self, width: int, height: int):
        self._width = width
        self._height = height

    # The widgets render from editor state, so positional output is dropped
    def clear(self):
        pass

    def write(self, text: str):
        pass

    def move_to(self, column: int, row: int):
        pass

    def move_left(self, n: int = 1):
        pass

    def move_right(self, n: int = 1):
        pass

    def move_to_next_line(self):
        pass

    def draw_status(self, text: str):
        self.status = text

    def flush(self):
        if self.on_flush is not None:
            self.on_flush()

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return max(1, self._height - EditorConstants.STATUS_ROWS)


def render_editor_text(editor: Editor) -> Text:
    """Render the viewport, with the cursor cell shown in reverse video."""
    buffer = editor.buffer
    rows = render_viewport(buffer)
    row = buffer.cursor.visible_row
    if editor.session is not None:
        rows[row] = editor.session.text
        column = editor.session.column
    else:
        column, row = buffer.cursor_screen_position()

    text = Text(no_wrap=True, overflow="crop")
    for index, line in enumerate(rows):
        if index:
            text.append("\n")
        if index == row and editor.prompt_mode is None:
            cell = line[column:column + 1] or " "
            text.append(line[:column])
            text.append(cell, style="reverse")
            text.append(line[column + 1:])
        else:
            text.append(line)
    return text


class ViewportView(Widget):
    """Widget showing the visible lines of the editor's buffer."""

    DEFAULT_CSS = """
    ViewportView {
        height: 1fr;
    }
    """

    def __init__(self, editor: Editor, **kwargs):
        super().__init__(**kwargs)
        self.editor = editor

    def render(self) -> Text:
        return render_editor_text(self.editor)


class ScrollpadApp(App):
    """Textual app driving the shared editor."""

    CSS = """
    #status {
        dock: bottom;
        height: 1;
        background: $panel;
    }
    """

    BINDINGS = [
        # Route Ctrl-Q through the editor so unsaved changes are confirmed
        Binding("ctrl+q", "editor_quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, filename: Optional[str] = None, settings: Optional[Settings] = None):
        super().__init__()
        self.surface = WidgetSurface()
        self.editor = Editor(terminal=self.surface, settings=settings)
        if filename:
            self.editor.load_file(filename)

    def compose(self) -> ComposeResult:
        yield ViewportView(self.editor, id="viewport")
        yield Static(id="status")

    def on_mount(self) -> None:
        self.editor.running = True
        self.surface.on_flush = self._refresh_widgets
        self.surface.set_size(self.size.width, self.size.height)
        self.editor.handle_resize()
        self.editor.finish_frame()

    def on_resize(self, event: events.Resize) -> None:
        self.surface.set_size(event.size.width, event.size.height)
        self.editor.handle_resize()
        self.editor.finish_frame()

    def on_key(self, event: events.Key) -> None:
        key_event = key_event_from_textual(event.key, event.character)
        if key_event is None:
            return
        event.stop()
        self._dispatch(key_event)

    def action_editor_quit(self) -> None:
        self._dispatch(KeyEvent(key_type=KeyType.CTRL, value='q', raw='ctrl+q', is_ctrl=True))

    def _dispatch(self, key_event: KeyEvent) -> None:
        self.editor.handle_key_event(key_event)
        if not self.editor.running:
            self.exit()
            return
        self.editor.finish_frame()

    def _refresh_widgets(self) -> None:
        self.query_one("#status", Static).update(self.surface.status)
        self.query_one("#viewport", ViewportView).refresh()


def main(filename: Optional[str] = None, settings: Optional[Settings] = None):
    """Run the Textual app."""
    ScrollpadApp(filename=filename, settings=settings).run()
